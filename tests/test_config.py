"""Tests for config loading, validation, and env var overrides."""

from pathlib import Path

import pytest

from smellscore.config.defaults import DEFAULT_TOML
from smellscore.config.loader import CONFIG_FILENAME, ConfigError, load_config
from smellscore.config.schema import SmellScoreConfig, severity_at_or_above


class TestSeverityComparison:
    def test_at_or_above(self):
        assert severity_at_or_above("nuclear", "spicy") is True
        assert severity_at_or_above("spicy", "spicy") is True
        assert severity_at_or_above("mild", "spicy") is False

    def test_all_levels(self):
        assert severity_at_or_above("mild", "mild") is True
        assert severity_at_or_above("spicy", "mild") is True
        assert severity_at_or_above("nuclear", "mild") is True


class TestConfigLoading:
    def test_default_config(self, tmp_path: Path):
        cfg = load_config(tmp_path)
        assert cfg == SmellScoreConfig()
        assert cfg.output.format == "terminal"
        assert cfg.analysis.extensions == [".py"]
        assert cfg.duplication.min_occurrences == 3

    def test_custom_toml(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text(
            'version = "1.0"\n'
            "[analysis]\n"
            'exclude = ["migrations/*"]\n'
            "workers = 2\n"
            "[duplication]\n"
            "min_block_size = 80\n"
            "[scoring]\n"
            "fail_above = 35.5\n"
            "[scoring.rule_categories]\n"
            'print-debugging = "language-basics"\n'
        )
        cfg = load_config(tmp_path)
        assert cfg.analysis.exclude == ["migrations/*"]
        assert cfg.analysis.workers == 2
        assert cfg.duplication.min_block_size == 80
        assert cfg.scoring.fail_above == 35.5
        assert cfg.scoring.rule_categories == {"print-debugging": "language-basics"}

    def test_starter_template_loads(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text(DEFAULT_TOML)
        assert load_config(tmp_path) == SmellScoreConfig()

    def test_unknown_keys_ignored(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text("[output]\ncolour = 'always'\ntop_files = 9\n")
        assert load_config(tmp_path).output.top_files == 9

    def test_file_root_uses_parent_dir(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text("[output]\ntop_files = 2\n")
        module = tmp_path / "mod.py"
        module.write_text("answer = 1\n")
        assert load_config(module).output.top_files == 2

    def test_config_override_path(self, tmp_path: Path):
        custom = tmp_path / "custom.toml"
        custom.write_text('[output]\nformat = "json"\n')
        cfg = load_config(tmp_path, config_override=str(custom))
        assert cfg.output.format == "json"

    def test_missing_override_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError):
            load_config(tmp_path, config_override="/nonexistent/config.toml")

    def test_invalid_toml_raises(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text("this is not valid [toml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_section_must_be_table(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text('analysis = "everything"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_unknown_format_rejected(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text('[output]\nformat = "html"\n')
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_min_occurrences_floor(self, tmp_path: Path):
        (tmp_path / CONFIG_FILENAME).write_text("[duplication]\nmin_occurrences = 1\n")
        with pytest.raises(ConfigError):
            load_config(tmp_path)


class TestEnvVarOverrides:
    def test_format_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("SMELLSCORE_FORMAT", "sarif")
        assert load_config(tmp_path).output.format == "sarif"

    def test_unknown_format_env_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("SMELLSCORE_FORMAT", "html")
        assert load_config(tmp_path).output.format == "terminal"

    def test_disable_rules_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("SMELLSCORE_DISABLE_RULES", "magic-number, todo-comment")
        cfg = load_config(tmp_path)
        assert cfg.rules.disable == ["magic-number", "todo-comment"]

    def test_exclude_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("SMELLSCORE_EXCLUDE", "build/*")
        assert "build/*" in load_config(tmp_path).analysis.exclude

    def test_workers_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("SMELLSCORE_WORKERS", "3")
        assert load_config(tmp_path).analysis.workers == 3

    def test_invalid_workers_ignored(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("SMELLSCORE_WORKERS", "lots")
        assert load_config(tmp_path).analysis.workers == 0

    def test_fail_above_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("SMELLSCORE_FAIL_ABOVE", "42")
        assert load_config(tmp_path).scoring.fail_above == 42.0

    def test_env_extends_file_values(self, tmp_path: Path, monkeypatch):
        (tmp_path / CONFIG_FILENAME).write_text('[rules]\ndisable = ["slice-abuse"]\n')
        monkeypatch.setenv("SMELLSCORE_DISABLE_RULES", "magic-number")
        cfg = load_config(tmp_path)
        assert cfg.rules.disable == ["slice-abuse", "magic-number"]
