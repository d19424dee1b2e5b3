"""Tests for the CLI commands."""

import json
from pathlib import Path

from typer.testing import CliRunner

from smellscore.cli import app

runner = CliRunner()


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "smellscore" in result.output


class TestAnalyze:
    def test_clean_project_json(self, write_project, clean_source):
        root = write_project({"greet.py": clean_source})
        result = runner.invoke(app, ["analyze", str(root), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["total_findings"] == 0
        assert data["score"]["total"] == 0.0
        assert data["score"]["quality_level"] == "excellent"

    def test_smelly_project_terminal(self, write_project, smelly_source):
        root = write_project({"process.py": smelly_source})
        result = runner.invoke(app, ["analyze", str(root)])
        assert result.exit_code == 0
        assert "Smell Score" in result.output
        assert "process.py" in result.output

    def test_summary_flag(self, write_project, smelly_source):
        root = write_project({"process.py": smelly_source})
        result = runner.invoke(app, ["analyze", str(root), "--summary"])
        assert result.exit_code == 0
        assert "Smell Score" in result.output
        assert "Categories" not in result.output

    def test_sarif_format(self, write_project, smelly_source):
        root = write_project({"process.py": smelly_source})
        result = runner.invoke(app, ["analyze", str(root), "-f", "sarif"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["version"] == "2.1.0"
        assert data["runs"][0]["results"]

    def test_fail_above(self, write_project, smelly_source):
        root = write_project({"process.py": smelly_source})
        result = runner.invoke(app, ["analyze", str(root), "--fail-above", "0"])
        assert result.exit_code == 1

    def test_fail_above_not_reached(self, write_project, clean_source):
        root = write_project({"greet.py": clean_source})
        result = runner.invoke(app, ["analyze", str(root), "--fail-above", "10"])
        assert result.exit_code == 0

    def test_fail_above_from_config(self, write_project, smelly_source):
        root = write_project({
            "process.py": smelly_source,
            ".smellscore.toml": "[scoring]\nfail_above = 0.0\n",
        })
        result = runner.invoke(app, ["analyze", str(root), "-f", "json"])
        assert result.exit_code == 1

    def test_output_file_gets_json(self, write_project, smelly_source, tmp_path: Path):
        root = write_project({"process.py": smelly_source})
        report = tmp_path / "out" / "report.json"
        report.parent.mkdir()
        result = runner.invoke(app, ["analyze", str(root), "-o", str(report)])
        assert result.exit_code == 0
        data = json.loads(report.read_text())
        assert data["total_findings"] > 0

    def test_exclude_option(self, write_project, smelly_source):
        root = write_project({"legacy/old.py": smelly_source, "new.py": "answer = 1\n"})
        result = runner.invoke(app, ["analyze", str(root), "-f", "json", "-e", "legacy/*"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["file_count"] == 1
        assert data["total_findings"] == 0

    def test_min_severity_hides_mild(self, write_project):
        root = write_project({"talk.py": "def talk():\n    print('hi')\n"})
        result = runner.invoke(app, ["analyze", str(root), "--min-severity", "spicy"])
        assert result.exit_code == 0
        assert "No smells found" in result.output

    def test_missing_path(self, tmp_path: Path):
        result = runner.invoke(app, ["analyze", str(tmp_path / "missing")])
        assert result.exit_code == 2

    def test_no_python_files(self, tmp_path: Path):
        (tmp_path / "notes.txt").write_text("nothing to see")
        result = runner.invoke(app, ["analyze", str(tmp_path)])
        assert result.exit_code == 2
        assert "no Python files" in result.output

    def test_invalid_format(self, write_project, clean_source):
        root = write_project({"greet.py": clean_source})
        result = runner.invoke(app, ["analyze", str(root), "-f", "html"])
        assert result.exit_code == 2

    def test_invalid_severity(self, write_project, clean_source):
        root = write_project({"greet.py": clean_source})
        result = runner.invoke(app, ["analyze", str(root), "--min-severity", "extreme"])
        assert result.exit_code == 2

    def test_negative_workers(self, write_project, clean_source):
        root = write_project({"greet.py": clean_source})
        result = runner.invoke(app, ["analyze", str(root), "-w", "-1"])
        assert result.exit_code == 2

    def test_bad_config(self, write_project, clean_source):
        root = write_project({"greet.py": clean_source, ".smellscore.toml": "not [valid"})
        result = runner.invoke(app, ["analyze", str(root)])
        assert result.exit_code == 2
        assert "Config error" in result.output

    def test_bad_custom_rule(self, write_project, clean_source):
        root = write_project({
            "greet.py": clean_source,
            ".smellscore-rules/broken.yaml": "- name: missing id and pattern\n",
        })
        result = runner.invoke(app, ["analyze", str(root)])
        assert result.exit_code == 2

    def test_custom_rule_findings(self, write_project):
        root = write_project({
            "app.py": "import pdb\n",
            ".smellscore-rules/debug.yaml": (
                "- id: no-pdb\n"
                "  pattern: 'import pdb'\n"
                "  severity: spicy\n"
                "  category: language-basics\n"
            ),
        })
        result = runner.invoke(app, ["analyze", str(root), "-f", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [f["rule"] for f in data["findings"]] == ["no-pdb"]
        assert data["score"]["categories"]["language-basics"] > 0


class TestRules:
    def test_lists_builtin_rules(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("COLUMNS", "200")
        result = runner.invoke(app, ["rules", str(tmp_path)])
        assert result.exit_code == 0
        assert "code-duplication" in result.output
        assert "unscored" in result.output

    def test_reflects_disabled_rules(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("COLUMNS", "200")
        (tmp_path / ".smellscore.toml").write_text('[rules]\ndisable = ["magic-number"]\n')
        result = runner.invoke(app, ["rules", str(tmp_path)])
        assert result.exit_code == 0
        line = next(l for l in result.output.splitlines() if "magic-number" in l)
        assert "✗" in line


class TestInit:
    def test_creates_config(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        assert (tmp_path / ".smellscore.toml").exists()

    def test_refuses_overwrite(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".smellscore.toml").write_text("existing")
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 1
        assert (tmp_path / ".smellscore.toml").read_text() == "existing"

    def test_force_overwrites(self, tmp_path: Path):
        (tmp_path / ".smellscore.toml").write_text("existing")
        result = runner.invoke(app, ["init", str(tmp_path), "--force"])
        assert result.exit_code == 0
        assert "[analysis]" in (tmp_path / ".smellscore.toml").read_text()


class TestAudit:
    def test_lists_suppressions(self, write_project):
        root = write_project({
            "app.py": "answer = 42  # smellscore: ignore[magic-number]\n",
            "pkg/run.py": "# noqa: smellscore\nresult = eval(text)\n",
        })
        result = runner.invoke(app, ["audit", str(root)])
        assert result.exit_code == 0
        assert "Found 2 suppression comment(s)" in result.output
        assert "magic-number" in result.output
        assert "ALL" in result.output

    def test_skips_files_analyze_would_not_read(self, write_project):
        root = write_project({
            "app.py": "answer = 42  # smellscore: ignore\n",
            "vendor/lib.py": "answer = 42  # smellscore: ignore\n",
            "generated.py": "answer = 42  # smellscore: ignore\n",
            ".smellscoreignore": "generated.py\n",
            ".smellscore.toml": '[analysis]\nexclude = ["vendor/*"]\n',
        })
        result = runner.invoke(app, ["audit", str(root)])
        assert result.exit_code == 0
        assert "Found 1 suppression comment(s)" in result.output
        assert "app.py" in result.output
        assert "vendor" not in result.output
        assert "generated" not in result.output

    def test_no_suppressions(self, write_project, clean_source):
        root = write_project({"greet.py": clean_source})
        result = runner.invoke(app, ["audit", str(root)])
        assert result.exit_code == 0
        assert "No smellscore suppression comments found" in result.output

    def test_missing_path(self, tmp_path: Path):
        result = runner.invoke(app, ["audit", str(tmp_path / "missing")])
        assert result.exit_code == 2
