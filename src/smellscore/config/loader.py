"""Load and merge configuration from .smellscore.toml, CLI flags, and env vars."""

from __future__ import annotations

import dataclasses
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

from smellscore.config.schema import (
    OUTPUT_FORMATS,
    AnalysisConfig,
    DuplicationConfig,
    IgnoreConfig,
    OutputConfig,
    RulesConfig,
    ScoringConfig,
    SmellScoreConfig,
)

CONFIG_FILENAME = ".smellscore.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    base = root if root.is_dir() else root.parent
    candidate = base / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _merge_env_overrides(cfg: SmellScoreConfig) -> None:
    """Apply SMELLSCORE_* environment variable overrides."""
    if val := os.environ.get("SMELLSCORE_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("SMELLSCORE_DISABLE_RULES"):
        cfg.rules.disable.extend(r.strip() for r in val.split(",") if r.strip())
    if val := os.environ.get("SMELLSCORE_EXCLUDE"):
        cfg.analysis.exclude.extend(p.strip() for p in val.split(os.pathsep) if p.strip())
    if val := os.environ.get("SMELLSCORE_WORKERS"):
        try:
            cfg.analysis.workers = max(0, int(val))
        except ValueError:
            pass
    if val := os.environ.get("SMELLSCORE_FAIL_ABOVE"):
        try:
            cfg.scoring.fail_above = float(val)
        except ValueError:
            pass


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: SmellScoreConfig) -> None:
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Unknown output format: {cfg.output.format}")
    if not isinstance(cfg.scoring.rule_categories, dict):
        raise ConfigError("[scoring] rule_categories must be a table of rule = category")
    if cfg.duplication.min_occurrences < 2:
        raise ConfigError("[duplication] min_occurrences must be at least 2")


def load_config(
    root: Path,
    config_override: Optional[str] = None,
) -> SmellScoreConfig:
    """Load, validate, and return a SmellScoreConfig."""
    config_path = find_config_file(root, config_override)

    if config_path is None:
        cfg = SmellScoreConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = SmellScoreConfig(
                version=str(raw.get("version", "1.0")),
                analysis=_build_section(raw, AnalysisConfig, "analysis"),
                output=_build_section(raw, OutputConfig, "output"),
                rules=_build_section(raw, RulesConfig, "rules"),
                duplication=_build_section(raw, DuplicationConfig, "duplication"),
                ignore=_build_section(raw, IgnoreConfig, "ignore"),
                scoring=_build_section(raw, ScoringConfig, "scoring"),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid value in {config_path}: {exc}") from exc

    _merge_env_overrides(cfg)
    _validate(cfg)
    return cfg
