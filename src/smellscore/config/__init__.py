"""Configuration loading, schema, and defaults."""

from smellscore.config.loader import ConfigError, load_config
from smellscore.config.schema import (
    SEVERITY_ORDER,
    Severity,
    SmellScoreConfig,
    severity_at_or_above,
)

__all__ = [
    "ConfigError",
    "SEVERITY_ORDER",
    "Severity",
    "SmellScoreConfig",
    "load_config",
    "severity_at_or_above",
]
