"""Rule registry — loads built-in and custom rules, applies config filters."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from smellscore.config.loader import ConfigError
from smellscore.config.schema import SEVERITY_ORDER, SmellScoreConfig
from smellscore.rules.models import PatternRule, Rule

CUSTOM_RULES_DIRNAME = ".smellscore-rules"


class RuleRegistry:
    """Central store for all detection rules, in registration order."""

    def __init__(self) -> None:
        self._rules: Dict[str, Rule] = {}

    # ---- registration ----

    def register(self, rule: Rule) -> None:
        self._rules[rule.id] = rule

    def register_many(self, rules: list[Rule]) -> None:
        for r in rules:
            self.register(r)

    # ---- queries ----

    @property
    def all_rules(self) -> List[Rule]:
        return list(self._rules.values())

    def get(self, rule_id: str) -> Optional[Rule]:
        return self._rules.get(rule_id)

    def enabled_rules(self) -> List[Rule]:
        return [r for r in self._rules.values() if r.enabled]

    def custom_categories(self) -> Dict[str, str]:
        """rule_id -> category for custom rules that declare one."""
        return {
            r.id: r.category
            for r in self._rules.values()
            if isinstance(r, PatternRule) and r.category
        }

    # ---- config filtering ----

    def apply_config(self, config: SmellScoreConfig) -> None:
        """Enable / disable rules based on config.rules + config.ignore.rules."""
        enable_list = config.rules.enable
        disable_list = config.rules.disable
        ignore_rules = config.ignore.rules

        for rule in self._rules.values():
            # If an explicit enable-list exists, only those are enabled
            if enable_list:
                rule.enabled = rule.id in enable_list
            # Disable list always takes precedence
            if rule.id in disable_list or rule.id in ignore_rules:
                rule.enabled = False

    # ---- custom rule loading ----

    def load_custom_rules(self, directory: Path) -> int:
        """Load YAML rule files from *directory*. Returns count loaded."""
        count = 0
        if not directory.is_dir():
            return 0
        for path in sorted(directory.iterdir()):
            if path.suffix in (".yaml", ".yml"):
                count += self._load_yaml_rules(path)
        return count

    def _load_yaml_rules(self, path: Path) -> int:
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Failed to load custom rules from {path}: {exc}") from exc
        if data is None:
            return 0
        if not isinstance(data, list):
            data = [data]
        count = 0
        for entry in data:
            self.register(_pattern_rule_from_entry(entry, path))
            count += 1
        return count


def _pattern_rule_from_entry(entry: object, path: Path) -> PatternRule:
    if not isinstance(entry, dict) or "id" not in entry or "pattern" not in entry:
        raise ConfigError(f"{path}: each custom rule needs at least 'id' and 'pattern'")
    severity = entry.get("severity", "mild")
    if severity not in SEVERITY_ORDER:
        raise ConfigError(f"{path}: rule {entry['id']!r} has unknown severity {severity!r}")
    try:
        re.compile(entry["pattern"])
    except re.error as exc:
        raise ConfigError(f"{path}: rule {entry['id']!r} has an invalid pattern: {exc}") from exc
    return PatternRule(
        id=str(entry["id"]),
        name=entry.get("name", entry["id"]),
        description=entry.get("description", ""),
        pattern=entry["pattern"],
        severity=severity,
        category=entry.get("category"),
    )


def build_registry(config: SmellScoreConfig, root: Optional[Path] = None) -> RuleRegistry:
    """Create a fully populated, config-filtered rule registry."""
    from smellscore.rules.builtin import builtin_rules

    registry = RuleRegistry()
    registry.register_many(builtin_rules(config))

    if root is not None:
        base = root if root.is_dir() else root.parent
        registry.load_custom_rules(base / CUSTOM_RULES_DIRNAME)

    registry.apply_config(config)

    # Force-compile patterns now (not inside the per-file loop)
    for rule in registry.enabled_rules():
        if isinstance(rule, PatternRule):
            _ = rule.compiled_pattern

    return registry
