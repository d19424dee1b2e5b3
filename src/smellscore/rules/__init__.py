"""Rule engine — models, registry, built-in rules."""

from smellscore.rules.models import PatternRule, Rule
from smellscore.rules.registry import RuleRegistry, build_registry

__all__ = ["PatternRule", "Rule", "RuleRegistry", "build_registry"]
