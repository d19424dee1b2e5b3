"""Built-in rules — aggregate all categories."""

from __future__ import annotations

from typing import List, Optional

from smellscore.config.schema import SmellScoreConfig
from smellscore.rules.builtin.advanced import ALL_ADVANCED_RULES
from smellscore.rules.builtin.basics import ALL_BASICS_RULES
from smellscore.rules.builtin.complexity import ALL_COMPLEXITY_RULES
from smellscore.rules.builtin.duplication import CodeDuplicationRule
from smellscore.rules.builtin.hygiene import ALL_HYGIENE_RULES
from smellscore.rules.builtin.naming import ALL_NAMING_RULES
from smellscore.rules.builtin.special import ALL_SPECIAL_RULES
from smellscore.rules.builtin.structure import ALL_STRUCTURE_RULES
from smellscore.rules.models import Rule

ALL_BUILTIN_RULES: List[type[Rule]] = [
    *ALL_NAMING_RULES,
    *ALL_COMPLEXITY_RULES,
    CodeDuplicationRule,
    *ALL_BASICS_RULES,
    *ALL_ADVANCED_RULES,
    *ALL_SPECIAL_RULES,
    *ALL_STRUCTURE_RULES,
    *ALL_HYGIENE_RULES,
]


def builtin_rules(config: Optional[SmellScoreConfig] = None) -> List[Rule]:
    """Fresh instances of every built-in rule, configured from *config*."""
    config = config or SmellScoreConfig()
    rules: List[Rule] = []
    for cls in ALL_BUILTIN_RULES:
        if cls is CodeDuplicationRule:
            rules.append(CodeDuplicationRule(config.duplication))
        else:
            rules.append(cls())
    return rules


__all__ = ["ALL_BUILTIN_RULES", "builtin_rules"]
