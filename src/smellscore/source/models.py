"""Data models for analyzed source files."""

from __future__ import annotations

import ast
import re
from dataclasses import dataclass, field
from typing import List, Optional

# Line breaks as ast and tokenize count them; \f, \v and \x85 are not breaks.
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> List[str]:
    """Split *text* into lines numbered the way ``ast`` and ``tokenize`` number them."""
    lines = _LINE_BREAK_RE.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


@dataclass(frozen=True)
class SourceUnit:
    """One file as handed to the rules: path, full text, parsed tree.

    ``tree`` is None when the file could not be read or parsed; rules treat
    such a unit as having nothing to report.
    """

    path: str
    text: str
    tree: Optional[ast.Module] = field(default=None, repr=False, compare=False)

    @property
    def lines(self) -> List[str]:
        return split_lines(self.text)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def is_parsed(self) -> bool:
        return self.tree is not None


@dataclass(frozen=True)
class SourceSkipped:
    """Record of a file that was not analyzed at all."""

    path: str
    reason: str  # 'oversized'
