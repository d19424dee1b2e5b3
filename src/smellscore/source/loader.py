"""File discovery, reading, and parsing — the front end feeding the rule engine."""

from __future__ import annotations

import ast
import logging
import os
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable, List, Optional, Union

from smellscore.source.models import SourceSkipped, SourceUnit, split_lines

logger = logging.getLogger(__name__)

_SKIP_DIRS = {"__pycache__", "node_modules", "venv", "site-packages"}


def count_lines(text: str) -> int:
    """Number of lines in *text*, as the scorer counts them."""
    return len(split_lines(text))


def _is_excluded(relpath: str, patterns: Iterable[str]) -> bool:
    name = relpath.rsplit("/", 1)[-1]
    for pat in patterns:
        if fnmatch(relpath, pat) or fnmatch(name, pat):
            return True
        # "build/*" should also exclude everything below build/
        if pat.endswith("/*") and relpath.startswith(pat[:-1]):
            return True
    return False


def discover_files(
    root: Path,
    extensions: Iterable[str] = (".py",),
    exclude: Iterable[str] = (),
) -> List[Path]:
    """Return the analyzable files under *root* in a stable, sorted order.

    A file root is returned as-is when its suffix matches. Directory roots
    are walked recursively; hidden directories and caches are pruned.
    """
    suffixes = tuple(extensions)
    patterns = list(exclude)

    if root.is_file():
        if root.suffix in suffixes and not _is_excluded(root.name, patterns):
            return [root]
        return []
    if not root.is_dir():
        return []

    found: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            d for d in dirnames if not d.startswith(".") and d not in _SKIP_DIRS
        )
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if path.suffix not in suffixes:
                continue
            relpath = path.relative_to(root).as_posix()
            if _is_excluded(relpath, patterns):
                logger.debug("Excluded %s", relpath)
                continue
            found.append(path)
    return found


def parse_source(path: str, text: str) -> Optional[ast.Module]:
    """Parse *text* into an AST, or return None when it is not valid Python."""
    try:
        return ast.parse(text, filename=path)
    except (SyntaxError, ValueError, RecursionError, MemoryError) as exc:
        logger.debug("Could not parse %s: %s", path, exc)
        return None


def load_source(
    path: Path,
    display_path: Optional[str] = None,
    max_size_kb: Optional[int] = None,
) -> Union[SourceUnit, SourceSkipped]:
    """Read and parse one file.

    Unreadable or unparsable files still yield a SourceUnit (with
    ``tree=None``) so they are counted but contribute no findings.
    """
    shown = display_path or path.as_posix()

    if max_size_kb:
        try:
            if path.stat().st_size > max_size_kb * 1024:
                return SourceSkipped(path=shown, reason="oversized")
        except OSError:
            pass

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Could not read %s: %s", shown, exc)
        return SourceUnit(path=shown, text="", tree=None)

    return SourceUnit(path=shown, text=text, tree=parse_source(shown, text))
