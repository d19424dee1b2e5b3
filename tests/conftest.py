"""Shared test fixtures — sample sources, source units, temp projects."""

from __future__ import annotations

import ast
import textwrap
from pathlib import Path
from typing import Callable, Dict

import pytest

from smellscore.findings.models import Finding, Location
from smellscore.source.models import SourceUnit


def make_unit(text: str, path: str = "sample.py") -> SourceUnit:
    """Build a parsed SourceUnit from (dedented) source text."""
    text = textwrap.dedent(text)
    return SourceUnit(path=path, text=text, tree=ast.parse(text))


def make_finding(rule_id: str, severity: str = "mild", file: str = "a.py", line: int = 1) -> Finding:
    return Finding(
        location=Location(file=file, line=line),
        rule_id=rule_id,
        message=f"{rule_id} here",
        severity=severity,  # type: ignore[arg-type]
    )


@pytest.fixture
def clean_source() -> str:
    """A small module with nothing to complain about."""
    return textwrap.dedent("""\
        \"\"\"Greeting helpers.\"\"\"

        import logging

        logger = logging.getLogger(__name__)


        def greet(name: str) -> str:
            message = f"Hello, {name}!"
            logger.debug("greeting %s", name)
            return message
    """)


@pytest.fixture
def smelly_source() -> str:
    """A module that trips several rules at once."""
    return textwrap.dedent("""\
        def process(data, items=[]):
            try:
                result = eval(data)
            except:
                result = None
            print(result)
            return result
    """)


@pytest.fixture
def duplicated_source() -> str:
    """The same long line repeated four times."""
    return textwrap.dedent("""\
        total_price = quantity * unit_price
        total_price = quantity * unit_price
        total_price = quantity * unit_price
        total_price = quantity * unit_price
    """)


@pytest.fixture
def write_project(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """Write ``{relative path: source}`` into tmp_path and return the root."""

    def _write(files: Dict[str, str]) -> Path:
        for rel, text in files.items():
            target = tmp_path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(textwrap.dedent(text), encoding="utf-8")
        return tmp_path

    return _write
