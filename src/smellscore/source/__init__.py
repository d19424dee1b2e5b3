"""Source front end — discovery, reading, and parsing into SourceUnits."""

from smellscore.source.loader import count_lines, discover_files, load_source, parse_source
from smellscore.source.models import SourceSkipped, SourceUnit, split_lines

__all__ = [
    "SourceSkipped",
    "SourceUnit",
    "count_lines",
    "discover_files",
    "load_source",
    "parse_source",
    "split_lines",
]
