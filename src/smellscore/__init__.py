"""smellscore — Python code-smell detection and quality scoring."""

__version__ = "0.1.0"
