"""Rich terminal reporter — score panel, category table, worst files."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from smellscore.findings.aggregator import filter_by_severity, worst_files
from smellscore.findings.models import AnalysisResult
from smellscore.scoring.scorer import QualityLevel, Score

_SEVERITY_STYLE = {
    "nuclear": "bold white on red",
    "spicy": "bold black on dark_orange",
    "mild": "bold black on yellow",
}

_SEVERITY_ICON = {
    "nuclear": "☢️",
    "spicy": "🌶️",
    "mild": "🟡",
}

_LEVEL_STYLE = {
    QualityLevel.EXCELLENT: "bold green",
    QualityLevel.GOOD: "green",
    QualityLevel.AVERAGE: "yellow",
    QualityLevel.POOR: "dark_orange",
    QualityLevel.TERRIBLE: "bold red",
}


def _severity_pill(severity: str) -> Text:
    style = _SEVERITY_STYLE.get(severity, "")
    icon = _SEVERITY_ICON.get(severity, "")
    return Text(f" {icon} {severity.upper()} ", style=style)


def _score_bar(value: float, width: int = 20, maximum: float = 100.0) -> Text:
    filled = int(round(min(value, maximum) / maximum * width))
    style = "red" if value > 60 else "yellow" if value > 20 else "green"
    return Text("█" * filled + "░" * (width - filled), style=style)


def render(
    result: AnalysisResult,
    *,
    console: Optional[Console] = None,
    top_files: int = 5,
    issues_per_file: int = 5,
    min_severity: str = "mild",
    show_summary: bool = True,
    summary_only: bool = False,
) -> None:
    """Print analysis results to the terminal using Rich."""
    console = console or Console(stderr=True)
    score = result.score

    if score is not None:
        _print_score_panel(console, score)
        if summary_only:
            return
        _print_categories(console, score)

    findings = filter_by_severity(result.findings, min_severity)
    if not findings:
        console.print()
        console.print("[bold green]✅ No smells found — this code is fresh.[/bold green]")
    else:
        _print_worst_files(console, findings, top_files, issues_per_file)

    if show_summary:
        _print_summary(console, result)


def _print_score_panel(console: Console, score: Score) -> None:
    level = score.quality_level
    dist = score.severity_distribution
    body = Text.assemble(
        (f"{score.total_score:.1f}", _LEVEL_STYLE[level]),
        " / 100  ",
        (f"{level.emoji} {level.label}", _LEVEL_STYLE[level]),
        "\n",
        _score_bar(score.total_score),
        "\n\n",
        (f"{score.issue_density:.2f}", "bold"),
        " issues per 1000 lines   ",
        (f"{dist.nuclear}", "bold red"), " nuclear  ",
        (f"{dist.spicy}", "bold dark_orange"), " spicy  ",
        (f"{dist.mild}", "bold yellow"), " mild",
    )
    console.print()
    console.print(Panel(body, title="Smell Score", subtitle="lower is better", expand=False))


def _print_categories(console: Console, score: Score) -> None:
    table = Table(title="Categories", title_style="bold", border_style="dim")
    table.add_column("Category", style="cyan", min_width=18)
    table.add_column("Score", justify="right")
    table.add_column("", min_width=20)
    for name, value in score.category_scores.items():
        table.add_row(name, f"{value:.1f}", _score_bar(value, maximum=90.0))
    console.print()
    console.print(table)


def _print_worst_files(console: Console, findings, top_files: int, issues_per_file: int) -> None:
    for path, items in worst_files(findings, top_files):
        console.print()
        table = Table(
            title=f"{path}  ({len(items)} issue{'s' if len(items) != 1 else ''})",
            show_lines=False,
            title_style="bold magenta",
            border_style="dim",
        )
        table.add_column("Severity", justify="center", width=14)
        table.add_column("Line", justify="right", style="green")
        table.add_column("Rule", style="cyan", min_width=20)
        table.add_column("Message")
        for f in items[: max(issues_per_file, 0)]:
            table.add_row(_severity_pill(f.severity), f"{f.line}:{f.column}", f.rule_id, f.message)
        if len(items) > issues_per_file:
            table.caption = f"… {len(items) - issues_per_file} more"
        console.print(table)


def _print_summary(console: Console, result: AnalysisResult) -> None:
    console.print()
    console.print(f"[dim]Files analyzed:[/dim] {result.file_count}")
    console.print(f"[dim]Lines:[/dim]          {result.total_lines}")
    console.print(f"[dim]Findings:[/dim]       {result.total_findings}")
    console.print(f"[dim]Suppressed:[/dim]     {len(result.suppressed)}")
    console.print(f"[dim]Skipped:[/dim]        {len(result.skipped_files)}")
    console.print(f"[dim]Unparsed:[/dim]       {len(result.unparsed_files)}")
    console.print(f"[dim]Duration:[/dim]       {result.duration_ms:.0f}ms")
