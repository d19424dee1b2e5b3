"""smellscore CLI — Typer application with analyze, rules, init, and audit commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from smellscore import __version__

app = typer.Typer(
    name="smellscore",
    help="Sniff out code smells and score how bad they are.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

_SEVERITIES = ("mild", "spicy", "nuclear")


def _setup_logging(verbose: bool, debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logger = logging.getLogger("smellscore")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=console, show_path=debug, rich_tracebacks=debug))
    logger.setLevel(level)


# ── analyze ───────────────────────────────────────────────────────────────────


@app.command()
def analyze(
    path: Path = typer.Argument(Path("."), help="File or directory to analyze"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .smellscore.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json | sarif"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write report to file"),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-e", help="Glob to exclude (repeatable)"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Worker threads (0 = auto)"),
    top: Optional[int] = typer.Option(None, "--top", "-t", help="Number of worst files to show"),
    issues: Optional[int] = typer.Option(None, "--issues", "-i", help="Issues shown per file"),
    summary: bool = typer.Option(False, "--summary", "-s", help="Only print the score panel"),
    min_severity: Optional[str] = typer.Option(None, "--min-severity", help="Hide findings below: mild | spicy | nuclear"),
    fail_above: Optional[float] = typer.Option(None, "--fail-above", help="Exit 1 when the total score exceeds this"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output"),
) -> None:
    """Analyze Python files and report a smell score."""
    from smellscore.config.loader import ConfigError, load_config
    from smellscore.output import json_report, sarif, terminal
    from smellscore.rules.registry import build_registry
    from smellscore.scanner.engine import AnalysisError, analyze_path

    _setup_logging(verbose, debug)

    # --- Load config ---
    try:
        cfg = load_config(path, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    # --- CLI overrides ---
    if format:
        if format not in ("terminal", "json", "sarif"):
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    if min_severity:
        if min_severity not in _SEVERITIES:
            console.print(f"[bold red]Invalid severity:[/bold red] {min_severity}")
            raise typer.Exit(code=2)
        cfg.output.min_severity = min_severity  # type: ignore[assignment]
    if workers is not None:
        if workers < 0:
            console.print(f"[bold red]Invalid worker count:[/bold red] {workers}")
            raise typer.Exit(code=2)
        cfg.analysis.workers = workers
    if exclude:
        cfg.analysis.exclude.extend(exclude)
    if top is not None:
        cfg.output.top_files = top
    if issues is not None:
        cfg.output.issues_per_file = issues
    if fail_above is not None:
        cfg.scoring.fail_above = fail_above

    # --- Build rules and run ---
    try:
        registry = build_registry(cfg, path)
        logging.getLogger("smellscore").debug(
            "Rules enabled: %s", ", ".join(r.id for r in registry.enabled_rules())
        )
        result = analyze_path(path, cfg, registry)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    except AnalysisError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if result.file_count == 0 and not result.skipped_files and not result.unparsed_files:
        console.print(f"[bold red]Error:[/bold red] no Python files found in {path}")
        raise typer.Exit(code=2)

    # --- Output ---
    report_text: Optional[str] = None

    if cfg.output.format == "terminal":
        terminal.render(
            result,
            console=console,
            top_files=cfg.output.top_files,
            issues_per_file=cfg.output.issues_per_file,
            min_severity=cfg.output.min_severity,
            show_summary=cfg.output.show_summary,
            summary_only=summary,
        )
    elif cfg.output.format == "json":
        report_text = json_report.render(result)
        print(report_text)
    elif cfg.output.format == "sarif":
        report_text = sarif.render(result, registry)
        print(report_text)

    # --- Write to file ---
    if output:
        if report_text is None:
            # terminal output requested on screen; the file gets JSON
            report_text = json_report.render(result)
        Path(output).write_text(report_text, encoding="utf-8")
        if verbose:
            console.print(f"[dim]Report written to {output}[/dim]")

    # --- Exit code ---
    threshold = cfg.scoring.fail_above
    if threshold is not None and result.score is not None and result.score.total_score > threshold:
        if cfg.output.format == "terminal":
            console.print(
                f"[bold red]❌ Score {result.score.total_score:.1f} is above "
                f"the limit of {threshold:g}.[/bold red]"
            )
        raise typer.Exit(code=1)

    raise typer.Exit(code=0)


# ── rules ─────────────────────────────────────────────────────────────────────


@app.command()
def rules(
    path: Path = typer.Argument(Path("."), help="Project whose config and custom rules to load"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .smellscore.toml"),
) -> None:
    """List every rule with its scoring category and whether it is enabled."""
    from smellscore.config.loader import ConfigError, load_config
    from smellscore.rules.registry import build_registry
    from smellscore.scanner.engine import build_category_map

    try:
        cfg = load_config(path, config)
        registry = build_registry(cfg, path)
        cmap = build_category_map(cfg, registry)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    table = Table(title="smellscore rules", title_style="bold", border_style="dim")
    table.add_column("Rule", style="cyan", min_width=24)
    table.add_column("Category", style="magenta")
    table.add_column("Enabled", justify="center")
    table.add_column("Description")
    for rule in registry.all_rules:
        category = cmap.category_for(rule.id)
        table.add_row(
            rule.id,
            category.name if category else "[dim]unscored[/dim]",
            "[green]✓[/green]" if rule.enabled else "[red]✗[/red]",
            rule.description,
        )
    Console().print(table)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    path: Path = typer.Argument(Path("."), help="Directory to write the config into"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing .smellscore.toml"),
) -> None:
    """Generate a starter .smellscore.toml."""
    from smellscore.config.defaults import DEFAULT_TOML
    from smellscore.config.loader import CONFIG_FILENAME

    config_path = path / CONFIG_FILENAME

    if config_path.exists() and not force:
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── audit ─────────────────────────────────────────────────────────────────────


@app.command()
def audit(
    path: Path = typer.Argument(Path("."), help="File or directory to search"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .smellscore.toml"),
) -> None:
    """List every inline suppression comment (audit trail)."""
    from smellscore.config.loader import ConfigError, load_config
    from smellscore.scanner.engine import relative_path, select_files
    from smellscore.scanner.suppression import parse_inline_suppression
    from smellscore.source.models import split_lines

    if not path.exists():
        console.print(f"[bold red]Error:[/bold red] Path does not exist: {path}")
        raise typer.Exit(code=2)

    try:
        cfg = load_config(path, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    files, _ = select_files(path, cfg)
    hits = []
    for file in files:
        try:
            text = file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            continue
        for line_no, content in enumerate(split_lines(text), 1):
            suppressed, rule_ids = parse_inline_suppression(content)
            if suppressed:
                scope = ", ".join(sorted(rule_ids)) if rule_ids else "ALL"
                hits.append((relative_path(file, path), line_no, scope))

    if not hits:
        console.print("[green]No smellscore suppression comments found.[/green]")
        raise typer.Exit(code=0)

    console.print(f"[bold]Found {len(hits)} suppression comment(s):[/bold]")
    console.print()
    for file, line_no, scope in hits:
        console.print(
            f"  [cyan]{file}[/cyan]:[green]{line_no}[/green]  scope=[yellow]{scope}[/yellow]"
        )


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"smellscore {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """smellscore — sniff out code smells and score how bad they are."""
