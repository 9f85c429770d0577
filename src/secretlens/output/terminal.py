"""Rich terminal reporter — colour, icons, confidence pills."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from secretlens.findings.models import BatchResult
from secretlens.findings.redactor import redact

_LEVEL_STYLE = {
    "high": "bold white on red",
    "medium": "bold black on yellow",
    "low": "bold black on bright_cyan",
}

_LEVEL_ICON = {
    "high": "🔴",
    "medium": "🟡",
    "low": "🔵",
}


def _level(score: int) -> str:
    if score >= 85:
        return "high"
    if score >= 70:
        return "medium"
    return "low"


def _confidence_pill(score: int) -> Text:
    level = _level(score)
    return Text(f" {_LEVEL_ICON[level]} {score} ", style=_LEVEL_STYLE[level])


def render(
    result: BatchResult,
    *,
    redact_values: bool = True,
    show_summary: bool = True,
    console: Console | None = None,
) -> None:
    """Print scan results to the terminal using Rich."""
    console = console or Console(stderr=True)

    if not result.findings:
        console.print()
        console.print("[bold green]✅ No secrets detected.[/bold green]")
        if show_summary:
            _print_summary(console, result)
        return

    console.print()
    table = Table(
        title="secretlens findings",
        show_lines=True,
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Confidence", justify="center", width=12)
    table.add_column("Rule", style="cyan", min_width=20)
    table.add_column("Source", style="magenta")
    table.add_column("Line", justify="right", style="green")
    table.add_column("Entropy", justify="right")
    table.add_column("Match", min_width=15)

    for finding in result.findings:
        matched = redact(finding.matched_text) if redact_values else finding.matched_text
        table.add_row(
            _confidence_pill(finding.confidence_score),
            finding.rule_name,
            finding.source_location,
            str(finding.line),
            f"{finding.entropy:.2f}" if finding.entropy is not None else "-",
            matched,
        )

    console.print(table)

    if show_summary:
        _print_summary(console, result)


def _print_summary(console: Console, result: BatchResult) -> None:
    console.print()
    console.print(f"[dim]Items scanned:[/dim] {result.items_scanned}")
    console.print(f"[dim]Findings:[/dim]      {result.total_findings}")
    console.print(f"[dim]Suppressed:[/dim]    {len(result.suppressed)}")
    if result.failures:
        console.print(
            f"[dim]Rule failures:[/dim] {len(result.failures)} "
            f"({len(result.timeouts)} timed out)"
        )
    if result.cancelled:
        console.print("[bold yellow]⚠️  Scan cancelled — results are partial.[/bold yellow]")
    console.print(f"[dim]Duration:[/dim]      {result.scan_duration_ms:.0f}ms")
