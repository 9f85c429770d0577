"""secretlens CLI — Typer application with scan, convert, rules, and init commands."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from secretlens import __version__

app = typer.Typer(
    name="secretlens",
    help="Scan text for secrets with Kingfisher-style pattern rules.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)

_SKIP_DIRS = {".git", ".hg", ".svn", "node_modules", "__pycache__", ".venv"}
_BINARY_SNIFF = 8192


def _setup_logging(cfg, verbose: bool = False, debug: bool = False) -> None:
    from secretlens.utils.logger import configure_logging

    level = "DEBUG" if debug else "INFO" if verbose else cfg.logging.level
    configure_logging(level, json_output=cfg.logging.json)


def _load_config_or_exit(config: Optional[str]):
    from secretlens.config.loader import ConfigError, load_config

    try:
        return load_config(Path.cwd(), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _build_rule_set_or_exit(cfg, extra_rules: List[str]):
    from secretlens.rules.loader import RuleLoadError
    from secretlens.rules.registry import RuleSetCache, build_registry

    try:
        registry = build_registry(cfg, Path.cwd(), extra_rules)
    except RuleLoadError as exc:
        console.print(f"[bold red]Rule error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    return RuleSetCache.from_registry(registry).get()


def _iter_files(path: Path) -> Iterator[Path]:
    if path.is_file():
        yield path
        return
    for child in sorted(path.iterdir()):
        if child.is_dir():
            if child.name in _SKIP_DIRS:
                continue
            yield from _iter_files(child)
        elif child.is_file():
            yield child


def _read_text(path: Path) -> Optional[str]:
    """Read *path* as text (undecodable bytes replaced); None for binary files."""
    try:
        data = path.read_bytes()
    except OSError:
        return None
    if b"\x00" in data[:_BINARY_SNIFF]:
        return None
    return data.decode("utf-8", errors="replace")


def _collect_items(paths: List[Path]) -> Tuple[List[Tuple[str, str]], List[str]]:
    items: List[Tuple[str, str]] = []
    skipped: List[str] = []
    for root in paths:
        for file_path in _iter_files(root):
            text = _read_text(file_path)
            if text is None:
                skipped.append(str(file_path))
                continue
            items.append((text, str(file_path)))
    return items, skipped


# ── scan ──────────────────────────────────────────────────────────────────────


@app.command()
def scan(
    paths: List[Path] = typer.Argument(..., exists=True, help="Files or directories to scan"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .secretlens.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json | sarif"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write report to file"),
    rules: List[str] = typer.Option([], "--rules", "-r", help="Extra rule file or directory (repeatable)"),
    no_builtin: bool = typer.Option(False, "--no-builtin", help="Do not load built-in rules"),
    min_confidence: Optional[int] = typer.Option(None, "--min-confidence", help="Drop findings scored below this"),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Worker threads"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output with timing"),
) -> None:
    """Scan files and directories for secrets."""
    from secretlens.output import json_report, sarif, terminal
    from secretlens.scanner.batch import scan_batch
    from secretlens.scanner.engine import ScanError, ScanOptions

    cfg = _load_config_or_exit(config)

    # --- CLI overrides ---
    if format:
        if format not in ("terminal", "json", "sarif"):
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    if no_builtin:
        cfg.rules.builtin = False
    if min_confidence is not None:
        cfg.scoring.min_confidence = min_confidence
    if workers is not None:
        cfg.scan.max_workers = max(1, workers)

    _setup_logging(cfg, verbose, debug)
    rule_set = _build_rule_set_or_exit(cfg, rules)
    items, skipped = _collect_items(paths)

    if verbose or debug:
        console.print(f"[dim]Rules compiled: {len(rule_set)} ({len(rule_set.failures)} failed)[/dim]")
        console.print(f"[dim]Files to scan: {len(items)} ({len(skipped)} binary skipped)[/dim]")

    try:
        result = scan_batch(
            items,
            rule_set,
            ScanOptions.from_config(cfg),
            max_workers=cfg.scan.max_workers,
            min_confidence=cfg.scoring.min_confidence,
        )
    except ScanError as exc:
        console.print(f"[bold red]Scanner error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if debug:
        console.print(f"[dim]Scan duration: {result.scan_duration_ms:.0f}ms[/dim]")

    # --- Output ---
    report_text: Optional[str] = None
    redact_values = cfg.output.redact

    if cfg.output.format == "terminal":
        terminal.render(result, redact_values=redact_values, show_summary=cfg.output.show_summary)
    elif cfg.output.format == "json":
        report_text = json_report.render(result, redact_values=redact_values)
        print(report_text)
    elif cfg.output.format == "sarif":
        report_text = sarif.render(result)
        print(report_text)

    # --- Write to file ---
    if output:
        if report_text is None:
            # terminal format: write JSON alongside
            report_text = json_report.render(result, redact_values=redact_values)
        Path(output).write_text(report_text, encoding="utf-8")
        if verbose:
            console.print(f"[dim]Report written to {output}[/dim]")

    raise typer.Exit(code=1 if result.findings else 0)


# ── convert ───────────────────────────────────────────────────────────────────


@app.command()
def convert(
    pattern: str = typer.Argument(..., help="Pattern in the PCRE / Kingfisher dialect"),
) -> None:
    """Show the native form of a foreign-dialect pattern."""
    from secretlens.dialect import convert as convert_pattern
    from secretlens.dialect import validate
    from secretlens.rules.compiler import flag_string

    converted = convert_pattern(pattern)
    verdict = validate(converted.native_pattern)

    print(converted.native_pattern)
    console.print(f"[dim]flags:[/dim]    {flag_string(converted.native_flags)}")
    console.print(f"[dim]extended:[/dim] {converted.extended}")
    if verdict.valid:
        console.print("[green]✓[/green] balanced")
    else:
        console.print(f"[yellow]⚠[/yellow]  {verdict.error}")


# ── rules ─────────────────────────────────────────────────────────────────────


@app.command(name="rules")
def list_rules(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .secretlens.toml"),
    rules: List[str] = typer.Option([], "--rules", "-r", help="Extra rule file or directory (repeatable)"),
    no_builtin: bool = typer.Option(False, "--no-builtin", help="Do not load built-in rules"),
    strict: bool = typer.Option(False, "--strict", help="Exit 1 if any rule fails to compile or misses an example"),
) -> None:
    """Compile the configured rules and report their status."""
    from secretlens.rules.compiler import check_examples, flag_string

    cfg = _load_config_or_exit(config)
    if no_builtin:
        cfg.rules.builtin = False
    _setup_logging(cfg)
    rule_set = _build_rule_set_or_exit(cfg, rules)
    misses = check_examples(rule_set)

    out = Console()
    table = Table(title="Compiled rules", border_style="dim")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Flags", justify="center")
    table.add_column("Confidence", justify="center")
    table.add_column("Min entropy", justify="right")
    table.add_column("Examples", justify="center")
    for rule_id, rule in rule_set.items():
        if not rule.examples:
            examples = "-"
        elif rule_id in misses:
            examples = f"[red]{len(rule.examples) - len(misses[rule_id])}/{len(rule.examples)}[/red]"
        else:
            examples = f"[green]{len(rule.examples)}/{len(rule.examples)}[/green]"
        table.add_row(
            rule_id,
            rule.name,
            flag_string(rule.native_flags),
            rule.confidence,
            f"{rule.min_entropy:.1f}" if rule.min_entropy is not None else "-",
            examples,
        )
    out.print(table)

    for diag in rule_set.diagnostics:
        if diag.accepted:
            out.print(f"[yellow]⚠[/yellow]  {diag.rule_id}: compiled despite validator ({diag.error})")
        else:
            out.print(f"[red]✗[/red] {diag.rule_id}: {diag.error}")
            out.print(f"    [dim]original:[/dim]  {diag.original}")
            out.print(f"    [dim]converted:[/dim] {diag.converted}")

    if strict and (rule_set.failures or misses):
        raise typer.Exit(code=1)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config"),
) -> None:
    """Generate a starter .secretlens.toml in the current directory."""
    from secretlens.config.defaults import DEFAULT_TOML
    from secretlens.config.loader import CONFIG_FILENAME

    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists() and not force:
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"secretlens {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """secretlens — find secrets with Kingfisher-style pattern rules."""
