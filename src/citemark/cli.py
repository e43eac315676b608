"""Typer-based CLI for citemark."""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import CitemarkConfig
from .errors import CitationValidationError, CitemarkError
from .formatting import format_citation, group_citations_by_source
from .models import ParsedResponse, ResolutionStatus
from .normalize import resolve_annotations
from .parser import extract_text_and_annotations, parse_response

app = typer.Typer(
    name="citemark",
    help="Citemark - resolve citation markers in generated responses",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_config() -> CitemarkConfig:
    try:
        return CitemarkConfig.from_env()
    except ValueError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


def _read_response(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        err_console.print(f"[red]Error: Response file not found: {path}[/red]")
        raise typer.Exit(code=1)
    except json.JSONDecodeError as e:
        err_console.print(f"[red]Error: {path} is not valid JSON: {e}[/red]")
        raise typer.Exit(code=1)


def _print_sources(parsed: ParsedResponse, show_quotes: bool, group_by_source: bool) -> None:
    if not parsed.citations:
        console.print("[dim]No sources[/dim]")
        return

    if group_by_source:
        for source, citations in group_citations_by_source(parsed.citations).items():
            console.print(f"[bold]{escape(source)}[/bold]")
            for citation in citations:
                line = f"  [cyan][{citation.id}][/cyan]"
                if show_quotes and citation.quote:
                    line += f" [dim]\"{escape(citation.quote)}\"[/dim]"
                console.print(line, highlight=False)
        return

    table = Table(title=f"{len(parsed.citations)} Source(s)")
    table.add_column("Citation", style="cyan", no_wrap=True)
    table.add_column("Source", style="magenta")
    if show_quotes:
        table.add_column("Quote", style="dim")

    for citation in parsed.citations:
        formatted = format_citation(citation)
        row = [escape(formatted.display), escape(formatted.source)]
        if show_quotes:
            quote = formatted.quote
            if len(quote) > 60:
                quote = quote[:57] + "..."
            row.append(escape(quote))
        table.add_row(*row)

    console.print(table)


@app.command()
def parse(
    response_file: Path = typer.Argument(..., help="JSON file holding a completed generation response"),
    as_json: bool = typer.Option(False, "--json", help="Print the parsed response as JSON"),
    group_by_source: Optional[bool] = typer.Option(
        None,
        "--group-by-source/--no-group-by-source",
        help="Group sources by file (default: config)",
    ),
    show_quotes: Optional[bool] = typer.Option(
        None,
        "--quotes/--no-quotes",
        help="Show quoted excerpts (default: config)",
    ),
    strict_offsets: bool = typer.Option(
        False,
        "--strict-offsets",
        help="Drop annotations whose claimed offsets do not match instead of searching for the marker",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Replace citation markers with [n] references and list the sources."""
    config = _load_config()
    _setup_logging("DEBUG" if debug else config.log_level)

    response = _read_response(response_file)
    relocate = config.relocate_markers and not strict_offsets

    try:
        parsed = parse_response(response, relocate=relocate)
    except CitationValidationError as e:
        err_console.print(f"[red]Citation validation failed: {e}[/red]")
        raise typer.Exit(code=2)
    except CitemarkError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(parsed.model_dump_json(indent=2))
        return

    console.print(parsed.text, highlight=False, markup=False, soft_wrap=True)
    console.print()
    _print_sources(
        parsed,
        show_quotes=config.show_quotes if show_quotes is None else show_quotes,
        group_by_source=config.group_by_source if group_by_source is None else group_by_source,
    )


@app.command()
def inspect(
    response_file: Path = typer.Argument(..., help="JSON file holding a completed generation response"),
    strict_offsets: bool = typer.Option(
        False,
        "--strict-offsets",
        help="Do not search for markers whose claimed offsets do not match",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Show claimed vs resolved offsets for every annotation.

    Useful when the generation service reports offsets that do not line up
    with the markers in the text.
    """
    config = _load_config()
    _setup_logging("DEBUG" if debug else config.log_level)

    response = _read_response(response_file)
    try:
        text, annotations = extract_text_and_annotations(response)
    except CitemarkError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    resolutions = resolve_annotations(
        text,
        annotations,
        relocate=config.relocate_markers and not strict_offsets,
    )

    console.print(f"[dim]Text length:[/dim] {len(text)}")
    if not resolutions:
        console.print("[dim]No annotations[/dim]")
        return

    status_styles = {
        ResolutionStatus.EXACT: "green",
        ResolutionStatus.RELOCATED: "yellow",
        ResolutionStatus.UNRESOLVED: "red",
        ResolutionStatus.MALFORMED: "red",
        ResolutionStatus.IGNORED: "dim",
    }

    table = Table(title=f"{len(resolutions)} Annotation(s)")
    table.add_column("#", style="cyan", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Marker", style="magenta")
    table.add_column("Claimed", no_wrap=True)
    table.add_column("Resolved", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Detail", style="dim")

    for resolution in resolutions:
        claimed = "-"
        if resolution.claimed_start is not None:
            claimed = f"[{resolution.claimed_start}, {resolution.claimed_end})"
        resolved = f"[{resolution.span.start}, {resolution.span.end})" if resolution.span else "-"
        style = status_styles[resolution.status]
        table.add_row(
            str(resolution.order),
            escape(resolution.kind),
            escape(resolution.marker or "-"),
            claimed,
            resolved,
            f"[{style}]{resolution.status.value}[/{style}]",
            escape(resolution.reason),
        )

    console.print(table)


@app.command()
def version():
    """Show citemark version."""
    from . import __version__
    console.print(f"citemark v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
