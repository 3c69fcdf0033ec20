"""Export command: write the filtered records to a JSON file."""

from __future__ import annotations

import typer
from rich.markup import escape

from log_timeline.cli.common import console, load_config, load_file
from log_timeline.export import export_records
from log_timeline.state import ViewerState, filtered, loaded


def export(
    path: str = typer.Argument(help="Path to the JSON log export"),
    start: str = typer.Option("", help="Inclusive start time (ISO-8601)"),
    end: str = typer.Option("", help="Inclusive end time (ISO-8601)"),
    query: str = typer.Option("", help="Boolean search query"),
    out: str = typer.Option(".", help="Output directory"),
) -> None:
    """Filter records by time and query and export them as JSON."""
    config = load_config()
    state = loaded(ViewerState(), load_file(path, config))
    try:
        state = filtered(state, start=start, end=end, query=query)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    written = export_records(state.view, out)
    console.print(f"Exported [bold]{len(state.view)}[/bold] of {len(state.corpus)} logs to {escape(str(written))}")
