"""Search command: evaluate a boolean query and list the matches."""

from __future__ import annotations

from typing import Optional

import typer
from rich.json import JSON
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from log_timeline.cli.common import console, load_config, load_file
from log_timeline.search.query import extract_terms
from log_timeline.state import (
    ViewerState,
    go_to_match,
    loaded,
    search_submitted,
    show_only_matches_toggled,
)
from log_timeline.timeline.presentation import (
    category_of,
    deep_parse_json,
    highlight_spans,
    is_json_text,
    label_of,
    strip_json,
)


def highlighted(text: str, terms: list[str]) -> Text:
    """Rich text with every occurrence of ``terms`` highlighted."""
    out = Text(text)
    for start, end in highlight_spans(text, terms):
        out.stylize("bold black on yellow", start, end)
    return out


def search(
    path: str = typer.Argument(help="Path to the JSON log export"),
    query: str = typer.Argument(help='Query, e.g. (error OR warn) AND "payment failed"'),
    only_matches: bool = typer.Option(False, help="Show only matching records"),
    goto: Optional[int] = typer.Option(None, help="Select the N-th match (1-based)"),
    limit: int = typer.Option(50, help="Maximum matches to list"),
) -> None:
    """Find records matching a boolean query."""
    config = load_config()
    state = loaded(ViewerState(), load_file(path, config))
    if only_matches:
        state = show_only_matches_toggled(state)
    state = search_submitted(state, query)
    if goto is not None:
        state = go_to_match(state, goto)

    match = state.match
    if not match.matches:
        console.print(f'[yellow]No matches for "{escape(query)}"[/yellow]')
        raise typer.Exit(1)

    console.print(
        f"[bold]{match.count}[/bold] matches, current [bold]{match.current_index + 1}[/bold]"
        f" of {match.count} (record #{match.current_record_index}, scroll target {state.scroll_target})"
    )

    terms = extract_terms(query)
    table = Table(title=f'Matches for "{escape(query)}"')
    table.add_column("#", justify="right")
    table.add_column("Record", justify="right", style="cyan")
    table.add_column("Timestamp", style="green")
    table.add_column("Category")
    table.add_column("Label")
    table.add_column("Message")

    for rank, index in enumerate(match.matches[:limit]):
        record = state.corpus[index]
        marker = "*" if rank == match.current_index else ""
        message = strip_json(record.raw_message) or ""
        table.add_row(
            f"{marker}{rank + 1}",
            str(index),
            Text(record.timestamp),
            category_of(record),
            Text(label_of(record)),
            highlighted(message, terms),
        )

    console.print(table)
    if match.count > limit:
        console.print(f"[dim]... {match.count - limit} more[/dim]")

    current = state.corpus[match.current_record_index]
    if is_json_text(current.data):
        console.print(f"[bold]Data of match {match.current_index + 1}[/bold]")
        console.print(JSON.from_data(deep_parse_json(current.data)))
