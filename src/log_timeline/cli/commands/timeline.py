"""Timeline command: lay out records and print the visible window."""

from __future__ import annotations

from typing import Optional

import typer
from rich.table import Table
from rich.text import Text

from log_timeline.cli.common import console, load_config, load_file
from log_timeline.state import (
    ViewerState,
    go_to_match,
    layout_for,
    loaded,
    search_submitted,
    show_only_matches_toggled,
)
from log_timeline.timeline.presentation import render_items

CATEGORY_STYLES = {
    "error": "red",
    "warning": "yellow",
    "payment": "magenta",
    "cart": "blue",
    "api": "cyan",
    "info": "white",
}


def timeline(
    path: str = typer.Argument(help="Path to the JSON log export"),
    scroll: float = typer.Option(0.0, help="Horizontal scroll offset in pixels"),
    viewport: Optional[float] = typer.Option(None, help="Viewport width in pixels"),
    query: str = typer.Option("", help="Search query to navigate with"),
    match: Optional[int] = typer.Option(None, help="Center the view on the N-th match"),
    only_matches: bool = typer.Option(False, help="Lay out only matching records"),
) -> None:
    """Print the records a renderer would draw for a scroll position."""
    config = load_config()
    state = loaded(ViewerState(), load_file(path, config))
    if only_matches:
        state = show_only_matches_toggled(state)
    if query:
        state = search_submitted(state, query)
        if match is not None:
            state = go_to_match(state, match)

    width = viewport if viewport is not None else config.viewport_width
    layout = layout_for(state, config, width)

    offset = scroll
    if query and state.scroll_target is not None:
        target_offset = layout.scroll_offset_for(state.scroll_target, width)
        if target_offset is not None:
            offset = target_offset

    window = layout.visible_window(offset, width)
    console.print(
        f"Track {layout.track_width:,.0f}px, {layout.slot_count} slots, "
        f"scroll {offset:,.0f}px: rendering {window.size} of {len(layout.records)} records"
    )

    table = Table(title="Visible Timeline")
    table.add_column("Index", justify="right", style="cyan")
    table.add_column("Lane", justify="right")
    table.add_column("Position", justify="right")
    table.add_column("Category")
    table.add_column("Label")
    table.add_column("Time", style="green")

    for item in render_items(layout, window, selected=state.selected):
        style = CATEGORY_STYLES.get(item.category, "white")
        marker = "*" if item.selected else ""
        table.add_row(
            f"{marker}{item.index}",
            str(item.lane),
            f"{item.position * 100:.2f}%",
            f"[{style}]{item.category}[/{style}]",
            Text(item.label),
            Text(item.record.timestamp),
        )

    console.print(table)
