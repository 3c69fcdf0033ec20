"""Summary command: load an export and show what was found."""

from __future__ import annotations

import typer
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from log_timeline.cli.common import console, load_config, load_file
from log_timeline.corpus import corpus_summary


def summary(
    path: str = typer.Argument(help="Path to the JSON log export"),
) -> None:
    """Show record counts, skipped entries and the covered time range."""
    config = load_config()
    corpus = load_file(path, config)
    stats = corpus.stats
    info = corpus_summary(corpus.records)

    table = Table(title=f"Load Summary: {escape(corpus.source_name)}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Input", "search export" if stats.envelope else "nested JSON")
    table.add_row("Entries seen", f"{stats.total_hits:,}")
    table.add_row("Records loaded", f"{info.count:,}")
    if stats.envelope:
        table.add_row("Skipped (no source/message)", f"{stats.skipped_no_source:,}")
    table.add_row("Skipped (no timestamp)", f"{stats.skipped_no_timestamp:,}")
    if stats.truncated_nodes:
        table.add_row("Objects not visited", f"{stats.truncated_nodes:,}")

    if info.count:
        table.add_section()
        table.add_row("Start", Text(info.first))
        table.add_row("End", Text(info.last))
        table.add_row("Duration", f"{info.duration_seconds:.2f}s")
        for fmt, count in sorted(info.formats.items()):
            table.add_row(f"Format {fmt}", f"{count:,}")

    console.print(table)
