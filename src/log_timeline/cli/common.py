"""Helpers shared by CLI commands: config, logging, loading with progress."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from log_timeline.config import TimelineConfig
from log_timeline.corpus import LogCorpus
from log_timeline.errors import CorpusLoadError
from log_timeline.ingestion.loader import load

console = Console()


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else os.environ.get("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def load_config() -> TimelineConfig:
    config = TimelineConfig.from_env()
    errors = config.validate()
    if errors:
        for err in errors:
            console.print(f"[red]Config error: {err}[/red]")
        raise typer.Exit(1)
    return config


def load_file(path: str, config: TimelineConfig) -> LogCorpus:
    """Read and normalize a JSON export, exiting on unreadable input."""
    p = Path(path)
    if not p.is_file():
        console.print(f"[red]File not found: {escape(path)}[/red]")
        raise typer.Exit(1)

    try:
        text = p.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        console.print(f"[red]Could not read {escape(path)}: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(f"Loading {p.name}...", total=1.0)
        try:
            corpus = load(
                text,
                config=config,
                progress=lambda done: progress.update(task, completed=done),
                source_name=p.name,
            )
        except CorpusLoadError as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            raise typer.Exit(1)

    return corpus
