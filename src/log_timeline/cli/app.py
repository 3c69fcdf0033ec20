"""Typer CLI application."""

import typer

from log_timeline.cli.commands.export import export
from log_timeline.cli.commands.search import search
from log_timeline.cli.commands.summary import summary
from log_timeline.cli.commands.timeline import timeline
from log_timeline.cli.common import configure_logging

app = typer.Typer(
    name="log-timeline",
    help="Timeline viewer for pipe-delimited service logs",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose)


app.command()(summary)
app.command()(search)
app.command()(timeline)
app.command()(export)
