"""Entry point: python -m log_timeline"""

from log_timeline.cli.app import app

app()
