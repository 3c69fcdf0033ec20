"""Export of the currently displayed records as a JSON artifact."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from log_timeline.ingestion.models import LogRecord

logger = logging.getLogger(__name__)


def export_filename(now: Optional[datetime] = None) -> str:
    """``logs-export-YYYY-MM-DDTHH-MM-SS.json`` for the given UTC time."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    stamp = now.strftime("%Y-%m-%dT%H:%M:%S").replace(":", "-")
    return f"logs-export-{stamp}.json"


def export_json(records: Iterable[LogRecord]) -> str:
    """Pretty-printed JSON array of the records."""
    return json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False, default=str)


def export_records(
    records: Iterable[LogRecord],
    directory: str | Path = ".",
    now: Optional[datetime] = None,
) -> Path:
    """Write the export file into ``directory`` and return its path."""
    records = list(records)
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / export_filename(now)
    path.write_text(export_json(records), encoding="utf-8")
    logger.info("Exported %d logs to %s", len(records), path)
    return path
