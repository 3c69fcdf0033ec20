"""Fallback extraction of timestamped objects from arbitrary JSON."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterator, Optional

from log_timeline.ingestion.models import LoadStats, LogFormat, LogRecord
from log_timeline.ingestion.parser import to_instant_ms

# Attribute names that mark an object as a log entry, in lookup order
TIMESTAMP_KEYS = ("timestamp", "time", "date")


def _timestamp_value(obj: dict) -> Any:
    for key in TIMESTAMP_KEYS:
        value = obj.get(key)
        if value:
            return value
    return None


def coerce_timestamp(value: Any) -> Optional[str]:
    """Turn a timestamp attribute into an ISO string.

    Numbers are read as epoch milliseconds.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            dt = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
        return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
    if isinstance(value, str):
        return value
    return None


class ObjectWalker:
    """Walks a JSON document and yields a record per timestamped object.

    Traversal is depth-first, pre-order, children in key order, using an
    explicit stack. Containers already visited are skipped, and descent stops
    at ``max_depth``.
    """

    def __init__(self, max_depth: int = 64) -> None:
        self._max_depth = max_depth

    def walk(self, document: Any, stats: LoadStats) -> Iterator[LogRecord]:
        visited: set[int] = set()
        stack: list[tuple[Any, str, int]] = [(document, "", 0)]

        while stack:
            node, path, depth = stack.pop()
            if not isinstance(node, (dict, list)):
                continue
            if id(node) in visited:
                stats.truncated_nodes += 1
                continue
            visited.add(id(node))

            if isinstance(node, dict):
                record = self._record_for(node, path, stats)
                if record is not None:
                    yield record
                items = [(str(k), v) for k, v in node.items()]
            else:
                items = [(str(i), v) for i, v in enumerate(node)]

            children = [(k, v) for k, v in items if isinstance(v, (dict, list))]
            if not children:
                continue
            if depth >= self._max_depth:
                stats.truncated_nodes += len(children)
                continue
            for key, value in reversed(children):
                stack.append((value, f"{path}.{key}" if path else key, depth + 1))

    def _record_for(
        self, obj: dict, path: str, stats: LoadStats
    ) -> Optional[LogRecord]:
        raw = _timestamp_value(obj)
        if raw is None:
            return None

        stats.total_hits += 1
        timestamp = coerce_timestamp(raw)
        instant = to_instant_ms(timestamp) if timestamp else None
        if instant is None:
            stats.skipped_no_timestamp += 1
            return None

        return LogRecord(
            timestamp=timestamp,
            format=LogFormat.UNSTRUCTURED,
            instant_ms=instant,
            path=path,
            fields=dict(obj),
        )
