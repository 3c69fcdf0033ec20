"""Sorted log corpus and pure filtering over it."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from log_timeline.ingestion.models import LoadStats, LogFormat, LogRecord
from log_timeline.ingestion.parser import to_instant_ms
from log_timeline.search.query import evaluate

logger = logging.getLogger(__name__)


def sort_records(records: Iterable[LogRecord]) -> tuple[LogRecord, ...]:
    """Order by instant; on equal milliseconds Format A records come first."""
    return tuple(
        sorted(
            records,
            key=lambda r: (r.instant_ms, 0 if r.format is LogFormat.FORMAT_A else 1),
        )
    )


def searchable_text(record: LogRecord) -> str:
    """Lowercase serialized form of a record, the haystack for queries."""
    try:
        text = json.dumps(record.to_dict(), ensure_ascii=False, default=str)
    except ValueError:
        # Self-referencing host objects cannot be serialized as JSON
        text = repr(record.to_dict())
    return text.lower()


@dataclass(frozen=True)
class LogCorpus:
    """All records of one load, sorted ascending by instant."""

    records: tuple[LogRecord, ...] = ()
    stats: LoadStats = field(default_factory=LoadStats)
    source_name: str = ""

    def __len__(self) -> int:
        return len(self.records)

    def __getitem__(self, index: int) -> LogRecord:
        return self.records[index]

    def __iter__(self):
        return iter(self.records)

    def index_of(self, record: LogRecord) -> Optional[int]:
        """Position of ``record`` by identity, or None."""
        for i, candidate in enumerate(self.records):
            if candidate is record:
                return i
        return None


@dataclass(frozen=True)
class TimeRange:
    """Inclusive bounds; either side may be left open."""

    start: Optional[str] = None
    end: Optional[str] = None

    def __post_init__(self) -> None:
        for bound in (self.start, self.end):
            if bound and to_instant_ms(bound) is None:
                raise ValueError(f"Invalid time bound: {bound!r}")

    @property
    def is_open(self) -> bool:
        return not self.start and not self.end

    def contains(self, instant_ms: int) -> bool:
        if self.start and instant_ms < to_instant_ms(self.start):
            return False
        if self.end and instant_ms > to_instant_ms(self.end):
            return False
        return True


@dataclass(frozen=True)
class FilterState:
    """Time range plus search query applied to the corpus."""

    time_range: Optional[TimeRange] = None
    search_query: str = ""

    @property
    def is_empty(self) -> bool:
        return (self.time_range is None or self.time_range.is_open) and not self.search_query.strip()


def apply_filter(corpus: LogCorpus, state: FilterState) -> tuple[LogRecord, ...]:
    """Records of ``corpus`` passing both the time range and the query.

    Always filters the full corpus; the corpus itself is never modified.
    """
    filtered: Iterable[LogRecord] = corpus.records

    if state.time_range is not None and not state.time_range.is_open:
        time_range = state.time_range
        filtered = [r for r in filtered if time_range.contains(r.instant_ms)]

    query = state.search_query
    if query.strip():
        filtered = [r for r in filtered if evaluate(query, searchable_text(r))]

    result = tuple(filtered)
    logger.debug("Filtered to %d logs (from %d)", len(result), len(corpus))
    return result


@dataclass(frozen=True)
class CorpusSummary:
    count: int
    first: Optional[str]
    last: Optional[str]
    duration_seconds: float
    formats: dict[str, int]


def corpus_summary(records: Iterable[LogRecord]) -> CorpusSummary:
    """First/last timestamps, duration and per-format counts."""
    records = list(records)
    formats: dict[str, int] = {}
    for r in records:
        formats[r.format.value] = formats.get(r.format.value, 0) + 1
    if not records:
        return CorpusSummary(0, None, None, 0.0, formats)

    first = min(records, key=lambda r: r.instant_ms)
    last = max(records, key=lambda r: r.instant_ms)
    return CorpusSummary(
        count=len(records),
        first=first.timestamp,
        last=last.timestamp,
        duration_seconds=(last.instant_ms - first.instant_ms) / 1000,
        formats=formats,
    )
