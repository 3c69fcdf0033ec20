"""Payload loader: JSON export -> sorted LogCorpus."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Iterator, Optional

from log_timeline.config import TimelineConfig
from log_timeline.corpus import LogCorpus, sort_records
from log_timeline.errors import CorpusLoadError
from log_timeline.ingestion.extractor import ObjectWalker, coerce_timestamp
from log_timeline.ingestion.models import LoadStats, LogFormat, LogRecord
from log_timeline.ingestion.parser import LogParser, parse_timestamp, to_instant_ms

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


def envelope_hits(document: Any) -> Optional[list]:
    """Return ``rawResponse.hits.hits`` when the document is a search export."""
    if not isinstance(document, dict):
        return None
    raw_response = document.get("rawResponse")
    if not isinstance(raw_response, dict):
        return None
    hits = raw_response.get("hits")
    if not isinstance(hits, dict):
        return None
    inner = hits.get("hits")
    return inner if isinstance(inner, list) else None


def decode(payload: str | bytes) -> Any:
    """Decode JSON text, raising CorpusLoadError on malformed input."""
    try:
        return json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CorpusLoadError(f"Error parsing JSON payload: {e}") from e


class HitNormalizer:
    """Normalizes search hits into LogRecords, one chunk at a time."""

    def __init__(self, parser: Optional[LogParser] = None) -> None:
        self._parser = parser or LogParser()

    def normalize(self, hit: Any, index: int, stats: LoadStats) -> Optional[LogRecord]:
        """Normalize one hit; returns None (and tallies why) when unusable."""
        source = hit.get("_source") if isinstance(hit, dict) else None
        message = source.get("message") if isinstance(source, dict) else None
        if not message or not isinstance(message, str):
            stats.skipped_no_source += 1
            return None

        # Message timestamp first, then the one stamped by the log shipper
        source_ts = coerce_timestamp(source.get("timestamp"))
        timestamp = parse_timestamp(message) or source_ts or None
        if not timestamp:
            stats.skipped_no_timestamp += 1
            return None

        record = self._parser.parse_line(message, fallback_timestamp=timestamp)
        if record is None:
            instant = to_instant_ms(timestamp)
            if instant is None:
                stats.skipped_no_timestamp += 1
                return None
            record = LogRecord(
                timestamp=timestamp,
                format=LogFormat.UNSTRUCTURED,
                instant_ms=instant,
                raw_message=message,
            )

        hit_id = hit.get("_id")
        record.hit_index = index
        record.hit_id = str(hit_id) if hit_id is not None else None
        record.source_pod_name = source.get("pod_name")
        record.source_timestamp = source.get("timestamp")
        record.full_source = source
        return record

    def iter_chunks(
        self, hits: list, stats: LoadStats, chunk_size: int = 500
    ) -> Iterator[list[LogRecord]]:
        """Yield the normalized records of each fixed-size chunk of hits."""
        for start in range(0, len(hits), chunk_size):
            chunk: list[LogRecord] = []
            for offset, hit in enumerate(hits[start : start + chunk_size]):
                record = self.normalize(hit, start + offset, stats)
                if record is not None:
                    chunk.append(record)
            yield chunk


def load(
    payload: Any,
    config: Optional[TimelineConfig] = None,
    progress: Optional[ProgressCallback] = None,
    source_name: str = "",
) -> LogCorpus:
    """Normalize a JSON payload (text or already-decoded) into a sorted corpus.

    Raises CorpusLoadError if text payloads are not valid JSON. Individual
    entries that cannot be normalized are dropped and counted in the
    corpus stats.
    """
    config = config or TimelineConfig()
    document = decode(payload) if isinstance(payload, (str, bytes)) else payload

    stats = LoadStats()
    records: list[LogRecord] = []
    hits = envelope_hits(document)

    if hits is not None:
        stats.envelope = True
        stats.total_hits = len(hits)
        logger.info("Total logs in file: %d", len(hits))

        normalizer = HitNormalizer()
        done = 0
        for chunk in normalizer.iter_chunks(hits, stats, config.chunk_size):
            records.extend(chunk)
            done = min(len(hits), done + config.chunk_size)
            if progress is not None:
                progress(done / len(hits))

        logger.info("Skipped %d logs with no source/message", stats.skipped_no_source)
        logger.info("Skipped %d logs with no timestamp", stats.skipped_no_timestamp)
    else:
        walker = ObjectWalker(max_depth=config.max_walk_depth)
        records.extend(walker.walk(document, stats))
        if stats.truncated_nodes:
            logger.warning("Stopped descent at %d nested objects", stats.truncated_nodes)

    if progress is not None:
        progress(1.0)

    stats.parsed = len(records)
    logger.info("Parsed %d logs", stats.parsed)
    return LogCorpus(records=sort_records(records), stats=stats, source_name=source_name)
