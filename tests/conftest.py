"""Shared test fixtures and sample log data."""

from __future__ import annotations

import json
from typing import Optional

import pytest

from log_timeline.ingestion.models import LogFormat, LogRecord
from log_timeline.ingestion.parser import to_instant_ms


# Real-shaped message samples for unit testing
SAMPLE_LINES = {
    "format_a": (
        "42:|2025-10-15T07:33:22.667+05:30|dev-1|sess-9|checkout|/api/cart|cart-77"
        '|web|INFO|EVENT|addToCart:{"sku":"A1","qty":2}'
    ),
    "format_a_no_data": (
        "43:|2025-10-15T07:33:23.001+05:30|dev-1|sess-9|checkout|||web|INFO|EVENT|pageView"
    ),
    "format_a_leading_colon": (
        "44:|2025-10-15T07:33:23.002+05:30|dev-1|sess-9|checkout|||web|INFO|EVENT|:odd"
    ),
    "format_a_piped_data": (
        "45:|2025-10-15T07:33:23.003+05:30|dev-1|sess-9|checkout|||web|INFO|EVENT"
        "|note:a | b | c | d | e | f | g | h | i | j | k"
    ),
    "format_b": (
        "17 | req-1 | trace-1 | span-1 | /v1/pay | pod-a | payments | ERROR | API"
        " | verifyPayment | status=failed | code=500 at 2025-10-15 07:33:22.667"
    ),
    "format_b_no_timestamp": (
        "18 | req-2 | trace-2 | span-2 | /v1/pay | pod-a | payments | INFO | API | ping"
    ),
    "short_pipes": "a | b | c",
    "plain": "service started on port 8080",
}


def make_record(
    timestamp: str,
    fmt: LogFormat = LogFormat.FORMAT_B,
    **attrs,
) -> LogRecord:
    """Build a record directly, with its instant derived from the timestamp."""
    return LogRecord(
        timestamp=timestamp,
        format=fmt,
        instant_ms=to_instant_ms(timestamp),
        **attrs,
    )


def make_hit(
    message: Optional[str],
    hit_id: str = "h",
    timestamp: Optional[str] = None,
    pod_name: Optional[str] = None,
) -> dict:
    source: dict = {}
    if message is not None:
        source["message"] = message
    if timestamp is not None:
        source["timestamp"] = timestamp
    if pod_name is not None:
        source["pod_name"] = pod_name
    return {"_id": hit_id, "_source": source}


def envelope(hits: list) -> dict:
    return {"rawResponse": {"hits": {"hits": hits}}}


def format_b_line(line: int, tag: str, data: str, ts: str) -> str:
    return (
        f"{line} | req-{line} | trace-{line} | span-{line} | /v1/orders | pod-b | orders"
        f" | INFO | EVENT | {tag} | {data} at {ts}"
    )


@pytest.fixture
def three_hit_payload() -> str:
    """Three Format B hits, out of order, the last one with a unique term."""
    hits = [
        make_hit(format_b_line(2, "second", "middle", "2025-10-15 07:00:02.000"), "b"),
        make_hit(format_b_line(3, "third", "T3-only-term", "2025-10-15 07:00:03.000"), "c"),
        make_hit(format_b_line(1, "first", "opening", "2025-10-15 07:00:01.000"), "a"),
    ]
    return json.dumps(envelope(hits))


@pytest.fixture
def payload_file(tmp_path, three_hit_payload):
    path = tmp_path / "export.json"
    path.write_text(three_hit_payload, encoding="utf-8")
    return path
