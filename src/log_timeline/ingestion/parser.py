"""Line-level parser for pipe-delimited service log messages."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from log_timeline.ingestion.models import LogFormat, LogRecord

# Format A: N:|ts+tz|device|session|service|url|cart|source|level|type|tag:data
FORMAT_A_PATTERN = re.compile(
    r"^(\d+):\|[^|]+"  # line number, timestamp
    r"\|([^|]+)\|([^|]+)\|([^|]+)"  # device, session, service
    r"\|([^|]*)\|([^|]*)"  # url, cart (may be empty)
    r"\|([^|]+)\|([^|]+)\|([^|]+)"  # source, level, type
    r"\|(.+)$"  # tag and data
)

# Timestamp of a Format A line, captured without its timezone suffix
FORMAT_A_TIMESTAMP = re.compile(
    r"^\d+:\|(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d+)[+-]\d{2}:\d{2}\|"
)

# Format B carries its timestamp as "... at 2025-10-15 07:33:22.667"
FORMAT_B_TIMESTAMP = re.compile(r"at (\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d+)")

FORMAT_B_SEPARATOR = " | "
FORMAT_B_MIN_FIELDS = 10

# ISO-8601-like instants: date, optional time, optional fraction, optional zone
ISO_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})"
    r"(?:[T ](\d{2}):(\d{2})(?::(\d{2})(?:\.(\d+))?)?)?"
    r"\s*(Z|[+-]\d{2}:?\d{2})?$",
    re.IGNORECASE,
)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_timestamp(raw: str) -> Optional[str]:
    """Extract the message timestamp of a structured line, or None."""
    m = FORMAT_A_TIMESTAMP.match(raw)
    if m:
        return m.group(1)

    m = FORMAT_B_TIMESTAMP.search(raw)
    if m:
        return m.group(1).replace(" ", "T", 1)

    return None


def to_instant_ms(timestamp: str) -> Optional[int]:
    """Convert an ISO-like timestamp to epoch milliseconds.

    Zone-less timestamps are read as UTC. Fractions beyond milliseconds are
    truncated. Returns None for anything that is not a valid instant.
    """
    if not isinstance(timestamp, str):
        return None
    m = ISO_PATTERN.match(timestamp.strip())
    if not m:
        return None

    year, month, day, hour, minute, second, fraction, zone = m.groups()
    millis = int((fraction or "0")[:3].ljust(3, "0"))
    try:
        dt = datetime(
            int(year),
            int(month),
            int(day),
            int(hour or 0),
            int(minute or 0),
            int(second or 0),
            millis * 1000,
            tzinfo=timezone.utc,
        )
    except ValueError:
        return None

    if zone and zone.upper() != "Z":
        sign = -1 if zone[0] == "-" else 1
        digits = zone[1:].replace(":", "")
        offset = timedelta(hours=int(digits[:2]), minutes=int(digits[2:]))
        dt -= sign * offset

    delta = dt - EPOCH
    return delta.days * 86_400_000 + delta.seconds * 1000 + delta.microseconds // 1000


def split_tag(tag_and_data: str) -> tuple[str, Optional[str]]:
    """Split ``tag:data`` on the first colon; data is None without one."""
    colon = tag_and_data.find(":")
    if colon > 0:
        return tag_and_data[:colon], tag_and_data[colon + 1 :]
    return tag_and_data, None


class LogParser:
    """Parses raw message lines into LogRecord objects."""

    def parse_line(
        self, raw: str, fallback_timestamp: Optional[str] = None
    ) -> Optional[LogRecord]:
        """Parse a single raw message.

        Returns a LogRecord when one of the structured grammars matches and a
        timestamp is resolvable (from the message itself, else from
        ``fallback_timestamp``). Returns None otherwise.
        """
        if not isinstance(raw, str):
            return None

        timestamp = parse_timestamp(raw) or fallback_timestamp
        if not timestamp:
            return None

        # Format A wins even when the line would also split into 10+ fields
        record = self._parse_format_a(raw, timestamp)
        if record is None:
            record = self._parse_format_b(raw, timestamp)
        if record is None:
            return None

        instant = to_instant_ms(timestamp)
        if instant is None:
            return None
        record.instant_ms = instant
        return record

    def _parse_format_a(self, raw: str, timestamp: str) -> Optional[LogRecord]:
        m = FORMAT_A_PATTERN.match(raw)
        if not m:
            return None

        (line_num, device_id, session_id, service, url, cart_id,
         source, level, log_type, tag_and_data) = m.groups()
        tag, data = split_tag(tag_and_data)
        return LogRecord(
            timestamp=timestamp,
            format=LogFormat.FORMAT_A,
            line_number=line_num,
            device_id=device_id,
            session_id=session_id,
            service=service,
            url=url,
            cart_id=cart_id,
            source=source,
            level=level,
            type=log_type,
            tag=tag,
            data=data,
            raw_message=raw,
        )

    def _parse_format_b(self, raw: str, timestamp: str) -> Optional[LogRecord]:
        parts = raw.split(FORMAT_B_SEPARATOR)
        if len(parts) < FORMAT_B_MIN_FIELDS:
            return None

        # Everything after the tag holds the payload and the "at <ts>" marker
        remainder = FORMAT_B_SEPARATOR.join(parts[10:])
        at = remainder.rfind(" at ")
        data = remainder[:at].strip() if at > 0 else remainder

        return LogRecord(
            timestamp=timestamp,
            format=LogFormat.FORMAT_B,
            line_number=parts[0],
            request_id=parts[1],
            trace_id=parts[2],
            span_id=parts[3],
            url=parts[4],
            pod_name=parts[5],
            service=parts[6],
            level=parts[7],
            type=parts[8],
            tag=parts[9],
            data=data,
            raw_message=raw,
        )
