"""Data models for the ingestion layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class LogFormat(str, Enum):
    """Which grammar produced a record."""

    FORMAT_A = "FORMAT_A"  # anchored `N:|ts|...` lines, sorts first on ties
    FORMAT_B = "FORMAT_B"  # loose ` | ` lines with a trailing `at <ts>`
    UNSTRUCTURED = "UNSTRUCTURED"


# Attributes consulted by label/category lookups, in addition to `fields`.
STRUCTURED_ATTRS = (
    "line_number",
    "device_id",
    "session_id",
    "request_id",
    "trace_id",
    "span_id",
    "service",
    "url",
    "cart_id",
    "source",
    "pod_name",
    "level",
    "type",
    "tag",
    "data",
    "path",
)


@dataclass(eq=False)
class LogRecord:
    """Single normalized log entry.

    Identity is by reference (``eq=False``): two records loaded from the same
    text in two separate loads are never equal.
    """

    timestamp: str
    format: LogFormat
    instant_ms: int = 0

    line_number: Optional[str] = None

    # Format A
    device_id: Optional[str] = None
    session_id: Optional[str] = None
    cart_id: Optional[str] = None
    source: Optional[str] = None

    # Format B
    request_id: Optional[str] = None
    trace_id: Optional[str] = None
    span_id: Optional[str] = None
    pod_name: Optional[str] = None

    # Shared by both structured grammars
    service: Optional[str] = None
    url: Optional[str] = None
    level: Optional[str] = None
    type: Optional[str] = None
    tag: Optional[str] = None
    data: Optional[str] = None

    raw_message: Optional[str] = None

    # Unstructured extraction: dotted path of the object and its own fields
    path: Optional[str] = None
    fields: dict[str, Any] = field(default_factory=dict)

    # Opaque passthrough from the source hit
    hit_index: Optional[int] = None
    hit_id: Optional[str] = None
    source_pod_name: Optional[str] = None
    source_timestamp: Any = None
    full_source: Optional[dict] = None

    def get(self, name: str) -> Any:
        """Look up a named attribute, falling back to the unstructured fields."""
        if name in STRUCTURED_ATTRS:
            value = getattr(self, name)
            if value is not None:
                return value
        return self.fields.get(name)

    def to_dict(self) -> dict[str, Any]:
        """Plain-JSON view of the record, omitting unset attributes."""
        out: dict[str, Any] = {}
        if self.hit_index is not None:
            out["index"] = self.hit_index
        if self.hit_id is not None:
            out["id"] = self.hit_id
        out["timestamp"] = self.timestamp
        out["format"] = self.format.value
        for name in STRUCTURED_ATTRS:
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        if self.raw_message is not None:
            out["raw_message"] = self.raw_message
        if self.source_pod_name is not None:
            out["source_pod_name"] = self.source_pod_name
        if self.source_timestamp is not None:
            out["source_timestamp"] = self.source_timestamp
        for key, value in self.fields.items():
            out.setdefault(key, value)
        if self.full_source is not None:
            out["full_source"] = self.full_source
        return out


@dataclass
class LoadStats:
    """Diagnostic tallies collected while normalizing one payload."""

    total_hits: int = 0
    parsed: int = 0
    skipped_no_source: int = 0
    skipped_no_timestamp: int = 0
    truncated_nodes: int = 0
    envelope: bool = False

    @property
    def skipped(self) -> int:
        return self.skipped_no_source + self.skipped_no_timestamp
