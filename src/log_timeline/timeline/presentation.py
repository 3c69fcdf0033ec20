"""Per-record values handed to a renderer: category, label, highlights."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from log_timeline.corpus import searchable_text
from log_timeline.ingestion.models import LogRecord
from log_timeline.timeline.layout import TimelineLayout, VisibleWindow

# Content keywords per category, checked in this order after level/type
CATEGORY_KEYWORDS = (
    ("error", ("error", "fail")),
    ("warning", ("warn",)),
    ("payment", ("payment", "txn", "euler", "juspay")),
    ("cart", ("cart", "shipping")),
    ("api", ("gql", "api", "dbquery")),
)
DEFAULT_CATEGORY = "info"
DEFAULT_LABEL = "Log"
LABEL_MESSAGE_LENGTH = 30

OBJECT_PATTERN = re.compile(r"\{(?:[^{}]|(?:\{[^{}]*\}))*\}")
ARRAY_PATTERN = re.compile(r"\[(?:[^\[\]]|(?:\[[^\[\]]*\]))*\]")
_JSON_MARK = "\x00JSON\x00"
_ARRAY_MARK = "\x00ARRAY\x00"


def category_of(record: LogRecord) -> str:
    """One of error, warning, payment, cart, api, info."""
    level = record.get("level")
    if isinstance(level, str):
        level = level.lower()
        if level == "error":
            return "error"
        if level in ("warn", "warning"):
            return "warning"

    log_type = record.get("type")
    if isinstance(log_type, str) and "error" in log_type.lower():
        return "error"

    text = searchable_text(record)
    for category, keywords in CATEGORY_KEYWORDS:
        if any(k in text for k in keywords):
            return category
    return DEFAULT_CATEGORY


def label_of(record: LogRecord) -> str:
    """Short box label for a record."""
    for name in ("tag", "action", "type", "event"):
        value = record.get(name)
        if value:
            return str(value)

    message = record.get("message") or record.raw_message
    if message:
        return str(message)[:LABEL_MESSAGE_LENGTH]
    if record.path:
        return record.path
    return DEFAULT_LABEL


def highlight_spans(text: str, terms: Iterable[str]) -> list[tuple[int, int]]:
    """Merged ``(start, end)`` ranges where any term occurs, case-insensitively."""
    lower = text.lower()
    spans = []
    for term in terms:
        if not term:
            continue
        index = lower.find(term)
        while index != -1:
            spans.append((index, index + len(term)))
            index = lower.find(term, index + 1)

    spans.sort()
    merged: list[tuple[int, int]] = []
    for start, end in spans:
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def strip_json(message: Optional[str]) -> Optional[str]:
    """Replace embedded JSON objects/arrays with ``[JSON]`` / ``[ARRAY]``."""
    if not message:
        return message

    result = message
    while True:
        before = result
        result = OBJECT_PATTERN.sub(_JSON_MARK, result)
        result = ARRAY_PATTERN.sub(_ARRAY_MARK, result)
        if result == before or ("{" not in result and "[" not in result):
            break

    result = re.sub(rf"(?:{re.escape(_JSON_MARK)}\s*)+", "[JSON] ", result)
    result = re.sub(rf"(?:{re.escape(_ARRAY_MARK)}\s*)+", "[ARRAY] ", result)
    return result


def _looks_like_json(text: str) -> bool:
    trimmed = text.strip()
    return (trimmed.startswith("{") and trimmed.endswith("}")) or (
        trimmed.startswith("[") and trimmed.endswith("]")
    )


def is_json_text(value: Any) -> bool:
    """True for strings holding a JSON object or array."""
    if not isinstance(value, str) or not _looks_like_json(value):
        return False
    try:
        json.loads(value.strip())
    except json.JSONDecodeError:
        return False
    return True


def deep_parse_json(value: Any) -> Any:
    """Recursively decode strings that hold JSON objects or arrays."""
    if isinstance(value, str):
        if not _looks_like_json(value):
            return value
        try:
            parsed = json.loads(value.strip())
        except json.JSONDecodeError:
            return value
        return deep_parse_json(parsed)
    if isinstance(value, list):
        return [deep_parse_json(item) for item in value]
    if isinstance(value, dict):
        return {key: deep_parse_json(item) for key, item in value.items()}
    return value


@dataclass(frozen=True)
class RenderItem:
    """Everything a renderer needs to draw one timeline box."""

    index: int
    record: LogRecord
    position: float
    lane: int
    category: str
    label: str
    selected: bool = False


def render_items(
    layout: TimelineLayout,
    window: VisibleWindow,
    selected: Optional[LogRecord] = None,
) -> list[RenderItem]:
    """Render items for the records inside ``window``."""
    items = []
    for index in range(window.start, window.end):
        record = layout.records[index]
        items.append(
            RenderItem(
                index=index,
                record=record,
                position=layout.position_of(record),
                lane=layout.lane_of(index),
                category=category_of(record),
                label=label_of(record),
                selected=record is selected,
            )
        )
    return items
