"""Tests for render-facing helpers: categories, labels, highlighting."""

from __future__ import annotations

import pytest

from log_timeline.ingestion.models import LogFormat
from log_timeline.timeline.layout import TimelineLayout, VisibleWindow
from log_timeline.timeline.presentation import (
    category_of,
    deep_parse_json,
    highlight_spans,
    is_json_text,
    label_of,
    render_items,
    strip_json,
)
from tests.conftest import make_record

TS = "2025-01-01T00:00:00.000"


def _loose(**fields):
    return make_record(TS, LogFormat.UNSTRUCTURED, fields=fields)


class TestCategory:
    """Category priority: level, then type, then serialized content."""

    def test_level_error(self):
        assert category_of(make_record(TS, level="ERROR", tag="cart")) == "error"

    def test_level_warning(self):
        assert category_of(make_record(TS, level="warn")) == "warning"
        assert category_of(make_record(TS, level="Warning")) == "warning"

    def test_type_error(self):
        assert category_of(make_record(TS, level="INFO", type="PaymentError")) == "error"

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("request failed", "error"),
            ("disk warn threshold", "warning"),
            ("juspay callback", "payment"),
            ("update shipping", "cart"),
            ("dbquery took 4ms", "api"),
            ("hello there", "info"),
        ],
    )
    def test_content_keywords(self, text, expected):
        assert category_of(_loose(msg=text)) == expected

    def test_content_priority(self):
        assert category_of(_loose(msg="payment warn")) == "warning"


class TestLabel:
    def test_tag_first(self):
        assert label_of(make_record(TS, tag="verifyPayment", type="API")) == "verifyPayment"

    @pytest.mark.parametrize(
        "fields, expected",
        [
            ({"action": "login", "type": "auth"}, "login"),
            ({"type": "auth", "event": "x"}, "auth"),
            ({"event": "boot"}, "boot"),
            ({"message": "m" * 40}, "m" * 30),
        ],
    )
    def test_fallback_order(self, fields, expected):
        assert label_of(_loose(**fields)) == expected

    def test_raw_message_then_path_then_default(self):
        assert label_of(make_record(TS, LogFormat.UNSTRUCTURED, raw_message="plain text")) == "plain text"
        assert label_of(make_record(TS, LogFormat.UNSTRUCTURED, path="a.b")) == "a.b"
        assert label_of(make_record(TS, LogFormat.UNSTRUCTURED)) == "Log"


class TestHighlight:
    def test_all_occurrences(self):
        assert highlight_spans("Error and error", ["error"]) == [(0, 5), (10, 15)]

    def test_overlaps_merged(self):
        assert highlight_spans("aaaa", ["aa"]) == [(0, 4)]
        assert highlight_spans("payment", ["payment", "pay"]) == [(0, 7)]

    def test_no_terms(self):
        assert highlight_spans("anything", []) == []


class TestJsonHelpers:
    def test_strip_json(self):
        message = 'start {"a":{"b":1}} mid [1,[2]] end'
        assert strip_json(message) == "start [JSON] mid [ARRAY] end"

    def test_strip_json_collapses_runs(self):
        assert strip_json('x {"a":1} {"b":2}') == "x [JSON] "

    def test_strip_json_empty(self):
        assert strip_json("") == ""
        assert strip_json(None) is None

    def test_is_json_text(self):
        assert is_json_text('{"a": 1}') is True
        assert is_json_text(" [1, 2] ") is True
        assert is_json_text("{bad") is False
        assert is_json_text("{not json}") is False
        assert is_json_text(5) is False

    def test_deep_parse(self):
        assert deep_parse_json('{"a": "[1, 2]", "b": "{oops}"}') == {"a": [1, 2], "b": "{oops}"}
        assert deep_parse_json("plain") == "plain"


class TestRenderItems:
    def test_items_for_window(self):
        records = [make_record(TS, tag="a", level="ERROR"), make_record(TS, tag="b")]
        layout = TimelineLayout(records)
        items = render_items(layout, VisibleWindow(0, 2), selected=records[1])
        assert [i.index for i in items] == [0, 1]
        assert [i.lane for i in items] == [0, 1]
        assert items[0].category == "error"
        assert items[0].label == "a"
        assert items[0].position == items[1].position
        assert items[1].selected is True
        assert items[0].selected is False
