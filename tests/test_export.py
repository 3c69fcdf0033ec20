"""Tests for JSON export and configuration."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

from log_timeline.config import TimelineConfig
from log_timeline.export import export_filename, export_json, export_records
from log_timeline.ingestion.loader import load


class TestExport:
    def test_filename(self):
        now = datetime(2026, 10, 19, 12, 30, 45, 123456, tzinfo=timezone.utc)
        assert export_filename(now) == "logs-export-2026-10-19T12-30-45.json"

    def test_filename_converts_to_utc(self):
        now = datetime(2026, 10, 19, 14, 30, 45, tzinfo=timezone(timedelta(hours=2)))
        assert export_filename(now) == "logs-export-2026-10-19T12-30-45.json"

    def test_pretty_printed(self, three_hit_payload):
        corpus = load(three_hit_payload)
        text = export_json(corpus.records)
        assert text.startswith("[\n  {")
        assert [e["tag"] for e in json.loads(text)] == ["first", "second", "third"]

    def test_write(self, tmp_path, three_hit_payload):
        corpus = load(three_hit_payload)
        now = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        path = export_records(corpus.records[1:], tmp_path / "out", now)
        assert path.name == "logs-export-2026-01-02T03-04-05.json"
        exported = json.loads(path.read_text(encoding="utf-8"))
        assert len(exported) == 2
        assert exported[0]["format"] == "FORMAT_B"
        assert exported[0]["id"] == "b"


class TestConfig:
    def test_defaults(self):
        config = TimelineConfig()
        assert (config.slot_spacing, config.left_padding, config.max_lanes) == (200, 200, 5)
        assert config.validate() == []

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_TL_MAX_LANES", "3")
        monkeypatch.setenv("LOG_TL_CHUNK_SIZE", "100")
        config = TimelineConfig.from_env()
        assert config.max_lanes == 3
        assert config.chunk_size == 100
        assert config.slot_spacing == 200

    def test_validate(self):
        errors = TimelineConfig(slot_spacing=0, max_lanes=0).validate()
        assert len(errors) == 2
