"""Timeline spatial layout: slot positions, lane packing, render window."""

from __future__ import annotations

from typing import NamedTuple, Optional, Sequence

from log_timeline.config import TimelineConfig
from log_timeline.ingestion.models import LogRecord


class VisibleWindow(NamedTuple):
    """Half-open index range ``[start, end)`` of records to render."""

    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start


def build_slot_map(records: Sequence[LogRecord]) -> dict[str, int]:
    """Sequential slot per distinct timestamp string, in first-seen order."""
    slots: dict[str, int] = {}
    for record in records:
        if record.timestamp not in slots:
            slots[record.timestamp] = len(slots)
    return slots


def assign_lanes(
    records: Sequence[LogRecord],
    slots: dict[str, int],
    config: TimelineConfig,
) -> list[int]:
    """Greedy lane packing over a bounded look-back window.

    A record conflicts with an earlier record in the same lane if they share
    a timestamp string, or if their slots are closer than
    ``min_lane_distance`` pixels. The lowest free lane wins. When every lane
    up to ``max_lanes`` conflicts, the record goes to ``index % max_lanes``
    and overlap is accepted.
    """
    lanes = [0] * len(records)
    spacing = config.slot_spacing

    for index, record in enumerate(records):
        position = slots.get(record.timestamp, 0) * spacing
        window_start = max(0, index - config.lane_lookback)

        lane = 0
        while True:
            conflict = False
            for other_index in range(window_start, index):
                if lanes[other_index] != lane:
                    continue
                other = records[other_index]
                if other.timestamp == record.timestamp:
                    conflict = True
                    break
                other_position = slots.get(other.timestamp, 0) * spacing
                if abs(position - other_position) < config.min_lane_distance:
                    conflict = True
                    break

            if not conflict:
                lanes[index] = lane
                break
            lane += 1
            if lane >= config.max_lanes:
                lanes[index] = index % config.max_lanes
                break

    return lanes


class TimelineLayout:
    """Layout of one record list on a horizontal, slot-spaced track.

    Built once per displayed list and never updated incrementally; a new
    filtered view gets a new layout.
    """

    def __init__(
        self,
        records: Sequence[LogRecord],
        config: Optional[TimelineConfig] = None,
        viewport_width: Optional[float] = None,
    ) -> None:
        self.config = config or TimelineConfig()
        self.records = list(records)
        self.viewport_width = (
            viewport_width if viewport_width is not None else self.config.viewport_width
        )
        self._slots = build_slot_map(self.records)
        self._lanes: Optional[list[int]] = None

    @property
    def slot_count(self) -> int:
        return len(self._slots)

    @property
    def track_width(self) -> float:
        return max(
            self.slot_count * self.config.slot_spacing + self.config.left_padding,
            self.viewport_width * 2,
        )

    @property
    def lanes(self) -> list[int]:
        if self._lanes is None:
            self._lanes = assign_lanes(self.records, self._slots, self.config)
        return self._lanes

    def slot_of(self, record: LogRecord) -> int:
        return self._slots.get(record.timestamp, 0)

    def pixel_of(self, record: LogRecord) -> float:
        return self.config.left_padding + self.slot_of(record) * self.config.slot_spacing

    def position_of(self, record: LogRecord) -> float:
        """Fraction of the track width, in ``[0, 1]``."""
        return self.pixel_of(record) / self.track_width

    def lane_of(self, index: int) -> int:
        return self.lanes[index]

    def visible_window(
        self, scroll_offset: float, viewport_width: Optional[float] = None
    ) -> VisibleWindow:
        """Index span of records inside the viewport plus a render buffer."""
        if not self.records:
            return VisibleWindow(0, 0)
        if viewport_width is None:
            viewport_width = self.viewport_width

        buffer = self.config.buffer_slots * self.config.slot_spacing
        buffered_start = max(0, scroll_offset - buffer)
        buffered_end = scroll_offset + viewport_width + buffer

        start = 0
        for i, record in enumerate(self.records):
            if self.pixel_of(record) >= buffered_start:
                start = i
                break

        end = len(self.records)
        for i in range(len(self.records) - 1, -1, -1):
            if self.pixel_of(self.records[i]) <= buffered_end:
                end = i + 1
                break

        return VisibleWindow(start, max(start, end))

    def scroll_offset_for(
        self, index: int, viewport_width: Optional[float] = None
    ) -> Optional[float]:
        """Scroll offset that centers record ``index``; None if out of range."""
        if index < 0 or index >= len(self.records):
            return None
        if viewport_width is None:
            viewport_width = self.viewport_width
        return max(0.0, self.pixel_of(self.records[index]) - viewport_width / 2)
