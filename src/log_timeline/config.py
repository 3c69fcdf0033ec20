"""Layout and ingestion configuration from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class TimelineConfig:
    """Tunable constants for normalization and timeline layout."""

    # Pixels between two distinct timestamps
    slot_spacing: int = 200
    # Padding before the first slot so the first record is visible
    left_padding: int = 200
    # Minimum pixel distance between two boxes sharing a lane
    min_lane_distance: int = 140
    max_lanes: int = 5
    # How many preceding records the lane packer inspects
    lane_lookback: int = 50
    # Render buffer on each side of the viewport, in slot spacings
    buffer_slots: int = 50
    # Hits normalized between two progress callbacks
    chunk_size: int = 500
    # Viewport width assumed by hosts that have no real viewport
    viewport_width: int = 1280
    # Depth bound for the unstructured object walk
    max_walk_depth: int = 64

    @classmethod
    def from_env(cls) -> TimelineConfig:
        """Load configuration from environment variables."""
        defaults = cls()
        return cls(
            slot_spacing=int(os.environ.get("LOG_TL_SLOT_SPACING", defaults.slot_spacing)),
            left_padding=int(os.environ.get("LOG_TL_LEFT_PADDING", defaults.left_padding)),
            min_lane_distance=int(
                os.environ.get("LOG_TL_MIN_LANE_DISTANCE", defaults.min_lane_distance)
            ),
            max_lanes=int(os.environ.get("LOG_TL_MAX_LANES", defaults.max_lanes)),
            lane_lookback=int(os.environ.get("LOG_TL_LANE_LOOKBACK", defaults.lane_lookback)),
            buffer_slots=int(os.environ.get("LOG_TL_BUFFER_SLOTS", defaults.buffer_slots)),
            chunk_size=int(os.environ.get("LOG_TL_CHUNK_SIZE", defaults.chunk_size)),
            viewport_width=int(os.environ.get("LOG_TL_VIEWPORT_WIDTH", defaults.viewport_width)),
            max_walk_depth=int(os.environ.get("LOG_TL_MAX_WALK_DEPTH", defaults.max_walk_depth)),
        )

    def validate(self) -> list[str]:
        """Return list of validation errors, empty if config is valid."""
        errors = []
        if self.slot_spacing <= 0:
            errors.append("LOG_TL_SLOT_SPACING must be positive")
        if self.left_padding < 0:
            errors.append("LOG_TL_LEFT_PADDING must not be negative")
        if self.max_lanes < 1:
            errors.append("LOG_TL_MAX_LANES must be at least 1")
        if self.lane_lookback < 0:
            errors.append("LOG_TL_LANE_LOOKBACK must not be negative")
        if self.chunk_size <= 0:
            errors.append("LOG_TL_CHUNK_SIZE must be positive")
        if self.viewport_width <= 0:
            errors.append("LOG_TL_VIEWPORT_WIDTH must be positive")
        if self.max_walk_depth < 1:
            errors.append("LOG_TL_MAX_WALK_DEPTH must be at least 1")
        return errors
