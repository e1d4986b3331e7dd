"""Canonical timeblock model.

A timeblock is the sole durable output of an extraction: one scheduled event
on one weekday with a 24-hour start and end time.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from timetable_extractor.utils.clock import duration_minutes, format_time, is_valid_time, parse_time
from timetable_extractor.utils.days import Weekday

UNKNOWN_EVENT_NAME = "Unknown Event"
DEFAULT_CONFIDENCE = 0.8


class Timeblock(BaseModel):
    """A single normalized timetable event."""

    day: Weekday = Field(description="Canonical weekday")
    event_name: str = Field(min_length=1, description="Event name exactly as printed in the source")
    start_time: str = Field(description="Start time as HH:MM (24h)")
    end_time: str = Field(description="End time as HH:MM (24h)")
    notes: str | None = Field(default=None, description="Extra cell text (room, teacher, ...)")
    confidence: float = Field(default=DEFAULT_CONFIDENCE, ge=0.0, le=1.0)

    @field_validator("event_name")
    @classmethod
    def _strip_event_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("event_name must not be blank")
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def _check_time(cls, v: str) -> str:
        if not is_valid_time(v):
            raise ValueError(f"expected HH:MM (24h), got {v!r}")
        return format_time(parse_time(v))

    @property
    def duration_minutes(self) -> int:
        """Length of the block in minutes."""
        return duration_minutes(self.start_time, self.end_time)


def sort_timeblocks(timeblocks: list[Timeblock]) -> list[Timeblock]:
    """Order timeblocks by weekday, then start time.

    Normalization preserves input order; this is for presentation only.
    """

    day_order = {day: i for i, day in enumerate(Weekday)}
    return sorted(timeblocks, key=lambda b: (day_order[b.day], parse_time(b.start_time)))
