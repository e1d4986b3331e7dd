"""Heuristics for timetable extraction.

We only infer an end time when the backend gave a start time without one
(typically the last column of a grid, which has no following header).
The duration is a best guess keyed on words in the event name.
"""

from __future__ import annotations

from collections.abc import Sequence

from timetable_extractor.models import DEFAULT_CONFIDENCE, Timeblock
from timetable_extractor.utils.clock import add_minutes, split_interval
from timetable_extractor.utils.days import Weekday

DEFAULT_DURATION_MINUTES = 30

# First matching rule wins.
DURATION_RULES: tuple[tuple[tuple[str, ...], int], ...] = (
    (("dismissal", "pack up", "pack-up", "packup", "home time"), 5),
    (("read", "job", "fitness"), 30),
    (("lunch", "recess"), 30),
)


def infer_duration_minutes(event_name: str | None) -> int:
    """Guess how long an event lasts from its name.

    Args:
        event_name: Event name as extracted. Matching is case-insensitive.

    Returns:
        Duration in minutes.
    """

    name = (event_name or "").casefold()
    for keywords, minutes in DURATION_RULES:
        if any(k in name for k in keywords):
            return minutes
    return DEFAULT_DURATION_MINUTES


def infer_end_time(event_name: str | None, start_time: str) -> str:
    """Infer an end time from a start time and the event name.

    Args:
        event_name: Event name used to pick a duration.
        start_time: Valid ``HH:MM`` start time.

    Returns:
        ``HH:MM`` end time, rolling over at midnight.
    """

    return add_minutes(start_time, infer_duration_minutes(event_name))


def split_timeblock(
    day: Weekday | str,
    event_names: Sequence[str],
    start_time: str,
    end_time: str,
    *,
    confidence: float = DEFAULT_CONFIDENCE,
) -> list[Timeblock]:
    """Split one slot shared by several activities into equal timeblocks.

    Each activity gets a contiguous share of the slot in the order given; the
    last one ends exactly at ``end_time``.
    """

    names = [n.strip() for n in event_names if n and n.strip()]
    if not names:
        raise ValueError("at least one event name is required")

    pieces = split_interval(start_time, end_time, len(names))
    note = None
    if len(names) > 1:
        note = f"Split from {start_time}-{end_time} slot ({len(names)} subjects)"

    return [
        Timeblock(
            day=day,
            event_name=name,
            start_time=start,
            end_time=end,
            notes=note,
            confidence=confidence,
        )
        for name, (start, end) in zip(names, pieces)
    ]
