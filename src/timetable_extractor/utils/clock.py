"""Minute-precision clock arithmetic over ``HH:MM`` strings."""

from __future__ import annotations

import re

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")


def is_valid_time(value: object) -> bool:
    """Return True if value is a 24-hour ``HH:MM`` string (leading zero optional)."""

    return isinstance(value, str) and _TIME_RE.match(value) is not None


def parse_time(value: str) -> int:
    """Convert ``HH:MM`` to minutes since midnight.

    Raises:
        ValueError: If value is not a valid 24-hour time.
    """

    if not is_valid_time(value):
        raise ValueError(f"invalid 24-hour time: {value!r}")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_time(minutes: int) -> str:
    """Format minutes since midnight as zero-padded ``HH:MM``, wrapping at midnight."""

    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def duration_minutes(start: str, end: str) -> int:
    """Return ``end - start`` in minutes. Negative when end is earlier."""

    return parse_time(end) - parse_time(start)


def add_minutes(value: str, minutes: int) -> str:
    """Add minutes to a time, rolling over within the day."""

    return format_time(parse_time(value) + int(minutes))


def split_interval(start: str, end: str, parts: int) -> list[tuple[str, str]]:
    """Split ``start``-``end`` into ``parts`` contiguous sub-intervals.

    Boundaries are rounded to the nearest minute (halves round up) and the
    final sub-interval always ends exactly at ``end``, so the pieces cover the
    whole span with no gap or overlap.

    Raises:
        ValueError: If parts < 1 or the span is empty or reversed.
    """

    if parts < 1:
        raise ValueError("parts must be at least 1")

    start_m = parse_time(start)
    end_m = parse_time(end)
    total = end_m - start_m
    if total <= 0:
        raise ValueError(f"cannot split empty or reversed span {start}-{end}")

    # Integer round-half-up of i * total / parts.
    bounds = [start_m + (2 * i * total + parts) // (2 * parts) for i in range(parts)]
    bounds.append(end_m)

    return [(format_time(a), format_time(b)) for a, b in zip(bounds, bounds[1:])]
