"""Weekday normalization.

Backends report days in whatever form the source document used: full names,
one/two/three-letter abbreviations, trailing punctuation, or a day name buried
in a longer label ("Monday (Week A)").
"""

from __future__ import annotations

import re
from enum import Enum


class Weekday(str, Enum):
    """Canonical weekday names, in calendar order."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


_ABBREVIATIONS: dict[str, Weekday] = {
    "m": Weekday.MONDAY,
    "tu": Weekday.TUESDAY,
    "w": Weekday.WEDNESDAY,
    "th": Weekday.THURSDAY,
    "f": Weekday.FRIDAY,
    "sa": Weekday.SATURDAY,
    "su": Weekday.SUNDAY,
    "mon": Weekday.MONDAY,
    "tue": Weekday.TUESDAY,
    "tues": Weekday.TUESDAY,
    "wed": Weekday.WEDNESDAY,
    "thu": Weekday.THURSDAY,
    "thur": Weekday.THURSDAY,
    "thurs": Weekday.THURSDAY,
    "fri": Weekday.FRIDAY,
    "sat": Weekday.SATURDAY,
    "sun": Weekday.SUNDAY,
}

_FULL_NAMES: dict[str, Weekday] = {d.value.casefold(): d for d in Weekday}

_DAY_LIST_SEPARATOR_RE = re.compile(r"\s*(?:[,/&;+]|\band\b)\s*", re.I)


def normalize_day(value: object) -> Weekday | None:
    """Map an arbitrary day token to a canonical weekday.

    Args:
        value: Raw day value from a backend reply.

    Returns:
        The matching Weekday, or None when nothing resolves.
    """

    if not isinstance(value, str):
        return None

    token = value.strip().rstrip(".,:;").strip()
    if not token:
        return None

    key = token.casefold()
    if key in _ABBREVIATIONS:
        return _ABBREVIATIONS[key]
    if key in _FULL_NAMES:
        return _FULL_NAMES[key]

    for day in Weekday:
        if day.value.casefold() in key:
            return day

    return None


def split_day_list(value: object) -> list[object]:
    """Split a multi-day value into individual day tokens.

    Strings such as a joint column header ("Monday, Tuesday & Thursday") are
    split on common separators, whether given alone or as list entries.
    Non-string list entries pass through unchanged.
    """

    if isinstance(value, (list, tuple)):
        tokens: list[object] = []
        for item in value:
            tokens.extend(split_day_list(item) if isinstance(item, str) else [item])
        return tokens
    if isinstance(value, str):
        return [part for part in _DAY_LIST_SEPARATOR_RE.split(value) if part.strip()]
    if value is None:
        return []
    return [value]
