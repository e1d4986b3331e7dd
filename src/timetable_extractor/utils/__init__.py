"""Utility functions for Timetable Extractor."""

from timetable_extractor.utils.clock import (
    add_minutes,
    duration_minutes,
    format_time,
    is_valid_time,
    parse_time,
    split_interval,
)
from timetable_extractor.utils.days import Weekday, normalize_day, split_day_list

__all__ = [
    "Weekday",
    "add_minutes",
    "duration_minutes",
    "format_time",
    "is_valid_time",
    "normalize_day",
    "parse_time",
    "split_day_list",
    "split_interval",
]
