"""Timetable Extractor - LLM-backed extraction of teacher timetables.

This package turns a weekly timetable (image, PDF, Word document or text)
into a normalized list of timeblocks by delegating layout understanding to a
generative model and strictly validating whatever JSON comes back.
"""

__version__ = "0.1.0"
__author__ = "Trickl"

from timetable_extractor.config import Settings, get_settings
from timetable_extractor.models import ExtractionResult, Timeblock, Weekday

__all__ = [
    "ExtractionResult",
    "Settings",
    "Timeblock",
    "Weekday",
    "get_settings",
    "__version__",
    "__author__",
]
