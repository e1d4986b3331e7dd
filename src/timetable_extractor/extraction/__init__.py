"""Prompt contract, response parsing and normalization of timetable extractions."""

from .normalizer import normalize_extraction, normalize_timeblock
from .parsing import parse_response
from .prompt import PROMPT_VERSION, SYSTEM_PROMPT, build_image_prompt, build_text_prompt

__all__ = [
    "PROMPT_VERSION",
    "SYSTEM_PROMPT",
    "build_image_prompt",
    "build_text_prompt",
    "normalize_extraction",
    "normalize_timeblock",
    "parse_response",
]
