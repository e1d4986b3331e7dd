"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import json

import pytest
import structlog

from timetable_extractor.backends.base import TimetableExtractor


class ScriptedExtractor(TimetableExtractor):
    """Fake backend that replays fixed replies and records every call."""

    name = "scripted"

    def __init__(self, *replies: str | Exception, vision: bool = True) -> None:
        self._replies = list(replies)
        self.calls: list[dict] = []
        if vision:
            self.vision_mime_types = frozenset({"image/png", "image/jpeg", "application/pdf"})

    async def extract(self, prompt, payload=None, mime_type=None):
        self.calls.append({"prompt": prompt, "payload": payload, "mime_type": mime_type})
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo CLI logging configuration between tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def mock_settings():
    """Provide mock settings for testing."""
    from timetable_extractor.config import Settings

    return Settings(
        ollama_host="http://test:11434",
        ollama_model="test-model",
        gemini_api_key=None,
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def scripted_extractor():
    """Build a ScriptedExtractor from replies."""
    return ScriptedExtractor


@pytest.fixture
def sample_timetable_text() -> str:
    """Provide timetable text as produced by the PDF/DOCX pre-step."""
    return """
    Class 2B Weekly Timetable
    | 8:40 | 9:00 | 9:15-10:20 | 10:20-10:35 | 10:35-12:00 | 12:00-13:00 | 13:00-15:10 | 15:10 |
    M | Reading books and register | Maths | English | Break | Science | Lunch | PE | Pack Up
    Tu | Reading books and register | RWI / Play (Observation) | English | Break | History | Lunch | Art | Pack Up
    W | Reading books and register | Maths | English | Break | Geography | Lunch | Music | Pack Up
    Th | Reading books and register | Maths | English | Break | Science | Lunch | Computing | Pack Up
    F | Reading books and register | Maths | Spelling | Break | RE | Lunch | Golden Time | Pack Up
    """


@pytest.fixture
def break_reply() -> str:
    """A backend reply listing Break once per weekday."""
    days = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
    return json.dumps(
        {
            "timeblocks": [
                {
                    "day": d,
                    "event_name": "Break",
                    "start_time": "10:20",
                    "end_time": "10:35",
                    "notes": None,
                    "confidence": 0.95,
                }
                for d in days
            ],
            "metadata": {
                "total_events": 5,
                "days_covered": days,
                "extraction_notes": "Detected locked block for Break.",
            },
        }
    )
