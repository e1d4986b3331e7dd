"""Recover a JSON value from raw backend output."""

from __future__ import annotations

import json
import re
from typing import Any

import structlog

from timetable_extractor.exceptions import MalformedResponse

logger = structlog.get_logger()

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?\s*```$", re.S)
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.S)


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding ```/```json fence and trim whitespace."""

    text = (raw or "").strip()
    m = _FENCE_RE.match(text)
    if m:
        text = m.group(1).strip()
    return text


def parse_response(raw: str) -> Any:
    """Parse a backend reply as JSON.

    Args:
        raw: Raw text returned by the extraction backend.

    Returns:
        The decoded JSON value. No semantic validation is applied.

    Raises:
        MalformedResponse: If no JSON value can be recovered.
    """

    text = strip_code_fences(raw)
    if not text:
        raise MalformedResponse("empty model response")

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        first_error = exc

    # Tolerant path: JSON object wrapped in prose.
    m = _JSON_OBJECT_RE.search(text)
    if m:
        try:
            return json.loads(m.group(0))
        except json.JSONDecodeError:
            pass

    logger.warning(
        "model_response_not_json",
        response_length=len(text),
        response_head=text[:200],
        error=str(first_error),
    )
    raise MalformedResponse(f"model response is not valid JSON: {first_error}") from first_error
