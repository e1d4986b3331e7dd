"""Normalization and validation of extracted timeblocks.

Backends return loosely shaped JSON: keys in any casing, synonyms for the
same field, ``days`` lists instead of a single ``day``, abbreviated day names
and missing end times. This module turns that into canonical ``Timeblock``
objects in a single validation pass per candidate.

Per-candidate problems never raise. The candidate is dropped, logged with
its original keys, and recorded in ``ExtractionResult.rejections`` so prompt
drift can be diagnosed. Only shape-level problems with the whole reply raise.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any

import structlog

from timetable_extractor.exceptions import EmptyExtraction, MissingTimeblocksArray
from timetable_extractor.extraction.heuristics import infer_end_time
from timetable_extractor.models import (
    DEFAULT_CONFIDENCE,
    UNKNOWN_EVENT_NAME,
    CandidateRejection,
    ExtractionResult,
    Timeblock,
)
from timetable_extractor.utils.clock import format_time, is_valid_time, parse_time
from timetable_extractor.utils.days import normalize_day, split_day_list

logger = structlog.get_logger()

# Canonical field -> synonyms, in precedence order. Keys are compared lower-cased.
FIELD_SYNONYMS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("event_name", ("eventname", "event", "event_title", "title", "subject", "activity", "name")),
    ("start_time", ("starttime", "time_start", "start", "from")),
    ("end_time", ("endtime", "time_end", "end", "to")),
    ("day", ("dayofweek", "day_of_week", "weekday")),
    ("days", ("dayofweeks", "days_of_week", "weekdays")),
    ("notes", ("note", "comments", "comment")),
)


def _is_populated(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, dict)):
        return bool(value)
    return True


def _clean_str(value: Any) -> str | None:
    if not _is_populated(value):
        return None
    s = value if isinstance(value, str) else str(value)
    return s.strip() or None


def _coerce_confidence(value: Any) -> float:
    if isinstance(value, bool) or not value:
        return DEFAULT_CONFIDENCE
    try:
        c = float(value)
    except (TypeError, ValueError):
        return DEFAULT_CONFIDENCE
    if math.isnan(c):
        return DEFAULT_CONFIDENCE
    return min(max(c, 0.0), 1.0)


def reconcile_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Lower-case keys and fold known synonyms into canonical field names.

    The first populated synonym wins. A populated canonical value is never
    overwritten.
    """

    block: dict[str, Any] = {}
    for key, value in raw.items():
        k = str(key).strip().lower()
        if k not in block or not _is_populated(block[k]):
            block[k] = value

    for canonical, synonyms in FIELD_SYNONYMS:
        if _is_populated(block.get(canonical)):
            continue
        for synonym in synonyms:
            if _is_populated(block.get(synonym)):
                block[canonical] = block[synonym]
                break

    return block


def expand_days(block: dict[str, Any]) -> list[dict[str, Any]]:
    """Clone a candidate once per entry of its ``days`` list.

    A candidate with a populated ``day`` (or no ``days``) becomes a
    one-element list. The ``days`` field is dropped from every clone.
    """

    rest = {k: v for k, v in block.items() if k != "days"}
    if _is_populated(block.get("day")) or "days" not in block:
        return [rest]

    days = split_day_list(block["days"])
    if not days:
        return [rest]
    return [{**rest, "day": d} for d in days]


def _finalize(
    block: dict[str, Any],
    *,
    enforce_time_order: bool,
) -> Timeblock | tuple[str, str]:
    """Validate one expanded candidate. Returns a Timeblock or (reason, detail)."""

    day = normalize_day(block.get("day"))
    if day is None:
        return "invalid_day", f"day={block.get('day')!r}"

    event_name = _clean_str(block.get("event_name"))

    start_raw = block.get("start_time")
    if not _is_populated(start_raw):
        return "missing_start_time", f"event_name={event_name!r}"
    start = start_raw.strip() if isinstance(start_raw, str) else start_raw
    if not is_valid_time(start):
        return "invalid_time_format", f"start_time={start_raw!r}"

    end_raw = block.get("end_time")
    if _is_populated(end_raw):
        end = end_raw.strip() if isinstance(end_raw, str) else end_raw
    else:
        end = infer_end_time(event_name, start)
        logger.debug("end_time_inferred", event_name=event_name, start_time=start, end_time=end)
    if not is_valid_time(end):
        return "invalid_time_format", f"end_time={end_raw!r}"

    start_m, end_m = parse_time(start), parse_time(end)
    if enforce_time_order and end_m <= start_m:
        return "end_not_after_start", f"start_time={start!r} end_time={end!r}"

    return Timeblock(
        day=day,
        event_name=event_name or UNKNOWN_EVENT_NAME,
        start_time=format_time(start_m),
        end_time=format_time(end_m),
        notes=_clean_str(block.get("notes")),
        confidence=_coerce_confidence(block.get("confidence")),
    )


def _normalize_candidates(
    raw_blocks: list[Any],
    *,
    enforce_time_order: bool,
) -> tuple[list[Timeblock], list[CandidateRejection], int]:
    timeblocks: list[Timeblock] = []
    rejections: list[CandidateRejection] = []
    considered = 0

    for index, raw in enumerate(raw_blocks):
        if not isinstance(raw, Mapping):
            considered += 1
            rejection = CandidateRejection(
                index=index,
                reason="not_an_object",
                detail=f"type={type(raw).__name__}",
            )
            logger.warning("timeblock_rejected", index=index, reason=rejection.reason, detail=rejection.detail)
            rejections.append(rejection)
            continue

        keys = [str(k) for k in raw.keys()]
        for block in expand_days(reconcile_keys(raw)):
            considered += 1
            outcome = _finalize(block, enforce_time_order=enforce_time_order)
            if isinstance(outcome, Timeblock):
                timeblocks.append(outcome)
                continue

            reason, detail = outcome
            logger.warning("timeblock_rejected", index=index, reason=reason, detail=detail, keys=keys)
            rejections.append(CandidateRejection(index=index, reason=reason, keys=keys, detail=detail))

    return timeblocks, rejections, considered


def normalize_extraction(data: Any, *, enforce_time_order: bool = True) -> ExtractionResult:
    """Turn a parsed backend reply into a validated ExtractionResult.

    Args:
        data: Parsed JSON, expected to be an object with a ``timeblocks`` array.
        enforce_time_order: Drop candidates whose end time is not later than
            their start time. False keeps reversed or zero-length blocks.

    Returns:
        ExtractionResult with surviving timeblocks in input order. The list
        may be empty when every candidate was rejected.

    Raises:
        MissingTimeblocksArray: If ``data`` has no ``timeblocks`` array.
        EmptyExtraction: If the ``timeblocks`` array is empty.
    """

    if not isinstance(data, Mapping) or not isinstance(data.get("timeblocks"), list):
        keys = list(data.keys()) if isinstance(data, Mapping) else None
        logger.error("timeblocks_array_missing", response_type=type(data).__name__, keys=keys)
        raise MissingTimeblocksArray("Invalid model response: missing timeblocks array")

    raw_blocks: list[Any] = data["timeblocks"]
    if not raw_blocks:
        logger.warning("timeblocks_array_empty")
        raise EmptyExtraction()

    timeblocks, rejections, considered = _normalize_candidates(
        raw_blocks,
        enforce_time_order=enforce_time_order,
    )

    if not timeblocks:
        logger.error(
            "all_timeblocks_rejected",
            candidate_count=considered,
            sample=json.dumps(raw_blocks[0], default=str)[:500],
        )
    else:
        logger.info(
            "timeblocks_normalized",
            candidate_count=considered,
            accepted=len(timeblocks),
            rejected=len(rejections),
        )

    metadata = data.get("metadata")
    return ExtractionResult(
        timeblocks=timeblocks,
        metadata=dict(metadata) if isinstance(metadata, Mapping) else {},
        rejections=rejections,
        candidate_count=considered,
    )


def normalize_timeblock(candidate: Mapping[str, Any], *, enforce_time_order: bool = True) -> list[Timeblock]:
    """Normalize a single raw candidate. Returns zero or more timeblocks."""

    timeblocks, _, _ = _normalize_candidates([candidate], enforce_time_order=enforce_time_order)
    return timeblocks
