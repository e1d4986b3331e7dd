"""Data models for Timetable Extractor.

This module contains Pydantic models for data validation and serialization.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from timetable_extractor.models.timeblock import (
    DEFAULT_CONFIDENCE,
    UNKNOWN_EVENT_NAME,
    Timeblock,
    sort_timeblocks,
)
from timetable_extractor.utils.days import Weekday


class CandidateRejection(BaseModel):
    """Why a raw candidate was dropped during normalization."""

    index: int = Field(description="Position of the candidate in the backend's timeblocks array")
    reason: str = Field(description="Short machine-readable rejection code")
    keys: list[str] = Field(default_factory=list, description="Keys present on the raw candidate")
    detail: Optional[str] = Field(default=None, description="Offending values, for diagnostics")


class ExtractionResult(BaseModel):
    """Result of normalizing one backend reply."""

    timeblocks: list[Timeblock] = Field(default_factory=list, description="Validated timeblocks")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Backend-reported metadata (total_events, days_covered, extraction_notes)",
    )
    rejections: list[CandidateRejection] = Field(
        default_factory=list,
        description="Candidates dropped during normalization",
    )
    candidate_count: int = Field(
        default=0,
        description="Number of candidates considered, after multi-day expansion",
    )

    @property
    def fully_rejected(self) -> bool:
        """True when the backend proposed candidates but none survived."""
        return self.candidate_count > 0 and not self.timeblocks

    def to_payload(self) -> dict[str, Any]:
        """Return the canonical ``{timeblocks, metadata}`` wire shape."""
        return {
            "timeblocks": [b.model_dump(mode="json") for b in self.timeblocks],
            "metadata": self.metadata,
        }


__all__ = [
    "DEFAULT_CONFIDENCE",
    "UNKNOWN_EVENT_NAME",
    "CandidateRejection",
    "ExtractionResult",
    "Timeblock",
    "Weekday",
    "sort_timeblocks",
]
