"""Timetable extraction service.

This module provides the service that runs one extraction end to end:
prompt, backend call, response parsing and normalization.
"""

from __future__ import annotations

import structlog

from timetable_extractor.backends import build_extractor
from timetable_extractor.backends.base import TimetableExtractor
from timetable_extractor.config import Settings, get_settings
from timetable_extractor.documents import InputKind, detect_input_kind, extract_document_text, resolve_mime_type
from timetable_extractor.exceptions import UnsupportedInputError
from timetable_extractor.extraction.normalizer import normalize_extraction
from timetable_extractor.extraction.parsing import parse_response
from timetable_extractor.extraction.prompt import PROMPT_VERSION, build_image_prompt, build_text_prompt
from timetable_extractor.models import ExtractionResult

logger = structlog.get_logger()


class TimetableExtractionService:
    """Extract normalized timeblocks from timetable documents.

    The service holds no state between calls; concurrent extractions on the
    same instance do not interfere.
    """

    def __init__(
        self,
        extractor: TimetableExtractor | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            extractor: Extraction backend. If None, builds the default provider.
            settings: Application settings. If None, uses default settings.
        """

        self.settings = settings or get_settings()
        self.extractor = extractor or build_extractor(settings=self.settings)
        logger.info(
            "extraction_service_initialized",
            provider=self.extractor.name,
            prompt_version=PROMPT_VERSION,
        )

    async def extract_from_text(self, text: str) -> ExtractionResult:
        """Extract timeblocks from plain timetable text (text mode)."""

        prompt = build_text_prompt(text, max_chars=self.settings.max_prompt_chars)
        logger.info("timetable_extraction_started", mode="text", text_length=len(text or ""))
        raw = await self.extractor.extract(prompt)
        return self._finish(raw, mode="text")

    async def extract_from_image(self, payload: bytes, mime_type: str) -> ExtractionResult:
        """Extract timeblocks from an image or PDF sent as-is (image mode).

        Raises:
            UnsupportedInputError: If the backend cannot read this payload type.
        """

        if not self.extractor.accepts(mime_type):
            raise UnsupportedInputError(
                f"Provider {self.extractor.name!r} cannot read {mime_type} documents directly"
            )

        logger.info("timetable_extraction_started", mode="image", mime_type=mime_type, payload_bytes=len(payload))
        raw = await self.extractor.extract(build_image_prompt(), payload, mime_type)
        return self._finish(raw, mode="image")

    async def extract_from_document(
        self,
        data: bytes,
        *,
        mime_type: str | None = None,
        filename: str | None = None,
        prefer_vision: bool = False,
    ) -> ExtractionResult:
        """Extract timeblocks from an uploaded document, choosing the mode.

        Images always use image mode. PDFs use image mode when
        ``prefer_vision`` is set and the backend can read them; otherwise the
        document text is extracted and text mode is used.
        """

        resolved_mime = resolve_mime_type(mime_type, filename)
        kind = detect_input_kind(resolved_mime)

        if kind is InputKind.IMAGE:
            return await self.extract_from_image(data, resolved_mime)
        if kind is InputKind.PDF and prefer_vision and self.extractor.accepts(resolved_mime):
            return await self.extract_from_image(data, resolved_mime)

        text = extract_document_text(data, kind)
        return await self.extract_from_text(text)

    def _finish(self, raw: str, *, mode: str) -> ExtractionResult:
        result = normalize_extraction(
            parse_response(raw),
            enforce_time_order=self.settings.enforce_time_order,
        )
        logger.info(
            "timetable_extraction_completed",
            mode=mode,
            provider=self.extractor.name,
            timeblock_count=len(result.timeblocks),
            rejected_count=len(result.rejections),
        )
        return result
