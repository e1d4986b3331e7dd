"""Google Gemini extraction backend."""

from __future__ import annotations

from typing import Any

import structlog

from timetable_extractor.backends.base import TimetableExtractor
from timetable_extractor.config import Settings
from timetable_extractor.exceptions import BackendError, ConfigurationError, UnsupportedInputError
from timetable_extractor.extraction.prompt import SYSTEM_PROMPT

logger = structlog.get_logger()


class GeminiExtractor(TimetableExtractor):
    """Extraction backend using the Gemini API.

    Gemini reads images and PDFs natively, so either can be sent as the
    binary payload.
    """

    name = "gemini"
    vision_mime_types = frozenset(
        {"image/png", "image/jpeg", "image/jpg", "image/webp", "application/pdf"}
    )

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the Gemini backend.

        Args:
            settings: Application settings. If None, uses default settings.

        Raises:
            ConfigurationError: If no Gemini API key is configured.
        """
        from timetable_extractor.config import get_settings

        self.settings = settings or get_settings()
        if self.settings.gemini_api_key is None:
            raise ConfigurationError("Gemini is not configured. Set TIMETABLE_GEMINI_API_KEY.")
        self.model = self.settings.gemini_model
        self._client: Any | None = None
        logger.info("gemini_extractor_initialized", model=self.model)

    async def extract(
        self,
        prompt: str,
        payload: bytes | None = None,
        mime_type: str | None = None,
    ) -> str:
        """Generate a JSON reply for the prompt, optionally with an attached document.

        Raises:
            UnsupportedInputError: If the payload type is not readable by Gemini.
            BackendError: If the request fails or the reply is empty.
        """

        if payload is not None and not self.accepts(mime_type):
            raise UnsupportedInputError(f"Gemini cannot read {mime_type or 'unknown'} payloads")

        # Imported lazily to keep import-time cost low and tests fast.
        from google.genai import types

        contents: list[Any] = [prompt]
        if payload is not None:
            contents.append(types.Part.from_bytes(data=payload, mime_type=mime_type))

        config = types.GenerateContentConfig(
            system_instruction=SYSTEM_PROMPT,
            response_mime_type="application/json",
            temperature=self.settings.temperature,
        )

        logger.info(
            "gemini_generate_started",
            model=self.model,
            prompt_length=len(prompt),
            payload_bytes=len(payload) if payload is not None else 0,
        )

        try:
            response = await self._get_client().aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("gemini_generate_failed", error=str(exc))
            raise BackendError(f"Gemini request failed: {exc}") from exc

        text = (response.text or "").strip()
        if not text:
            raise BackendError("Gemini returned an empty response")

        logger.info("gemini_generate_completed", model=self.model, response_length=len(text))
        return text

    def _get_client(self) -> Any:
        if self._client is None:
            from google import genai

            assert self.settings.gemini_api_key is not None
            self._client = genai.Client(api_key=self.settings.gemini_api_key.get_secret_value())
        return self._client
