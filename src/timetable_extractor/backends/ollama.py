"""Ollama extraction backend.

Notes:
    The request is made with ``urllib`` (synchronous) and wrapped in
    ``asyncio.to_thread`` so the rest of the codebase can remain async-friendly.
"""

from __future__ import annotations

import asyncio
import base64
import json
import urllib.error
import urllib.request
from typing import Any

import structlog

from timetable_extractor.backends.base import TimetableExtractor
from timetable_extractor.config import Settings
from timetable_extractor.exceptions import BackendError, ConfigurationError, UnsupportedInputError
from timetable_extractor.extraction.prompt import SYSTEM_PROMPT

logger = structlog.get_logger()


class OllamaExtractor(TimetableExtractor):
    """Extraction backend backed by a local Ollama server.

    Images are passed through Ollama's ``images`` field, which requires a
    vision-capable model (e.g. llama3.2-vision). PDFs must go through the
    document text pre-step instead.
    """

    name = "ollama"
    vision_mime_types = frozenset({"image/png", "image/jpeg", "image/jpg", "image/webp"})

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the Ollama backend.

        Args:
            settings: Application settings. If None, uses default settings.

        Raises:
            ConfigurationError: If no Ollama host is configured.
        """
        from timetable_extractor.config import get_settings

        self.settings = settings or get_settings()
        if not self.settings.ollama_host:
            raise ConfigurationError(
                "Ollama is not configured. Set TIMETABLE_OLLAMA_HOST (e.g. http://localhost:11434)."
            )
        self.host = self.settings.ollama_host.rstrip("/")
        self.model = self.settings.ollama_model
        logger.info("ollama_extractor_initialized", host=self.host, model=self.model)

    async def extract(
        self,
        prompt: str,
        payload: bytes | None = None,
        mime_type: str | None = None,
    ) -> str:
        """Generate a reply for the prompt, optionally with an attached image.

        Raises:
            UnsupportedInputError: If the payload is not an image.
            BackendError: If the request fails or the reply is unusable.
        """

        if payload is not None and not self.accepts(mime_type):
            raise UnsupportedInputError(f"Ollama cannot read {mime_type or 'unknown'} payloads directly")

        body: dict[str, Any] = {
            "model": self.model,
            "system": SYSTEM_PROMPT,
            "prompt": prompt,
            "stream": False,
            "format": "json",
            "options": {"temperature": self.settings.temperature},
        }
        if payload is not None:
            body["images"] = [base64.b64encode(payload).decode("ascii")]

        logger.info(
            "ollama_generate_started",
            model=self.model,
            prompt_length=len(prompt),
            payload_bytes=len(payload) if payload is not None else 0,
        )

        try:
            data = await asyncio.to_thread(self._post_generate, body)
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace")[:500]
            logger.exception("ollama_generate_failed", status=exc.code, detail=detail)
            raise BackendError(f"Ollama returned HTTP {exc.code}: {detail}") from exc
        except Exception as exc:  # noqa: BLE001
            logger.exception("ollama_generate_failed", error=str(exc))
            raise BackendError(f"Ollama request failed: {exc}") from exc

        if data.get("error"):
            raise BackendError(f"Ollama error: {data['error']}")

        text = (data.get("response") or "").strip()
        if not text:
            raise BackendError("Ollama returned an empty response")

        logger.info("ollama_generate_completed", model=self.model, response_length=len(text))
        return text

    def _post_generate(self, body: dict[str, Any]) -> dict[str, Any]:
        req = urllib.request.Request(
            url=f"{self.host}/api/generate",
            data=json.dumps(body).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        with urllib.request.urlopen(req, timeout=self.settings.ollama_timeout) as resp:  # noqa: S310
            return json.loads(resp.read().decode("utf-8"))
