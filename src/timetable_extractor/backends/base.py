"""Extraction backend interface.

A backend is anything that accepts a prompt (plus an optional binary
document) and returns raw text presumed to contain JSON. Everything after
that call is deterministic and backend-independent.
"""

from __future__ import annotations


class TimetableExtractor:
    """Interface for extraction backends."""

    name: str = "base"

    # MIME types this backend can receive as a binary payload. Empty means text-only.
    vision_mime_types: frozenset[str] = frozenset()

    @property
    def supports_images(self) -> bool:
        return bool(self.vision_mime_types)

    def accepts(self, mime_type: str | None) -> bool:
        """Return True if a payload of this MIME type can be sent directly."""
        return mime_type is not None and mime_type.split(";")[0].strip().lower() in self.vision_mime_types

    async def extract(
        self,
        prompt: str,
        payload: bytes | None = None,
        mime_type: str | None = None,
    ) -> str:
        """Run the prompt and return the raw reply text.

        Raises:
            BackendError: If the backend call fails for any reason.
        """
        raise NotImplementedError
