"""Document kind detection and the plain-text pre-step for text mode.

PDF and DOCX timetables can be sent to a text-only backend once their text
has been extracted. Tables are rendered row by row with `` | `` between
cells so the grid layout (column headers, day rows) survives as text.
Images are never converted here; they go to a vision-capable backend.
"""

from __future__ import annotations

import io
from enum import Enum
from pathlib import Path

import structlog

from timetable_extractor.exceptions import UnsupportedInputError

logger = structlog.get_logger()


class InputKind(str, Enum):
    """Kinds of timetable documents the extractor understands."""

    PDF = "pdf"
    DOCX = "docx"
    IMAGE = "image"
    TEXT = "text"


DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_MIME_KINDS: dict[str, InputKind] = {
    "application/pdf": InputKind.PDF,
    DOCX_MIME_TYPE: InputKind.DOCX,
    "image/png": InputKind.IMAGE,
    "image/jpeg": InputKind.IMAGE,
    "image/jpg": InputKind.IMAGE,
    "image/webp": InputKind.IMAGE,
    "text/plain": InputKind.TEXT,
}

_EXTENSION_MIME_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".docx": DOCX_MIME_TYPE,
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".txt": "text/plain",
}


def guess_mime_type(filename: str | Path) -> str | None:
    """Guess a supported MIME type from a file extension."""
    return _EXTENSION_MIME_TYPES.get(Path(filename).suffix.lower())


def resolve_mime_type(mime_type: str | None = None, filename: str | Path | None = None) -> str:
    """Resolve the canonical MIME type of a document.

    Parameters such as ``; name=...`` are dropped. A missing or unknown MIME
    type (``application/octet-stream`` from a browser upload, say) falls
    back to the file extension.

    Raises:
        UnsupportedInputError: If neither identifies a supported kind.
    """

    if mime_type:
        cleaned = mime_type.split(";")[0].strip().lower()
        if cleaned in _MIME_KINDS:
            return cleaned

    if filename is not None:
        guessed = guess_mime_type(filename)
        if guessed is not None:
            return guessed

    raise UnsupportedInputError(f"Unsupported document type: mime_type={mime_type!r} filename={filename!r}")


def detect_input_kind(mime_type: str | None = None, filename: str | Path | None = None) -> InputKind:
    """Resolve the document kind from its MIME type, falling back to the file name.

    Raises:
        UnsupportedInputError: If neither identifies a supported kind.
    """
    return _MIME_KINDS[resolve_mime_type(mime_type, filename)]


def extract_document_text(data: bytes, kind: InputKind) -> str:
    """Extract plain text from a PDF, DOCX or text document.

    Args:
        data: Raw document bytes.
        kind: Document kind, see detect_input_kind.

    Returns:
        Extracted text, stripped.

    Raises:
        UnsupportedInputError: For images (no local OCR) or unreadable documents.
    """

    if kind is InputKind.IMAGE:
        raise UnsupportedInputError("Images have no text layer; send them to a vision-capable backend")

    try:
        if kind is InputKind.PDF:
            text = _pdf_text(data)
        elif kind is InputKind.DOCX:
            text = _docx_text(data)
        else:
            text = data.decode("utf-8", errors="replace")
    except UnsupportedInputError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.exception("document_text_extraction_failed", kind=kind.value, error=str(exc))
        raise UnsupportedInputError(f"Could not read {kind.value} document: {exc}") from exc

    text = text.strip()
    logger.info("document_text_extracted", kind=kind.value, text_length=len(text))
    return text


def _pdf_text(data: bytes) -> str:
    # Imported lazily to keep import-time cost low and tests fast.
    import pdfplumber

    pages: list[str] = []
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for page in pdf.pages:
            pages.append(page.extract_text() or "")
    return "\n\n".join(pages)


def _docx_text(data: bytes) -> str:
    from docx import Document

    doc = Document(io.BytesIO(data))
    lines = [p.text for p in doc.paragraphs if p.text.strip()]

    for table in doc.tables:
        lines.append("")
        for row in table.rows:
            # row.cells repeats a horizontally merged cell once per grid column.
            cells = []
            previous = None
            for cell in row.cells:
                if cell._tc is previous:
                    continue
                previous = cell._tc
                cells.append(" ".join(cell.text.split()))
            lines.append(" | ".join(cells))

    return "\n".join(lines)
