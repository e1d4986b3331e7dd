"""Unit tests for document kind detection and text extraction."""

import io

import pytest

from timetable_extractor.documents import (
    DOCX_MIME_TYPE,
    InputKind,
    detect_input_kind,
    extract_document_text,
    guess_mime_type,
    resolve_mime_type,
)
from timetable_extractor.exceptions import UnsupportedInputError


class TestDetectInputKind:
    """Test suite for detect_input_kind."""

    @pytest.mark.parametrize(
        ("mime_type", "kind"),
        [
            ("application/pdf", InputKind.PDF),
            (DOCX_MIME_TYPE, InputKind.DOCX),
            ("image/png", InputKind.IMAGE),
            ("image/jpeg", InputKind.IMAGE),
            ("image/jpg", InputKind.IMAGE),
            ("text/plain; charset=utf-8", InputKind.TEXT),
        ],
    )
    def test_from_mime_type(self, mime_type: str, kind: InputKind) -> None:
        assert detect_input_kind(mime_type) is kind

    def test_falls_back_to_filename(self) -> None:
        assert detect_input_kind("application/octet-stream", "Timetable 2B.DOCX") is InputKind.DOCX
        assert detect_input_kind(None, "week.jpeg") is InputKind.IMAGE

    def test_unknown_raises(self) -> None:
        with pytest.raises(UnsupportedInputError):
            detect_input_kind("application/zip", "timetable.zip")

    def test_guess_mime_type(self) -> None:
        assert guess_mime_type("a.PDF") == "application/pdf"
        assert guess_mime_type("a.xlsx") is None


class TestResolveMimeType:
    """Test suite for resolve_mime_type."""

    def test_parameters_are_dropped(self) -> None:
        assert resolve_mime_type("Image/PNG; name=week.png") == "image/png"

    def test_generic_type_uses_extension(self) -> None:
        assert resolve_mime_type("application/octet-stream", "week.JPG") == "image/jpeg"
        assert resolve_mime_type(None, "week.pdf") == "application/pdf"

    def test_unknown_raises(self) -> None:
        with pytest.raises(UnsupportedInputError):
            resolve_mime_type("application/octet-stream")


class TestExtractDocumentText:
    """Test suite for extract_document_text."""

    def test_plain_text(self) -> None:
        assert extract_document_text(b"  Monday 9:00 Maths \n", InputKind.TEXT) == "Monday 9:00 Maths"

    def test_images_have_no_text_layer(self) -> None:
        with pytest.raises(UnsupportedInputError):
            extract_document_text(b"\x89PNG", InputKind.IMAGE)

    def test_unreadable_pdf_raises(self) -> None:
        with pytest.raises(UnsupportedInputError):
            extract_document_text(b"not a pdf", InputKind.PDF)

    def test_docx_tables_render_as_rows(self) -> None:
        docx = pytest.importorskip("docx")

        doc = docx.Document()
        doc.add_paragraph("Class 2B")
        table = doc.add_table(rows=2, cols=3)
        for i, text in enumerate(["", "8:40", "9:00"]):
            table.cell(0, i).text = text
        for i, text in enumerate(["M", "Register", "Maths"]):
            table.cell(1, i).text = text
        buf = io.BytesIO()
        doc.save(buf)

        text = extract_document_text(buf.getvalue(), InputKind.DOCX)

        assert text.splitlines()[0] == "Class 2B"
        assert "M | Register | Maths" in text
        assert " | 8:40 | 9:00" in text

    def test_docx_merged_cells_appear_once_per_row(self) -> None:
        docx = pytest.importorskip("docx")

        doc = docx.Document()
        table = doc.add_table(rows=1, cols=3)
        table.cell(0, 0).text = "Tu"
        merged = table.cell(0, 1).merge(table.cell(0, 2))
        merged.text = "Break"
        buf = io.BytesIO()
        doc.save(buf)

        text = extract_document_text(buf.getvalue(), InputKind.DOCX)

        assert "Tu | Break" in text
        assert "Break | Break" not in text
