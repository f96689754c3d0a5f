"""
Test suite for DocumentProcessor.

Tests per-type text extraction, type and size validation, and base64
payload decoding.

System role: Verification of upload text extraction
"""

import base64
import io
import json
import zipfile

import pytest
from pypdf import PdfWriter

from helpdesk.configs.rag import RAGSettings
from helpdesk.core.exceptions import ParsingError, ValidationError
from helpdesk.core.rag.file_processor import DOCX_MIME_TYPE, DocumentProcessor

DOCUMENT_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
    "<w:body><w:p><w:r><w:t>Refunds take five business days.</w:t></w:r></w:p></w:body>"
    "</w:document>"
)


@pytest.fixture
def processor() -> DocumentProcessor:
    """Provide processor with default limits."""
    return DocumentProcessor(RAGSettings())


@pytest.fixture
def docx_bytes() -> bytes:
    """Provide a minimal single-paragraph DOCX archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("word/document.xml", DOCUMENT_XML)
    return buffer.getvalue()


@pytest.fixture
def blank_pdf_bytes() -> bytes:
    """Provide a one-page PDF without a text layer."""
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class TestProcessFileValidation:
    """Test suite for type and size checks."""

    def test_unsupported_type_should_raise_validation_error(
        self, processor: DocumentProcessor
    ) -> None:
        with pytest.raises(ValidationError, match="Unsupported file type: image/png") as exc_info:
            processor.process_file("photo.png", "image/png", b"\x89PNG")

        assert "application/pdf" in exc_info.value.details["supported_types"]

    def test_missing_content_type_should_be_unsupported(self, processor: DocumentProcessor) -> None:
        with pytest.raises(ValidationError, match="application/octet-stream"):
            processor.process_file("blob", None, b"data")

    def test_oversized_file_should_raise_validation_error(self) -> None:
        processor = DocumentProcessor(RAGSettings(max_file_size=10))

        with pytest.raises(ValidationError, match="File too large"):
            processor.process_file("notes.txt", "text/plain", b"x" * 11)

    def test_missing_filename_should_raise_validation_error(
        self, processor: DocumentProcessor
    ) -> None:
        with pytest.raises(ValidationError):
            processor.process_file("", "text/plain", b"hello")


class TestProcessFileExtraction:
    """Test suite for per-type extraction."""

    def test_plain_text_should_be_decoded(self, processor: DocumentProcessor) -> None:
        result = processor.process_file("faq.txt", "text/plain", "Café hours: 9-5".encode("utf-8"))

        assert result.text == "Café hours: 9-5"
        assert result.metadata == {
            "fileName": "faq.txt",
            "fileType": "text/plain",
            "fileSize": len("Café hours: 9-5".encode("utf-8")),
        }

    def test_markdown_should_be_read_as_text(self, processor: DocumentProcessor) -> None:
        result = processor.process_file("guide.md", "text/markdown", b"# Guide\n\nStep one.")

        assert result.text == "# Guide\n\nStep one."

    def test_csv_should_report_rows_and_headers(self, processor: DocumentProcessor) -> None:
        data = b"name,email\nAnn,ann@example.com\nBob,bob@example.com\n\n"

        result = processor.process_file("users.csv", "text/csv", data)

        assert result.metadata["rowCount"] == 2
        assert result.metadata["columnCount"] == 2
        assert result.metadata["headers"] == ["name", "email"]

    def test_json_should_be_pretty_printed_with_keys(self, processor: DocumentProcessor) -> None:
        data = b'{"plan": "pro", "limits": {"seats": 5}}'

        result = processor.process_file("plan.json", "application/json", data)

        assert result.text == json.dumps({"plan": "pro", "limits": {"seats": 5}}, indent=2)
        assert result.metadata["keys"] == ["plan", "limits"]

    def test_invalid_json_should_raise_parsing_error(self, processor: DocumentProcessor) -> None:
        with pytest.raises(ParsingError, match="Invalid JSON"):
            processor.process_file("bad.json", "application/json", b"{not json")

    def test_docx_should_extract_paragraph_text(
        self, processor: DocumentProcessor, docx_bytes: bytes
    ) -> None:
        result = processor.process_file("policy.docx", DOCX_MIME_TYPE, docx_bytes)

        assert result.text == "Refunds take five business days."

    def test_corrupt_docx_should_raise_parsing_error(self, processor: DocumentProcessor) -> None:
        with pytest.raises(ParsingError, match="DOCX processing failed"):
            processor.process_file("broken.docx", DOCX_MIME_TYPE, b"not a zip archive")

    def test_pdf_without_text_layer_should_yield_empty_text(
        self, processor: DocumentProcessor, blank_pdf_bytes: bytes
    ) -> None:
        result = processor.process_file("scan.pdf", "application/pdf", blank_pdf_bytes)

        assert result.text == ""
        assert result.metadata["pageCount"] == 1

    def test_unreadable_pdf_should_raise_parsing_error(self, processor: DocumentProcessor) -> None:
        with pytest.raises(ParsingError, match="PDF processing failed"):
            processor.process_file("empty.pdf", "application/pdf", b"")


class TestProcessBase64:
    """Test suite for base64 payloads."""

    def test_base64_payload_should_be_decoded(self, processor: DocumentProcessor) -> None:
        payload = base64.b64encode(b"Reset your password from the login page.").decode()

        result = processor.process_base64(payload, "reset.txt", "text/plain")

        assert result.text == "Reset your password from the login page."

    def test_data_url_prefix_should_be_stripped(self, processor: DocumentProcessor) -> None:
        payload = "data:text/plain;base64," + base64.b64encode(b"hello").decode()

        result = processor.process_base64(payload, "hello.txt", "text/plain")

        assert result.text == "hello"

    def test_invalid_base64_should_raise_validation_error(
        self, processor: DocumentProcessor
    ) -> None:
        with pytest.raises(ValidationError, match="Invalid base64"):
            processor.process_base64("!!!not base64!!!", "x.txt", "text/plain")
