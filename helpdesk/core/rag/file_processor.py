"""
Uploaded file text extraction.

Turns raw upload bytes into plain text plus file-level metadata, one
extractor per supported MIME type. PDFs are read from their text layer
only; scanned pages yield no text.

Dependencies: pypdf, docx2txt, helpdesk.configs
System role: Input stage of file-based document ingestion
"""

import base64
import binascii
import csv
import io
import json
import logging

import docx2txt
from pypdf import PdfReader

from helpdesk.configs.rag import RAGSettings
from helpdesk.core.exceptions import ParsingError, ValidationError
from helpdesk.models.document import ExtractedText

logger = logging.getLogger(__name__)

DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class DocumentProcessor:
    """Extract text from uploaded files by MIME type."""

    def __init__(self, settings: RAGSettings) -> None:
        """
        Initialize processor.

        Args:
            settings: Supported file types and size limit
        """
        self.settings = settings
        self._extractors = {
            "text/plain": self._process_text,
            "text/markdown": self._process_text,
            "application/pdf": self._process_pdf,
            DOCX_MIME_TYPE: self._process_docx,
            "text/csv": self._process_csv,
            "application/json": self._process_json,
        }

    def process_file(self, filename: str, content_type: str | None, data: bytes) -> ExtractedText:
        """
        Extract text from a file.

        Args:
            filename: Original file name
            content_type: MIME type reported by the client
            data: Raw file bytes

        Returns:
            ExtractedText: Text and metadata (fileName, fileType, fileSize, plus
            type-specific keys)

        Raises:
            ValidationError: If the type is unsupported or the file is too large
            ParsingError: If extraction fails
        """
        if not filename:
            raise ValidationError("Invalid file: missing file name", field="file")

        file_type = content_type or "application/octet-stream"
        extractor = self._extractors.get(file_type)
        if extractor is None or file_type not in self.settings.supported_file_types:
            raise ValidationError(
                f"Unsupported file type: {file_type}",
                field="file",
                details={"supported_types": list(self.settings.supported_file_types)},
            )

        if len(data) > self.settings.max_file_size:
            raise ValidationError(
                f"File too large. Max size: {self.settings.max_file_size // (1024 * 1024)}MB",
                field="file",
                details={"file_size": len(data)},
            )

        logger.info(
            f"{__name__}:process_file - Processing file",
            extra={"file_name": filename, "file_type": file_type, "file_size": len(data)},
        )

        base_metadata = {"fileName": filename, "fileType": file_type, "fileSize": len(data)}
        try:
            text, extra_metadata = extractor(data)
        except ParsingError:
            raise
        except Exception as e:
            logger.error(
                f"{__name__}:process_file - Extraction failed",
                extra={"file_name": filename, "file_type": file_type, "error": str(e)},
            )
            raise ParsingError(
                f"Failed to extract text from {filename}: {e}",
                file_type=file_type,
            ) from e

        return ExtractedText(text=text, metadata={**base_metadata, **extra_metadata})

    def process_base64(self, data: str, filename: str, mime_type: str | None) -> ExtractedText:
        """
        Decode a base64 payload (optionally a data: URL) and extract its text.

        Raises:
            ValidationError: If the payload is not valid base64
        """
        if data.startswith("data:") and "," in data:
            data = data.split(",", 1)[1]

        try:
            raw = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationError("Invalid base64 file data", field="data") from e

        return self.process_file(filename, mime_type, raw)

    @staticmethod
    def _decode(data: bytes) -> str:
        return data.decode("utf-8-sig", errors="replace")

    def _process_text(self, data: bytes) -> tuple[str, dict]:
        return self._decode(data), {}

    def _process_pdf(self, data: bytes) -> tuple[str, dict]:
        try:
            reader = PdfReader(io.BytesIO(data))
            pages = [page.extract_text() or "" for page in reader.pages]
        except Exception as e:
            raise ParsingError(f"PDF processing failed: {e}", file_type="application/pdf") from e

        return "\n\n".join(pages).strip(), {"pageCount": len(pages)}

    def _process_docx(self, data: bytes) -> tuple[str, dict]:
        try:
            text = docx2txt.process(io.BytesIO(data))
        except Exception as e:
            raise ParsingError(f"DOCX processing failed: {e}", file_type=DOCX_MIME_TYPE) from e

        return (text or "").strip(), {}

    def _process_csv(self, data: bytes) -> tuple[str, dict]:
        text = self._decode(data)
        rows = [row for row in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in row)]
        headers = rows[0] if rows else []

        return text, {
            "rowCount": max(len(rows) - 1, 0),
            "columnCount": len(headers),
            "headers": headers,
        }

    def _process_json(self, data: bytes) -> tuple[str, dict]:
        try:
            parsed = json.loads(self._decode(data))
        except json.JSONDecodeError as e:
            raise ParsingError(f"Invalid JSON: {e}", file_type="application/json") from e

        keys = list(parsed.keys()) if isinstance(parsed, dict) else []
        return json.dumps(parsed, indent=2, ensure_ascii=False), {"keys": keys}
