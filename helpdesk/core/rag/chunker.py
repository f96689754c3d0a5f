"""
Text chunker for knowledge base ingestion.

Splits normalized document text into overlapping, sentence-boundary-aware
windows. A paragraph-packing strategy is available as an alternative.

Dependencies: re, helpdesk.models.chunk, helpdesk.configs
System role: First stage of document ingestion
"""

import re
from typing import Any

from helpdesk.configs.rag import RAGSettings
from helpdesk.models.chunk import TextChunk

_PARAGRAPH_SPLIT = re.compile(r"\n\n+")


class TextChunker:
    """Sliding-window chunker with sentence boundary search."""

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        min_chunk_size: int = 100,
    ) -> None:
        """
        Initialize chunker with window configuration.

        Args:
            chunk_size: Window width in characters
            chunk_overlap: Characters shared by consecutive chunks
            min_chunk_size: Chunks shorter than this are not emitted

        Raises:
            ValueError: When chunk_size is not positive or overlap is negative
        """
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        if chunk_overlap < 0:
            raise ValueError("chunk_overlap cannot be negative")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.min_chunk_size = min_chunk_size

    @classmethod
    def from_settings(cls, settings: RAGSettings) -> "TextChunker":
        """Build a chunker from RAG settings."""
        return cls(
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap,
            min_chunk_size=settings.min_chunk_size,
        )

    def chunk_text(self, text: Any, metadata: dict[str, Any] | None = None) -> list[TextChunk]:
        """
        Split text into overlapping chunks.

        Each window is cut back to the last ". " or newline when that boundary
        lies past half the window. The start advances by the emitted window
        length minus the overlap (at least one character), so the actual
        overlap depends on where boundaries fall. The sweep stops once a
        window reaches the end of the text.

        Args:
            text: Document text (non-strings are coerced with str())
            metadata: Metadata copied onto every chunk

        Returns:
            list[TextChunk]: Chunks in order, with startChar/endChar offsets
            into the normalized text
        """
        base_metadata = dict(metadata or {})
        cleaned = self.clean_text(text)

        if len(cleaned) < self.min_chunk_size:
            return [TextChunk(text=cleaned, index=0, metadata=base_metadata)]

        chunks: list[TextChunk] = []
        text_length = len(cleaned)
        start = 0

        while start < text_length:
            end = min(start + self.chunk_size, text_length)
            window = cleaned[start:end]

            if end < text_length:
                break_point = max(window.rfind(". "), window.rfind("\n"))
                if break_point > self.chunk_size * 0.5:
                    window = window[: break_point + 1]

            stripped = window.strip()
            if len(stripped) >= self.min_chunk_size:
                chunks.append(
                    TextChunk(
                        text=stripped,
                        index=len(chunks),
                        metadata={
                            **base_metadata,
                            "startChar": start,
                            "endChar": start + len(window),
                        },
                    )
                )

            if end >= text_length:
                break

            start += max(1, len(window) - self.chunk_overlap)

        return chunks

    def chunk_by_paragraphs(self, text: Any, max_chunk_size: int = 1000) -> list[TextChunk]:
        """
        Pack whole paragraphs into chunks of at most max_chunk_size characters.

        A single paragraph longer than max_chunk_size becomes its own chunk.
        No overlap and no boundary search.

        Args:
            text: Document text
            max_chunk_size: Size at which the current chunk is flushed

        Returns:
            list[TextChunk]: Paragraph chunks in order
        """
        paragraphs = _PARAGRAPH_SPLIT.split(self._coerce(text))
        chunks: list[TextChunk] = []
        current = ""

        for paragraph in paragraphs:
            paragraph = paragraph.strip()
            if not paragraph:
                continue

            if current and len(current) + len(paragraph) > max_chunk_size:
                chunks.append(TextChunk(text=current.strip(), index=len(chunks)))
                current = paragraph
            else:
                current = f"{current}\n\n{paragraph}" if current else paragraph

        if current.strip():
            chunks.append(TextChunk(text=current.strip(), index=len(chunks)))

        return chunks

    def clean_text(self, text: Any) -> str:
        """
        Normalize whitespace.

        Unifies line endings, turns tabs into spaces, collapses space runs,
        limits blank-line runs to one empty line, and trims the result.
        """
        cleaned = self._coerce(text)
        cleaned = cleaned.replace("\r\n", "\n").replace("\r", "\n")
        cleaned = cleaned.replace("\t", " ")
        cleaned = re.sub(r" +", " ", cleaned)
        cleaned = re.sub(r"\n{3,}", "\n\n", cleaned)
        return cleaned.strip()

    def extract_metadata(self, text: Any) -> dict[str, Any]:
        """
        Compute simple text statistics.

        Returns:
            dict: charCount, wordCount, paragraphCount and, when the first line
            is shorter than 100 characters, potentialTitle
        """
        text = self._coerce(text)
        metadata: dict[str, Any] = {
            "charCount": len(text),
            "wordCount": len(text.split()),
            "paragraphCount": len(_PARAGRAPH_SPLIT.split(text)),
        }

        first_line = text.split("\n", 1)[0]
        if len(first_line) < 100:
            metadata["potentialTitle"] = first_line.strip()

        return metadata

    @staticmethod
    def _coerce(text: Any) -> str:
        if text is None:
            return ""
        return text if isinstance(text, str) else str(text)
