"""
Chunk domain models.

TextChunk is the chunker output (not yet persisted); Chunk is a stored,
embedded segment of a knowledge base document.

Dependencies: pydantic
System role: Data structures for document chunks in ingestion and retrieval
"""

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TextChunk(BaseModel):
    """Segment produced by the chunker, in emission order."""

    text: str = Field(description="Chunk text (stripped)")
    index: int = Field(ge=0, description="Zero-based emission index")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Caller metadata merged with startChar/endChar offsets",
    )


class Chunk(BaseModel):
    """Persisted document chunk."""

    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    document_id: uuid.UUID = Field(alias="documentId")
    chunk_text: str = Field(alias="chunkText")
    chunk_index: int = Field(alias="chunkIndex")
    metadata: dict[str, Any] = Field(default_factory=dict)
    embedding: list[float] | None = Field(default=None, description="Embedding vector")
