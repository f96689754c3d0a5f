"""
Knowledge base document models and schemas.

Domain objects returned by the document store plus the request/response
schemas of the ingestion HTTP surface.

Dependencies: pydantic, helpdesk.models.chunk
System role: Document API contracts
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from helpdesk.models.chunk import Chunk


class Document(BaseModel):
    """Knowledge base document."""

    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    title: str
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    source: str | None = None
    status: str = "indexed"
    chunk_count: int = Field(default=0, alias="chunkCount")
    created_at: datetime = Field(alias="createdAt")


class SearchResult(BaseModel):
    """A chunk, its parent document, and the cosine similarity to the query."""

    chunk: Chunk
    document: Document
    similarity: float


class DocumentStats(BaseModel):
    """Knowledge base counters."""

    model_config = ConfigDict(populate_by_name=True)

    document_count: int = Field(alias="documentCount")
    chunk_count: int = Field(alias="chunkCount")
    query_count: int = Field(alias="queryCount")


class BatchDocumentItem(BaseModel):
    """One entry of a batch upload. Fields are optional so a bad item fails alone."""

    title: str | None = None
    content: str | None = None
    metadata: dict[str, Any] | None = None
    source: str | None = None


class BatchUploadRequest(BaseModel):
    """Request schema for batch text upload."""

    documents: list[Any] = Field(
        description="Documents to index; each entry is validated on its own",
    )


class BatchItemResult(BaseModel):
    """Outcome of one batch upload entry."""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    success: bool
    document_id: uuid.UUID | None = Field(default=None, alias="documentId")
    error: str | None = None


class SearchRequest(BaseModel):
    """Request schema for knowledge base search."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(description="Search query text")
    top_k: int = Field(default=5, ge=1, le=100, alias="topK")


class DocumentSummary(BaseModel):
    """List entry for a document, with a short content preview."""

    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    title: str
    source: str | None = None
    status: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(alias="createdAt")
    preview: str


class ExtractedText(BaseModel):
    """Text pulled out of an uploaded file, with file-level metadata."""

    text: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class UploadResponse(BaseModel):
    """Response schema for a single file upload."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    message: str
    document_id: uuid.UUID = Field(alias="documentId")
    metadata: dict[str, Any] = Field(default_factory=dict)


class BatchUploadResponse(BaseModel):
    """Response schema for batch text upload."""

    ok: bool = True
    message: str
    results: list[BatchItemResult]


class SearchHit(BaseModel):
    """One search result as exposed over HTTP."""

    model_config = ConfigDict(populate_by_name=True)

    document_id: uuid.UUID = Field(alias="documentId")
    document_title: str = Field(alias="documentTitle")
    chunk_text: str = Field(alias="chunkText")
    similarity: float
    source: str | None = None


class SearchResponse(BaseModel):
    """Response schema for knowledge base search."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    query: str
    results_count: int = Field(alias="resultsCount")
    results: list[SearchHit]


class DocumentListResponse(BaseModel):
    """Response schema for document listing."""

    ok: bool = True
    count: int
    documents: list[DocumentSummary]


class DocumentResponse(BaseModel):
    """Response schema for a single document, optionally with its chunks."""

    ok: bool = True
    document: Document
    chunks: list[Chunk] | None = None


class DeleteResponse(BaseModel):
    """Response schema for document deletion."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    message: str
    document_id: uuid.UUID = Field(alias="documentId")


class StatsResponse(BaseModel):
    """Response schema for knowledge base statistics."""

    ok: bool = True
    stats: DocumentStats
