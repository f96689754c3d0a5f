"""
Knowledge base chunk ORM model.

Stores one contiguous slice of a document together with its embedding.
The embedding column uses pgvector with an HNSW cosine index.

Dependencies: sqlalchemy, pgvector, helpdesk.boundary.db.base, helpdesk.configs
System role: Vector storage for similarity search
"""

import uuid
from typing import Any

from pgvector.sqlalchemy import Vector
from sqlalchemy import JSON, ForeignKey, Index, Integer, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from helpdesk.boundary.db.base import Base, CreatedAtMixin, UUIDMixin
from helpdesk.configs import get_settings

EMBEDDING_DIMENSION = get_settings().embedding.dimension


class ChunkModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Chunk of a knowledge base document.

    Attributes:
        id: UUID primary key (auto-generated)
        document_id: Parent document (ON DELETE CASCADE)
        chunk_text: Chunk content
        chunk_index: Position within the document, unique per document
        embedding: Vector of EMBEDDING_DIMENSION floats
        chunk_metadata: Document metadata plus startChar/endChar (column "metadata")
        created_at: Creation timestamp (UTC)
    """

    __tablename__ = "rag_chunks"
    __table_args__ = (
        UniqueConstraint("document_id", "chunk_index", name="uq_rag_chunks_document_index"),
        Index(
            "ix_rag_chunks_embedding_hnsw",
            "embedding",
            postgresql_using="hnsw",
            postgresql_with={"m": 16, "ef_construction": 64},
            postgresql_ops={"embedding": "vector_cosine_ops"},
        ),
    )

    document_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("rag_documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    chunk_text: Mapped[str] = mapped_column(Text, nullable=False)

    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)

    embedding: Mapped[Any] = mapped_column(Vector(EMBEDDING_DIMENSION), nullable=False)

    chunk_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata",
        JSON,
        nullable=False,
        default=dict,
    )
