"""
Knowledge base document ORM model.

Represents a document whose content has been chunked and embedded.

Dependencies: sqlalchemy, helpdesk.boundary.db.base
System role: Document persistence for the knowledge base
"""

import enum
from typing import Any

from sqlalchemy import JSON, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from helpdesk.boundary.db.base import Base, CreatedAtMixin, UUIDMixin


class DocumentStatus(str, enum.Enum):
    """
    Document indexing states.

    PENDING: Row registered, chunks not yet written
    INDEXED: Every chunk stored with its embedding; eligible for search
    FAILED: Indexing did not complete; never served by search
    """

    PENDING = "pending"
    INDEXED = "indexed"
    FAILED = "failed"


TITLE_MAX_LENGTH = 512

class DocumentModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Knowledge base document.

    Content is immutable after creation. Chunks reference the document
    with ON DELETE CASCADE.

    Attributes:
        id: UUID primary key (auto-generated)
        title: Display name (512 char limit)
        content: Full original text
        doc_metadata: Open key/value map (column "metadata")
        source: Provenance tag ("upload", "batch-upload", ...)
        status: Indexing status; search only joins INDEXED documents
        chunk_count: Number of chunks written with the document
        created_at: Creation timestamp (UTC)
    """

    __tablename__ = "rag_documents"

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    doc_metadata: Mapped[dict[str, Any]] = mapped_column(
        "metadata",
        JSON,
        nullable=False,
        default=dict,
    )

    source: Mapped[str | None] = mapped_column(String(100), nullable=True)

    status: Mapped[DocumentStatus] = mapped_column(
        Enum(
            DocumentStatus,
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=DocumentStatus.PENDING,
        index=True,
    )

    chunk_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
