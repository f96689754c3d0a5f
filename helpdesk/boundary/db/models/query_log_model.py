"""
Retrieval query log ORM model.

Append-only record of every search served by the knowledge base.

Dependencies: sqlalchemy, helpdesk.boundary.db.base
System role: Query analytics storage
"""

from typing import Any

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from helpdesk.boundary.db.base import Base, CreatedAtMixin, UUIDMixin


class QueryLogModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Logged retrieval query.

    Attributes:
        query_text: Raw query as received
        results_count: Number of results returned
        chunks_retrieved: Chunk ids of the returned results, in rank order
        user_id: Caller's user id, if known
        conversation_id: Caller's conversation id, if known
        created_at: Query timestamp (UTC)
    """

    __tablename__ = "rag_queries"

    query_text: Mapped[str] = mapped_column(Text, nullable=False)

    results_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    chunks_retrieved: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)

    user_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

    conversation_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
