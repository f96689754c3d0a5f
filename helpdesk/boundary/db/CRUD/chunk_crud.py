"""
Chunk CRUD operations.

Provides bulk insert, per-document reads and deletes, and pgvector
cosine similarity search for ChunkModel.

Dependencies: sqlalchemy, pgvector, helpdesk.boundary.db.models
System role: Vector persistence and nearest-neighbour queries
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.boundary.db.models.chunk_model import ChunkModel
from helpdesk.boundary.db.models.document_model import DocumentModel, DocumentStatus
from helpdesk.boundary.db.CRUD.base_crud import BaseCRUD


class ChunkCRUD(BaseCRUD[ChunkModel]):
    """
    CRUD operations for ChunkModel.

    Extends BaseCRUD with bulk insert and similarity search.
    """

    def __init__(self) -> None:
        """Initialize ChunkCRUD with ChunkModel."""
        super().__init__(ChunkModel)

    async def create_many(
        self,
        session: AsyncSession,
        rows: Sequence[dict[str, Any]],
    ) -> list[ChunkModel]:
        """
        Insert many chunks in the caller's transaction.

        Args:
            session: Async database session
            rows: Field values for each chunk

        Returns:
            Created ChunkModels with generated IDs
        """
        instances = [ChunkModel(**row) for row in rows]
        session.add_all(instances)
        await session.flush()
        return instances

    async def get_by_document_id(
        self,
        session: AsyncSession,
        document_id: UUID,
    ) -> Sequence[ChunkModel]:
        """
        Retrieve all chunks of a document in chunk_index order.

        Args:
            session: Async database session
            document_id: Parent document UUID

        Returns:
            Sequence of ChunkModels ordered by chunk_index
        """
        stmt = (
            select(ChunkModel)
            .where(ChunkModel.document_id == document_id)
            .order_by(ChunkModel.chunk_index)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_by_document_id(self, session: AsyncSession, document_id: UUID) -> int:
        """
        Delete all chunks of a document.

        Args:
            session: Async database session
            document_id: Parent document UUID

        Returns:
            Number of chunks deleted
        """
        stmt = delete(ChunkModel).where(ChunkModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.rowcount

    async def search_similar(
        self,
        session: AsyncSession,
        query_embedding: Sequence[float],
        threshold: float,
        limit: int,
    ) -> list[tuple[ChunkModel, DocumentModel, float]]:
        """
        Find chunks closest to a query embedding by cosine distance.

        Only chunks of INDEXED documents are considered. Rows with
        similarity (1 - cosine distance) not strictly above threshold are
        excluded in SQL.

        Args:
            session: Async database session
            query_embedding: Query vector (same dimension as stored embeddings)
            threshold: Exclusive lower bound on similarity
            limit: Maximum number of rows

        Returns:
            (chunk, document, similarity) tuples, most similar first
        """
        distance = ChunkModel.embedding.cosine_distance(list(query_embedding))
        similarity = (1 - distance).label("similarity")

        stmt = (
            select(ChunkModel, DocumentModel, similarity)
            .join(DocumentModel, ChunkModel.document_id == DocumentModel.id)
            .where(DocumentModel.status == DocumentStatus.INDEXED)
            .where(1 - distance > threshold)
            .order_by(distance)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return [(chunk, document, float(score)) for chunk, document, score in result.all()]


chunk_crud = ChunkCRUD()
