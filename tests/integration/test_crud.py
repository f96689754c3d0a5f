"""
Test suite for the knowledge base CRUD layer against SQLite.

Tests BaseCRUD create/read/delete/exists/count through DocumentCRUD,
status filtering, and chunk bulk operations.

System role: Verification of generic and model-specific database operations
"""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.boundary.db.CRUD.chunk_crud import chunk_crud
from helpdesk.boundary.db.CRUD.document_crud import document_crud
from helpdesk.boundary.db.models.document_model import DocumentStatus


@pytest.fixture
def unit_vector(embedding_dimension: int) -> list[float]:
    """Provide a valid embedding for chunk rows."""
    return [1.0] + [0.0] * (embedding_dimension - 1)


async def make_document(session: AsyncSession, title: str, status=DocumentStatus.INDEXED):
    return await document_crud.create(
        session,
        title=title,
        content=f"{title} body",
        doc_metadata={"category": "faq"},
        status=status,
    )


class TestDocumentCRUD:
    """Test suite for DocumentCRUD."""

    @pytest.mark.asyncio
    async def test_create_should_assign_id_and_timestamp(self, test_async_db: AsyncSession) -> None:
        document = await make_document(test_async_db, "Shipping")

        assert isinstance(document.id, uuid.UUID)
        assert document.created_at is not None
        assert document.doc_metadata == {"category": "faq"}
        assert document.chunk_count == 0

    @pytest.mark.asyncio
    async def test_status_should_default_to_pending(self, test_async_db: AsyncSession) -> None:
        document = await document_crud.create(test_async_db, title="Draft", content="text")

        assert document.status == DocumentStatus.PENDING

    @pytest.mark.asyncio
    async def test_get_by_id_and_exists(self, test_async_db: AsyncSession) -> None:
        document = await make_document(test_async_db, "Refunds")

        assert (await document_crud.get_by_id(test_async_db, document.id)).title == "Refunds"
        assert await document_crud.exists(test_async_db, document.id) is True
        assert await document_crud.get_by_id(test_async_db, uuid.uuid4()) is None
        assert await document_crud.exists(test_async_db, uuid.uuid4()) is False

    @pytest.mark.asyncio
    async def test_get_all_should_paginate(self, test_async_db: AsyncSession) -> None:
        for title in ("A", "B", "C"):
            await make_document(test_async_db, title)

        assert len(await document_crud.get_all(test_async_db)) == 3
        assert len(await document_crud.get_all(test_async_db, limit=2)) == 2
        assert len(await document_crud.get_all(test_async_db, limit=2, offset=2)) == 1

    @pytest.mark.asyncio
    async def test_get_by_status_should_filter(self, test_async_db: AsyncSession) -> None:
        await make_document(test_async_db, "Live")
        await make_document(test_async_db, "Broken", status=DocumentStatus.FAILED)

        failed = await document_crud.get_by_status(test_async_db, DocumentStatus.FAILED)

        assert [d.title for d in failed] == ["Broken"]

    @pytest.mark.asyncio
    async def test_delete_by_id_and_count(self, test_async_db: AsyncSession) -> None:
        document = await make_document(test_async_db, "Old")
        await make_document(test_async_db, "Current")

        assert await document_crud.delete_by_id(test_async_db, document.id) is True
        assert await document_crud.delete_by_id(test_async_db, document.id) is False
        assert await document_crud.count(test_async_db) == 1


class TestChunkCRUD:
    """Test suite for ChunkCRUD bulk operations."""

    @pytest.mark.asyncio
    async def test_create_many_and_read_in_index_order(
        self, test_async_db: AsyncSession, unit_vector: list[float]
    ) -> None:
        document = await make_document(test_async_db, "Warranty")
        rows = [
            {
                "document_id": document.id,
                "chunk_text": f"part {i}",
                "chunk_index": i,
                "embedding": unit_vector,
                "chunk_metadata": {"startChar": i * 10},
            }
            for i in (2, 0, 1)
        ]

        await chunk_crud.create_many(test_async_db, rows)
        chunks = await chunk_crud.get_by_document_id(test_async_db, document.id)

        assert [c.chunk_index for c in chunks] == [0, 1, 2]
        assert [c.chunk_text for c in chunks] == ["part 0", "part 1", "part 2"]
        assert float(chunks[0].embedding[0]) == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_delete_by_document_id_should_return_row_count(
        self, test_async_db: AsyncSession, unit_vector: list[float]
    ) -> None:
        document = await make_document(test_async_db, "Invoices")
        other = await make_document(test_async_db, "Passwords")
        await chunk_crud.create_many(
            test_async_db,
            [
                {"document_id": document.id, "chunk_text": "a", "chunk_index": 0, "embedding": unit_vector},
                {"document_id": document.id, "chunk_text": "b", "chunk_index": 1, "embedding": unit_vector},
                {"document_id": other.id, "chunk_text": "c", "chunk_index": 0, "embedding": unit_vector},
            ],
        )

        assert await chunk_crud.delete_by_document_id(test_async_db, document.id) == 2
        assert await chunk_crud.count(test_async_db) == 1
