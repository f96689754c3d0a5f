"""
Shared test fixtures and configuration for entire test suite.

Provides: Deterministic fake embeddings, settings factories, an in-memory
SQLite engine with the knowledge base schema, and a session factory.
Dependencies: pytest, sqlalchemy, aiosqlite, langchain_core
System role: Test infrastructure and fixture management
"""

from typing import Callable

import pytest
from langchain_core.embeddings import Embeddings
from tenacity import wait_none

TOPICS = ["refund", "shipping", "password", "invoice", "warranty"]


def topic_vector(text: str, dimension: int) -> list[float]:
    """
    Map text onto a fixed topic axis per keyword it mentions.

    Texts sharing a topic keyword have high cosine similarity; unrelated
    texts stay near zero. The last axis carries a small constant so no
    vector is ever all zeros.
    """
    vector = [0.0] * dimension
    lowered = text.lower()
    for axis, topic in enumerate(TOPICS):
        if topic in lowered:
            vector[axis] = 1.0
    vector[-1] = 0.1
    return vector


class FakeEmbeddings(Embeddings):
    """LangChain embeddings backend that records calls and never touches the network."""

    def __init__(self, dimension: int, embed: Callable[[str], list[float]] | None = None) -> None:
        self.dimension = dimension
        self.embed = embed or (lambda text: topic_vector(text, dimension))
        self.document_calls: list[list[str]] = []
        self.query_calls: list[str] = []

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.document_calls.append(list(texts))
        return [self.embed(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        self.query_calls.append(text)
        return self.embed(text)

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        return self.embed_documents(texts)

    async def aembed_query(self, text: str) -> list[float]:
        return self.embed_query(text)


@pytest.fixture
def embedding_dimension() -> int:
    """Dimension of the chunk vector column."""
    from helpdesk.boundary.db.models.chunk_model import EMBEDDING_DIMENSION

    return EMBEDDING_DIMENSION


@pytest.fixture
def fake_embeddings(embedding_dimension: int) -> FakeEmbeddings:
    """Provide topic-keyword fake embeddings at the column dimension."""
    return FakeEmbeddings(embedding_dimension)


@pytest.fixture
def embedding_settings(embedding_dimension: int):
    """Provide embedding settings with a dummy key and the column dimension."""
    from helpdesk.configs.embedding import EmbeddingSettings

    return EmbeddingSettings(api_key="test-key", dimension=embedding_dimension, max_retries=2)


@pytest.fixture
def rag_settings():
    """Provide default RAG settings."""
    from helpdesk.configs.rag import RAGSettings

    return RAGSettings(
        chunk_size=1000,
        chunk_overlap=200,
        min_chunk_size=100,
        top_k=5,
        similarity_threshold=0.7,
    )


@pytest.fixture
def embedding_client(embedding_settings, fake_embeddings):
    """Provide EmbeddingClient wired to fake embeddings with no retry wait."""
    from helpdesk.core.rag.embeddings import EmbeddingClient

    return EmbeddingClient(embedding_settings, embeddings=fake_embeddings, retry_wait=wait_none())


@pytest.fixture
async def test_engine():
    """
    Create in-memory SQLite async engine with the knowledge base schema.

    Yields:
        AsyncEngine: Engine whose tables are dropped after the test
    """
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool
    from helpdesk.boundary.db.create_tables import create_all_tables, drop_all_tables

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    await create_all_tables(engine)

    yield engine

    await drop_all_tables(engine)
    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    """Provide session factory bound to the in-memory engine."""
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
async def test_async_db(test_session_factory):
    """
    Provide a session on the in-memory database.

    Yields:
        AsyncSession: Test database session, rolled back afterwards
    """
    async with test_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def fake_embeddings_cls() -> type[FakeEmbeddings]:
    """Provide the FakeEmbeddings class for tests that need a custom embed function."""
    return FakeEmbeddings
