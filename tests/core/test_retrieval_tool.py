"""
Test suite for RetrievalTool and the rag_search LangChain tool.

Tests result formatting, the empty-result contract, failure opacity, and
context forwarding to the document store.

System role: Verification of the agent-facing retrieval interface
"""

import json
import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from helpdesk.core.exceptions import EmbeddingError
from helpdesk.core.rag.retrieval_tool import (
    NO_RESULTS_MESSAGE,
    RetrievalTool,
    create_rag_search_tool,
)
from helpdesk.models.chunk import Chunk
from helpdesk.models.document import Document, SearchResult
from helpdesk.models.retrieval import RetrievalContext


def make_result(title: str, text: str, similarity: float) -> SearchResult:
    document = Document(
        id=uuid.uuid4(),
        title=title,
        content=text,
        created_at=datetime.now(timezone.utc),
    )
    chunk = Chunk(
        id=uuid.uuid4(),
        document_id=document.id,
        chunk_text=text,
        chunk_index=0,
        metadata={"startChar": 0},
    )
    return SearchResult(chunk=chunk, document=document, similarity=similarity)


@pytest.fixture
def mock_storage() -> AsyncMock:
    """Provide mock RAGStorage."""
    return AsyncMock()


@pytest.fixture
def retrieval_tool(mock_storage: AsyncMock) -> RetrievalTool:
    """Provide RetrievalTool over the mock storage."""
    return RetrievalTool(mock_storage)


class TestRetrieve:
    """Test suite for RetrievalTool.retrieve."""

    @pytest.mark.asyncio
    async def test_results_should_be_ranked_and_formatted(
        self, retrieval_tool: RetrievalTool, mock_storage: AsyncMock
    ) -> None:
        mock_storage.search.return_value = [
            make_result("Refund Policy", "Refunds within 30 days.", 0.91234),
            make_result("Shipping", "Ships in 2 days.", 0.8),
        ]

        response = await retrieval_tool.retrieve("refunds?", top_k=3)

        assert response.found is True
        assert response.message == "Found 2 relevant results"
        assert [r.rank for r in response.results] == [1, 2]
        assert response.results[0].similarity == "0.912"
        assert response.results[1].similarity == "0.800"
        assert response.results[0].source == "Refund Policy"
        assert response.results[0].metadata == {"startChar": 0}
        assert response.context == "Refunds within 30 days.\n\n---\n\nShips in 2 days."

    @pytest.mark.asyncio
    async def test_no_results_should_return_not_found(
        self, retrieval_tool: RetrievalTool, mock_storage: AsyncMock
    ) -> None:
        mock_storage.search.return_value = []

        response = await retrieval_tool.retrieve("unknown topic")

        assert response.found is False
        assert response.results == []
        assert response.message == NO_RESULTS_MESSAGE
        assert response.error is None

    @pytest.mark.asyncio
    async def test_failure_should_be_reported_not_raised(
        self, retrieval_tool: RetrievalTool, mock_storage: AsyncMock
    ) -> None:
        mock_storage.search.side_effect = EmbeddingError("Failed to generate embedding: timeout")

        response = await retrieval_tool.retrieve("refunds?")

        assert response.found is False
        assert response.error == "Failed to generate embedding: timeout"

    @pytest.mark.asyncio
    async def test_context_should_be_forwarded_to_search(
        self, retrieval_tool: RetrievalTool, mock_storage: AsyncMock
    ) -> None:
        mock_storage.search.return_value = []

        await retrieval_tool.retrieve(
            "refunds?",
            top_k=4,
            context=RetrievalContext(user_id="u-1", conversation_id="c-1"),
        )

        mock_storage.search.assert_awaited_once_with(
            "refunds?", 4, user_id="u-1", conversation_id="c-1"
        )


class TestRagSearchTool:
    """Test suite for the LangChain tool wrapper."""

    def test_tool_should_be_named_rag_search(self, retrieval_tool: RetrievalTool) -> None:
        search_tool = create_rag_search_tool(retrieval_tool)

        assert search_tool.name == "rag_search"
        assert "knowledge base" in search_tool.description

    @pytest.mark.asyncio
    async def test_tool_should_read_caller_from_run_config(
        self, retrieval_tool: RetrievalTool, mock_storage: AsyncMock
    ) -> None:
        mock_storage.search.return_value = [make_result("Refund Policy", "Refunds within 30 days.", 0.9)]
        search_tool = create_rag_search_tool(retrieval_tool)

        output = await search_tool.ainvoke(
            {"query": "refunds?", "top_k": 2},
            config={"configurable": {"user_id": "u-9", "conversation_id": "c-9"}},
        )

        payload = json.loads(output)
        assert payload["found"] is True
        assert payload["results"][0]["source"] == "Refund Policy"
        mock_storage.search.assert_awaited_once_with(
            "refunds?", 2, user_id="u-9", conversation_id="c-9"
        )
