"""
Knowledge base retrieval tool.

Agent-facing entry point to the document store. Formats search hits for
prompt assembly and never raises: every failure becomes a structured
negative response.

Dependencies: langchain_core.tools, helpdesk.application.services.rag_storage
System role: Search tool for agent context retrieval
"""

import logging
from typing import TYPE_CHECKING

from langchain_core.runnables import RunnableConfig
from langchain_core.tools import tool

from helpdesk.models.retrieval import RankedResult, RetrievalContext, RetrievalResponse

if TYPE_CHECKING:
    from helpdesk.application.services.rag_storage import RAGStorage

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No relevant information found in the knowledge base."
CONTEXT_SEPARATOR = "\n\n---\n\n"


class RetrievalTool:
    """Query the knowledge base on behalf of an agent."""

    def __init__(self, storage: "RAGStorage") -> None:
        """
        Initialize retrieval tool.

        Args:
            storage: Document store to search
        """
        self.storage = storage

    async def retrieve(
        self,
        query: str,
        top_k: int = 5,
        context: RetrievalContext | None = None,
    ) -> RetrievalResponse:
        """
        Search the knowledge base and format the hits.

        Args:
            query: Natural-language query
            top_k: Maximum number of results
            context: Caller identity forwarded to the query log

        Returns:
            RetrievalResponse: found=True with ranked results and joined context,
            found=False with a message when nothing matched, or found=False with
            error when the search failed
        """
        context = context or RetrievalContext()
        logger.info(f"{__name__}:retrieve - START query_len={len(query or '')}, top_k={top_k}")

        try:
            results = await self.storage.search(
                query,
                top_k,
                user_id=context.user_id,
                conversation_id=context.conversation_id,
            )
        except Exception as e:
            logger.error(f"{__name__}:retrieve - Search FAILED: {type(e).__name__}: {e}")
            message = e.message if hasattr(e, "message") else str(e)
            return RetrievalResponse(found=False, error=message)

        if not results:
            logger.info(f"{__name__}:retrieve - No results found")
            return RetrievalResponse(found=False, message=NO_RESULTS_MESSAGE, results=[])

        ranked = [
            RankedResult(
                rank=rank,
                similarity=f"{r.similarity:.3f}",
                source=r.document.title,
                content=r.chunk.chunk_text,
                metadata=r.chunk.metadata,
            )
            for rank, r in enumerate(results, start=1)
        ]

        logger.info(f"{__name__}:retrieve - END results={len(ranked)}")
        return RetrievalResponse(
            found=True,
            message=f"Found {len(ranked)} relevant results",
            results=ranked,
            context=CONTEXT_SEPARATOR.join(r.content for r in ranked),
        )


def create_rag_search_tool(retrieval_tool: RetrievalTool):
    """
    Create the rag_search LangChain tool bound to a RetrievalTool.

    The caller's user_id and conversation_id are read from the run config's
    "configurable" section.

    Args:
        retrieval_tool: RetrievalTool instance to delegate to

    Returns:
        BaseTool: Async tool returning the RetrievalResponse as JSON
    """

    @tool("rag_search")
    async def rag_search(query: str, config: RunnableConfig, top_k: int = 5) -> str:
        """Search the knowledge base using semantic similarity.

        Use this when the user asks questions that might be answered by stored
        documents, manuals, guides, or previous documentation.

        Args:
            query: The search query to find relevant information
            top_k: Number of results to return (default: 5)
        """
        configurable = (config or {}).get("configurable", {})
        response = await retrieval_tool.retrieve(
            query,
            top_k,
            RetrievalContext(
                user_id=configurable.get("user_id"),
                conversation_id=configurable.get("conversation_id"),
            ),
        )
        return response.model_dump_json(exclude_none=True)

    return rag_search
