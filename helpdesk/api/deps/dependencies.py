"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: helpdesk.configs, helpdesk.application, helpdesk.boundary, helpdesk.core
System role: DI container for service injection
"""

from helpdesk.application.services.rag_storage import RAGStorage
from helpdesk.boundary.db.connection import get_async_session_factory
from helpdesk.configs import get_settings
from helpdesk.core.rag.chunker import TextChunker
from helpdesk.core.rag.embeddings import EmbeddingClient
from helpdesk.core.rag.file_processor import DocumentProcessor
from helpdesk.core.rag.retrieval_tool import RetrievalTool


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._embedding_client = None
        self._rag_storage = None
        self._document_processor = None
        self._retrieval_tool = None

    @property
    def embedding_client(self) -> EmbeddingClient:
        """Get cached embedding client (remote backend is created on first use)."""
        if self._embedding_client is None:
            self._embedding_client = EmbeddingClient(get_settings().embedding)
        return self._embedding_client

    @property
    def rag_storage(self) -> RAGStorage:
        """Get cached document store."""
        if self._rag_storage is None:
            settings = get_settings()
            self._rag_storage = RAGStorage(
                session_factory=get_async_session_factory(),
                embedding_client=self.embedding_client,
                settings=settings.rag,
                chunker=TextChunker.from_settings(settings.rag),
            )
        return self._rag_storage

    @property
    def document_processor(self) -> DocumentProcessor:
        """Get cached file processor."""
        if self._document_processor is None:
            self._document_processor = DocumentProcessor(get_settings().rag)
        return self._document_processor

    @property
    def retrieval_tool(self) -> RetrievalTool:
        """Get cached retrieval tool."""
        if self._retrieval_tool is None:
            self._retrieval_tool = RetrievalTool(self.rag_storage)
        return self._retrieval_tool

    def clear(self) -> None:
        """Clear all cached instances."""
        self._embedding_client = None
        self._rag_storage = None
        self._document_processor = None
        self._retrieval_tool = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_rag_storage() -> RAGStorage:
    """
    Get document store instance.

    Returns:
        RAGStorage: Shared document store
    """
    return get_service_cache().rag_storage


def get_document_processor() -> DocumentProcessor:
    """
    Get file processor instance.

    Returns:
        DocumentProcessor: Shared file processor
    """
    return get_service_cache().document_processor


def get_retrieval_tool() -> RetrievalTool:
    """
    Get retrieval tool instance.

    Returns:
        RetrievalTool: Shared retrieval tool bound to the document store
    """
    return get_service_cache().retrieval_tool
