"""
Dependency injection for API routes.
"""

from helpdesk.api.deps.dependencies import (
    get_document_processor,
    get_rag_storage,
    get_retrieval_tool,
    get_service_cache,
)

__all__ = [
    "get_document_processor",
    "get_rag_storage",
    "get_retrieval_tool",
    "get_service_cache",
]
