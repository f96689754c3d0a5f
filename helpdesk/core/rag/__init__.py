"""
Knowledge base components.

Exports:
  - TextChunker: Overlapping sentence-aware chunking
  - EmbeddingClient: Remote embedding generation and cosine similarity
  - DocumentProcessor: Text extraction from uploaded files
  - RetrievalTool, create_rag_search_tool: Agent-facing search

Dependencies: langchain_core, langchain_openai, tenacity, numpy, pypdf, docx2txt
System role: Knowledge base building blocks
"""

from helpdesk.core.rag.chunker import TextChunker
from helpdesk.core.rag.embeddings import EmbeddingClient
from helpdesk.core.rag.file_processor import DocumentProcessor
from helpdesk.core.rag.retrieval_tool import RetrievalTool, create_rag_search_tool

__all__ = [
    "TextChunker",
    "EmbeddingClient",
    "DocumentProcessor",
    "RetrievalTool",
    "create_rag_search_tool",
]
