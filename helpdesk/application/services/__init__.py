"""
Application services.

Exports:
  - RAGStorage: Knowledge base document store
"""

from helpdesk.application.services.rag_storage import RAGStorage

__all__ = ["RAGStorage"]
