"""
Database models package.

Exports:
  - DocumentModel, DocumentStatus: Document ORM model and status enum
  - ChunkModel: Embedded chunk ORM model
  - QueryLogModel: Retrieval query log ORM model

Dependencies: sqlalchemy, pgvector, helpdesk.boundary.db.base
System role: Database model definitions for the knowledge base
"""

from helpdesk.boundary.db.models.document_model import DocumentModel, DocumentStatus
from helpdesk.boundary.db.models.chunk_model import ChunkModel, EMBEDDING_DIMENSION
from helpdesk.boundary.db.models.query_log_model import QueryLogModel

__all__ = [
    "DocumentModel",
    "DocumentStatus",
    "ChunkModel",
    "EMBEDDING_DIMENSION",
    "QueryLogModel",
]
