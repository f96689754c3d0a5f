"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, CreatedAtMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - DocumentModel, ChunkModel, QueryLogModel: Knowledge base entities
  - DocumentStatus: Document indexing state enum
  - document_crud, chunk_crud, query_log_crud: CRUD operation singletons

Dependencies: sqlalchemy, pgvector, helpdesk.configs
System role: Database adapter providing persistent storage for documents,
embedded chunks, and the retrieval query log.
"""

from helpdesk.boundary.db.base import Base, CreatedAtMixin, UUIDMixin
from helpdesk.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from helpdesk.boundary.db.models import (
    ChunkModel,
    DocumentModel,
    DocumentStatus,
    QueryLogModel,
)
from helpdesk.boundary.db.CRUD import (
    BaseCRUD,
    ChunkCRUD,
    DocumentCRUD,
    QueryLogCRUD,
    chunk_crud,
    document_crud,
    query_log_crud,
)

__all__ = [
    # Base classes
    "Base",
    "CreatedAtMixin",
    "UUIDMixin",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "DocumentModel",
    "DocumentStatus",
    "ChunkModel",
    "QueryLogModel",
    # CRUD classes
    "BaseCRUD",
    "DocumentCRUD",
    "ChunkCRUD",
    "QueryLogCRUD",
    # CRUD singletons
    "document_crud",
    "chunk_crud",
    "query_log_crud",
]
