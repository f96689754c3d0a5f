"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from helpdesk.boundary.db.CRUD import document_crud, chunk_crud

    document = await document_crud.get_by_id(db, document_id)
"""

from helpdesk.boundary.db.CRUD.base_crud import BaseCRUD
from helpdesk.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from helpdesk.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud
from helpdesk.boundary.db.CRUD.query_log_crud import QueryLogCRUD, query_log_crud

__all__ = [
    "BaseCRUD",
    "DocumentCRUD",
    "document_crud",
    "ChunkCRUD",
    "chunk_crud",
    "QueryLogCRUD",
    "query_log_crud",
]
