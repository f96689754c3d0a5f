"""
Database table creation script.

Enables the pgvector extension and creates all knowledge base tables
from the ORM metadata.

Dependencies: sqlalchemy, helpdesk.configs
System role: Database schema initialization

Usage:
    python -m helpdesk.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from helpdesk.boundary.db.base import Base
from helpdesk.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
from helpdesk.boundary.db.models.document_model import DocumentModel  # noqa: F401
from helpdesk.boundary.db.models.chunk_model import ChunkModel  # noqa: F401
from helpdesk.boundary.db.models.query_log_model import QueryLogModel  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create the vector extension and all tables from registered ORM models.

    Idempotent: CREATE EXTENSION IF NOT EXISTS plus CREATE TABLE IF NOT
    EXISTS for each model, so safe to run on every startup.

    Args:
        engine: Engine to use (defaults to the shared async engine)

    Raises:
        SQLAlchemyError: If the connection fails, the vector extension is not
        installed on the server, or table creation fails
    """
    engine = engine or get_async_engine()

    async with engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
        await conn.run_sync(Base.metadata.create_all)

    logger.info(f"{__name__}:create_all_tables - Knowledge base tables ready")


async def drop_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Drop all knowledge base tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.
    """
    engine = engine or get_async_engine()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    logger.warning(f"{__name__}:drop_all_tables - All knowledge base tables dropped")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(create_all_tables())
