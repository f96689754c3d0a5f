"""
Query log CRUD operations.

Dependencies: sqlalchemy, helpdesk.boundary.db.models.query_log_model
System role: Query analytics persistence
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.boundary.db.models.query_log_model import QueryLogModel
from helpdesk.boundary.db.CRUD.base_crud import BaseCRUD


class QueryLogCRUD(BaseCRUD[QueryLogModel]):
    """CRUD operations for QueryLogModel."""

    def __init__(self) -> None:
        """Initialize QueryLogCRUD with QueryLogModel."""
        super().__init__(QueryLogModel)

    async def get_by_conversation_id(
        self,
        session: AsyncSession,
        conversation_id: str,
    ) -> Sequence[QueryLogModel]:
        """Retrieve logged queries of one conversation, oldest first."""
        stmt = (
            select(QueryLogModel)
            .where(QueryLogModel.conversation_id == conversation_id)
            .order_by(QueryLogModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


query_log_crud = QueryLogCRUD()
