"""
API routers.

Exports:
  - health_router: Liveness and database checks
  - rag_router: Knowledge base ingestion and search
"""

from helpdesk.api.routers.health import router as health_router
from helpdesk.api.routers.rag import router as rag_router

__all__ = ["health_router", "rag_router"]
