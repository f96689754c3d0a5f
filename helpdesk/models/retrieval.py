"""
Retrieval tool schemas.

Contract between the knowledge base and the agent layer.

Dependencies: pydantic
System role: Agent-facing retrieval response structures
"""

from typing import Any

from pydantic import BaseModel, Field


class RetrievalContext(BaseModel):
    """Caller identity forwarded to the query log."""

    user_id: str | None = None
    conversation_id: str | None = None


class RankedResult(BaseModel):
    """One formatted search hit."""

    rank: int = Field(ge=1, description="1-based position in the result list")
    similarity: str = Field(description="Similarity formatted to 3 decimal places")
    source: str = Field(description="Title of the source document")
    content: str = Field(description="Chunk text")
    metadata: dict[str, Any] = Field(default_factory=dict)


class RetrievalResponse(BaseModel):
    """Failure-opaque result of a knowledge base lookup."""

    found: bool
    message: str | None = None
    results: list[RankedResult] = Field(default_factory=list)
    context: str = Field(default="", description="Result texts joined for prompt assembly")
    error: str | None = None
