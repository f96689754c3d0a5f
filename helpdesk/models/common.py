"""
Common response models.

The structured failure envelope returned by the HTTP surface.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response schema."""

    ok: bool = False
    error: str = Field(description="Error message")
    details: dict[str, Any] | None = Field(default=None, description="Additional error context")
