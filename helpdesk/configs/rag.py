"""
RAG configuration settings.

Chunking, retrieval, and upload limits for the knowledge base.

Dependencies: pydantic, pydantic_settings
System role: Knowledge base tuning parameters
"""

from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from helpdesk.configs.base import BaseSettings

SUPPORTED_FILE_TYPES = [
    "text/plain",
    "application/pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/markdown",
    "text/csv",
    "application/json",
]


class RAGSettings(BaseSettings):
    """Chunking and retrieval configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RAG_",
        case_sensitive=False,
        extra="ignore",
    )

    # Chunking
    chunk_size: int = Field(default=1000, ge=1, description="Characters per chunk window")
    chunk_overlap: int = Field(default=200, ge=0, description="Overlap between chunks")
    min_chunk_size: int = Field(default=100, ge=0, description="Minimum emitted chunk length")

    # Retrieval
    top_k: int = Field(default=5, ge=1, description="Number of chunks to retrieve")
    similarity_threshold: float = Field(
        default=0.7,
        ge=-1.0,
        le=1.0,
        description="Minimum cosine similarity for a chunk to be returned",
    )
    max_tokens: int = Field(default=4000, description="Max tokens for assembled context")

    # Uploads
    supported_file_types: list[str] = Field(
        default_factory=lambda: list(SUPPORTED_FILE_TYPES),
        description="MIME types accepted for upload",
    )
    max_file_size: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum upload size in bytes",
    )

    @model_validator(mode="after")
    def _check_overlap(self) -> "RAGSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self
