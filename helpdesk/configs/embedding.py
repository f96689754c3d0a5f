"""
Embedding model configuration settings.

Manages the OpenAI-compatible embeddings endpoint (OpenRouter by default),
model selection, vector dimension, and remote batching limits.

Dependencies: pydantic, pydantic_settings
System role: Embedding client configuration for RAG ingestion and search
"""

from pydantic import AliasChoices, Field
from pydantic_settings import SettingsConfigDict

from helpdesk.configs.base import BaseSettings


class EmbeddingSettings(BaseSettings):
    """Remote embedding model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("EMBEDDING_API_KEY", "OPENROUTER_API_KEY"),
        description="API key for the embeddings endpoint",
    )
    base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="OpenAI-compatible API base URL",
    )
    model: str = Field(
        default="text-embedding-ada-002",
        description="Embedding model name",
    )
    dimension: int = Field(
        default=1536,
        description="Embedding vector dimension (must match the chunk vector column)",
    )
    batch_size: int = Field(
        default=100,
        ge=1,
        description="Maximum number of texts per remote embedding call",
    )
    max_input_chars: int = Field(
        default=8000,
        ge=1,
        description="Input texts are truncated to this many characters",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        description="Attempts per remote call before giving up",
    )
    request_timeout: float = Field(
        default=30.0,
        description="Remote call timeout in seconds",
    )
