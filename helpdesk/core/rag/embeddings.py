"""
Embedding client for the knowledge base.

Generates embeddings through an OpenAI-compatible endpoint (OpenRouter by
default) using LangChain's OpenAIEmbeddings, in fixed-size remote batches
with bounded retry. Also provides local cosine similarity.

Dependencies: langchain_openai, tenacity, numpy, helpdesk.configs
System role: Embedding generation adapter
"""

import logging
from typing import Sequence

import numpy as np
from langchain_core.embeddings import Embeddings
from langchain_openai import OpenAIEmbeddings
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)
from tenacity.wait import wait_base

from helpdesk.configs.embedding import EmbeddingSettings
from helpdesk.core.exceptions import DimensionMismatchError, EmbeddingError

logger = logging.getLogger(__name__)


class _TransientEmbeddingFailure(Exception):
    """Wraps a remote failure so tenacity retries it."""


class EmbeddingClient:
    """
    Remote embedding generator.

    Inputs are truncated to max_input_chars before being sent. Batch calls
    are issued sequentially, one remote request per batch, so the result
    order always matches the input order. Cancelling the awaiting task
    stops the loop before the next batch is requested.
    """

    def __init__(
        self,
        settings: EmbeddingSettings,
        embeddings: Embeddings | None = None,
        retry_wait: wait_base | None = None,
    ) -> None:
        """
        Initialize embedding client.

        Args:
            settings: Embedding endpoint and batching configuration
            embeddings: Optional LangChain embeddings backend (created lazily if None)
            retry_wait: Optional tenacity wait strategy between attempts
        """
        self.settings = settings
        self._embeddings = embeddings
        self._retry_wait = retry_wait or wait_exponential_jitter(initial=1, max=10, jitter=1)

    @property
    def dimension(self) -> int:
        """Configured embedding dimension."""
        return self.settings.dimension

    @property
    def embeddings(self) -> Embeddings:
        """Lazy-load the remote backend; fails when credentials are missing."""
        if self._embeddings is None:
            if not self.settings.api_key:
                raise EmbeddingError(
                    "Embedding client not configured: missing API key "
                    "(set EMBEDDING_API_KEY or OPENROUTER_API_KEY)",
                    {"model": self.settings.model},
                )
            self._embeddings = OpenAIEmbeddings(
                model=self.settings.model,
                api_key=self.settings.api_key,
                base_url=self.settings.base_url,
                chunk_size=self.settings.batch_size,
                check_embedding_ctx_length=False,
                max_retries=0,
                request_timeout=self.settings.request_timeout,
            )
        return self._embeddings

    async def generate_embedding(self, text: str) -> list[float]:
        """
        Generate embedding for a single text.

        Args:
            text: Text to embed (truncated to max_input_chars)

        Returns:
            list[float]: Embedding vector

        Raises:
            EmbeddingError: When the client is misconfigured or the remote call fails
        """
        backend = self.embeddings
        truncated = self._truncate(text)

        vector = await self._call_with_retry(
            lambda: backend.aembed_query(truncated),
            operation="embed_query",
        )
        self._check_dimension(vector)
        return list(vector)

    async def generate_embeddings_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Generate embeddings for many texts in remote batches.

        A failing batch aborts the whole call; earlier batches are discarded
        and nothing is returned for the trailing texts.

        Args:
            texts: Texts to embed

        Returns:
            list[list[float]]: One vector per input, in input order

        Raises:
            EmbeddingError: When any batch fails
        """
        if not texts:
            return []

        backend = self.embeddings
        batch_size = self.settings.batch_size
        vectors: list[list[float]] = []

        for start in range(0, len(texts), batch_size):
            batch = [self._truncate(t) for t in texts[start:start + batch_size]]
            batch_number = start // batch_size + 1

            try:
                batch_vectors = await self._call_with_retry(
                    lambda batch=batch: backend.aembed_documents(batch),
                    operation="embed_documents",
                )
            except EmbeddingError as e:
                logger.error(
                    f"{__name__}:generate_embeddings_batch - Batch {batch_number} failed",
                    extra={"batch_number": batch_number, "batch_len": len(batch)},
                )
                raise EmbeddingError(
                    f"Embedding batch {batch_number} failed: {e.message}",
                    {**e.details, "batch_number": batch_number, "embedded_so_far": len(vectors)},
                ) from e

            if len(batch_vectors) != len(batch):
                raise EmbeddingError(
                    f"Embedding batch {batch_number} returned {len(batch_vectors)} vectors "
                    f"for {len(batch)} inputs",
                    {"batch_number": batch_number},
                )
            for vector in batch_vectors:
                self._check_dimension(vector)
                vectors.append(list(vector))

        logger.debug(
            f"{__name__}:generate_embeddings_batch - Embedded {len(vectors)} texts",
            extra={"text_count": len(texts), "batch_size": batch_size},
        )
        return vectors

    @staticmethod
    def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
        """
        Cosine similarity of two vectors.

        Returns 0.0 when either vector has zero norm. The result is clamped
        to [-1, 1].

        Raises:
            DimensionMismatchError: When the vectors differ in length
        """
        if len(a) != len(b):
            raise DimensionMismatchError(len(a), len(b))

        left = np.asarray(a, dtype=np.float64)
        right = np.asarray(b, dtype=np.float64)
        norm = np.linalg.norm(left) * np.linalg.norm(right)
        if norm == 0.0:
            return 0.0

        return float(np.clip(np.dot(left, right) / norm, -1.0, 1.0))

    async def _call_with_retry(self, call, operation: str):
        """Run a remote call with bounded retry, converting failures to EmbeddingError."""
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(_TransientEmbeddingFailure),
            stop=stop_after_attempt(self.settings.max_retries),
            wait=self._retry_wait,
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:{operation} - Retry {retry_state.attempt_number}/"
                f"{self.settings.max_retries} after remote failure"
            ),
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    try:
                        return await call()
                    except Exception as e:
                        raise _TransientEmbeddingFailure(str(e)) from e
        except _TransientEmbeddingFailure as e:
            cause = e.__cause__ or e
            logger.error(
                f"{__name__}:{operation} - Embedding generation failed: {type(cause).__name__}: {cause}"
            )
            raise EmbeddingError(
                f"Failed to generate embedding: {cause}",
                {"model": self.settings.model, "error_type": type(cause).__name__},
            ) from cause

    def _truncate(self, text: str) -> str:
        text = text if isinstance(text, str) else str(text or "")
        return text[: self.settings.max_input_chars]

    def _check_dimension(self, vector: Sequence[float]) -> None:
        if len(vector) != self.settings.dimension:
            raise EmbeddingError(
                f"Embedding has dimension {len(vector)}, expected {self.settings.dimension}",
                {"model": self.settings.model},
            )
