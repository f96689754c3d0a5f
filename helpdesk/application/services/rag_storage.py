"""
Knowledge base document store.

Coordinates chunking, embedding, and persistence of documents, and serves
cosine-similarity search over the stored chunks.

Ingestion is atomic: all embeddings are generated before any row is
written, then the document and every chunk are inserted in one
transaction. A failure at any stage leaves nothing behind.

Dependencies: sqlalchemy, helpdesk.boundary.db, helpdesk.core.rag
System role: Knowledge base use case orchestration
"""

import logging
import uuid
from typing import Any, Sequence

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from helpdesk.boundary.db.CRUD.chunk_crud import chunk_crud
from helpdesk.boundary.db.CRUD.document_crud import document_crud
from helpdesk.boundary.db.CRUD.query_log_crud import query_log_crud
from helpdesk.boundary.db.models.chunk_model import ChunkModel
from helpdesk.boundary.db.models.document_model import (
    TITLE_MAX_LENGTH,
    DocumentModel,
    DocumentStatus,
)
from helpdesk.configs.rag import RAGSettings
from helpdesk.core.exceptions import StoreError, ValidationError
from helpdesk.core.rag.chunker import TextChunker
from helpdesk.core.rag.embeddings import EmbeddingClient
from helpdesk.models.chunk import Chunk
from helpdesk.models.document import (
    BatchDocumentItem,
    BatchItemResult,
    Document,
    DocumentStats,
    SearchResult,
)
from helpdesk.observability.log_utils import safe_log_value

logger = logging.getLogger(__name__)


class RAGStorage:
    """Document store over PostgreSQL + pgvector."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        embedding_client: EmbeddingClient,
        settings: RAGSettings,
        chunker: TextChunker | None = None,
    ) -> None:
        """
        Initialize document store.

        Args:
            session_factory: Factory for per-operation async sessions
            embedding_client: Embedding generator for chunks and queries
            settings: Chunking and retrieval configuration
            chunker: Optional chunker (built from settings if None)
        """
        self.session_factory = session_factory
        self.embedding_client = embedding_client
        self.settings = settings
        self.chunker = chunker or TextChunker.from_settings(settings)

    async def add_document(
        self,
        title: str | None,
        content: str | None,
        metadata: dict[str, Any] | None = None,
        source: str | None = None,
    ) -> uuid.UUID:
        """
        Chunk, embed, and persist a document.

        Args:
            title: Document title (required, non-blank)
            content: Full document text (required, non-blank)
            metadata: Metadata stored on the document and copied onto each chunk
            source: Provenance tag

        Returns:
            UUID: Created document ID

        Raises:
            ValidationError: If title or content is missing or blank, or the title is too long
            EmbeddingError: If embedding generation fails (nothing persisted)
            StoreError: If the insert transaction fails (nothing persisted)
        """
        if title is None or not str(title).strip():
            raise ValidationError("Document title is required", field="title")
        if len(str(title)) > TITLE_MAX_LENGTH:
            raise ValidationError(
                f"Document title must be at most {TITLE_MAX_LENGTH} characters",
                field="title",
                details={"title_length": len(str(title))},
            )
        if content is None or not str(content).strip():
            raise ValidationError("Document content is required", field="content")

        metadata = dict(metadata or {})
        text_chunks = self.chunker.chunk_text(content, metadata)
        if not text_chunks:
            raise ValidationError(
                "Document content produced no chunks",
                field="content",
                details={"content_length": len(str(content))},
            )

        embeddings = await self.embedding_client.generate_embeddings_batch(
            [chunk.text for chunk in text_chunks]
        )

        try:
            async with self.session_factory() as session, session.begin():
                document = await document_crud.create(
                    session,
                    title=title,
                    content=content,
                    doc_metadata=metadata,
                    source=source,
                    status=DocumentStatus.INDEXED,
                    chunk_count=len(text_chunks),
                )
                await chunk_crud.create_many(
                    session,
                    [
                        {
                            "document_id": document.id,
                            "chunk_text": chunk.text,
                            "chunk_index": chunk.index,
                            "embedding": embedding,
                            "chunk_metadata": chunk.metadata,
                        }
                        for chunk, embedding in zip(text_chunks, embeddings)
                    ],
                )
        except SQLAlchemyError as e:
            logger.error(
                f"{__name__}:add_document - Insert transaction failed",
                extra={
                    "title": safe_log_value(title, 100),
                    "chunk_count": len(text_chunks),
                    "error": str(e),
                },
            )
            raise StoreError(
                f"Failed to store document: {e}",
                operation="insert",
                details={"title": title},
            ) from e

        logger.info(
            f"{__name__}:add_document - Document indexed",
            extra={
                "document_id": str(document.id),
                "title": safe_log_value(title, 100),
                "chunk_count": len(text_chunks),
            },
        )
        return document.id

    async def search(
        self,
        query_text: str,
        top_k: int | None = None,
        user_id: str | None = None,
        conversation_id: str | None = None,
    ) -> list[SearchResult]:
        """
        Find the chunks most similar to a query.

        Only chunks whose similarity is strictly above the configured
        threshold are returned, most similar first. Every search is appended
        to the query log; a logging failure never fails the search.

        Args:
            query_text: Natural-language query
            top_k: Maximum number of results (defaults to settings.top_k)
            user_id: Caller's user id for the query log
            conversation_id: Caller's conversation id for the query log

        Returns:
            list[SearchResult]: Results ordered by descending similarity

        Raises:
            ValidationError: If the query is blank or top_k < 1
            EmbeddingError: If the query embedding fails
            StoreError: If the vector query fails
        """
        if query_text is None or not str(query_text).strip():
            raise ValidationError("Query text is required", field="query")

        top_k = self.settings.top_k if top_k is None else top_k
        if top_k < 1:
            raise ValidationError("top_k must be at least 1", field="top_k")

        threshold = self.settings.similarity_threshold
        query_embedding = await self.embedding_client.generate_embedding(query_text)

        try:
            async with self.session_factory() as session:
                rows = await chunk_crud.search_similar(
                    session,
                    query_embedding,
                    threshold=threshold,
                    limit=top_k,
                )
        except SQLAlchemyError as e:
            logger.error(
                f"{__name__}:search - Vector query failed",
                extra={"top_k": top_k, "error": str(e)},
            )
            raise StoreError(f"Search failed: {e}", operation="search") from e

        results: list[SearchResult] = []
        for chunk, document, similarity in rows:
            similarity = max(-1.0, min(1.0, similarity))
            if similarity <= threshold:
                continue
            results.append(
                SearchResult(
                    chunk=self._to_chunk(chunk),
                    document=self._to_document(document),
                    similarity=similarity,
                )
            )
        results.sort(key=lambda r: r.similarity, reverse=True)

        await self._log_query(query_text, results, user_id, conversation_id)

        logger.info(
            f"{__name__}:search - Search completed",
            extra={
                "query": safe_log_value(query_text, 100),
                "results_count": len(results),
                "top_k": top_k,
                "threshold": threshold,
            },
        )
        return results

    async def get_document(self, document_id: uuid.UUID | str) -> Document | None:
        """
        Get a document by ID.

        Args:
            document_id: Document UUID (or its string form)

        Returns:
            Document if found, None otherwise

        Raises:
            ValidationError: If document_id is not a valid UUID
            StoreError: If the lookup fails
        """
        doc_uuid = self._parse_id(document_id)
        try:
            async with self.session_factory() as session:
                document = await document_crud.get_by_id(session, doc_uuid)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to get document: {e}", operation="get") from e

        return self._to_document(document) if document else None

    async def get_all_documents(self) -> list[Document]:
        """
        List all documents, newest first.

        Raises:
            StoreError: If the query fails
        """
        try:
            async with self.session_factory() as session:
                documents = await document_crud.get_recent(session)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to list documents: {e}", operation="list") from e

        return [self._to_document(d) for d in documents]

    async def get_document_chunks(
        self,
        document_id: uuid.UUID | str,
        include_embeddings: bool = True,
    ) -> list[Chunk]:
        """
        Get the chunks of a document in chunk_index order.

        Args:
            document_id: Document UUID (or its string form)
            include_embeddings: Attach each chunk's embedding vector

        Raises:
            ValidationError: If document_id is not a valid UUID
            StoreError: If the query fails
        """
        doc_uuid = self._parse_id(document_id)
        try:
            async with self.session_factory() as session:
                chunks = await chunk_crud.get_by_document_id(session, doc_uuid)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to get chunks: {e}", operation="get_chunks") from e

        return [self._to_chunk(c, include_embedding=include_embeddings) for c in chunks]

    async def delete_document(self, document_id: uuid.UUID | str) -> bool:
        """
        Delete a document and all of its chunks in one transaction.

        Args:
            document_id: Document UUID (or its string form)

        Returns:
            bool: True if deleted; False if not found, invalid, or the delete failed
        """
        try:
            doc_uuid = self._parse_id(document_id)
        except ValidationError:
            return False

        try:
            async with self.session_factory() as session, session.begin():
                chunks_deleted = await chunk_crud.delete_by_document_id(session, doc_uuid)
                deleted = await document_crud.delete_by_id(session, doc_uuid)
        except SQLAlchemyError as e:
            logger.error(
                f"{__name__}:delete_document - Delete failed",
                extra={"document_id": str(doc_uuid), "error": str(e)},
            )
            return False

        if deleted:
            logger.info(
                f"{__name__}:delete_document - Document deleted",
                extra={"document_id": str(doc_uuid), "chunks_deleted": chunks_deleted},
            )
        return deleted

    async def get_stats(self) -> DocumentStats:
        """
        Count documents, chunks, and logged queries.

        Raises:
            StoreError: If a count query fails
        """
        try:
            async with self.session_factory() as session:
                document_count = await document_crud.count(session)
                chunk_count = await chunk_crud.count(session)
                query_count = await query_log_crud.count(session)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to get stats: {e}", operation="stats") from e

        return DocumentStats(
            document_count=document_count,
            chunk_count=chunk_count,
            query_count=query_count,
        )

    async def batch_upload(
        self,
        documents: Sequence[BatchDocumentItem | dict[str, Any]],
        default_source: str = "batch-upload",
    ) -> list[BatchItemResult]:
        """
        Add many documents, one at a time; each item succeeds or fails alone.

        Args:
            documents: Items with title, content, metadata, source. Raw items are
                validated one by one; a malformed item is reported as failed.
            default_source: Source used when an item has none

        Returns:
            list[BatchItemResult]: One outcome per item, in input order

        Raises:
            ValidationError: If documents is empty
        """
        if not documents:
            raise ValidationError("Documents array is required", field="documents")

        results: list[BatchItemResult] = []
        for raw in documents:
            title = _item_title(raw)
            try:
                item = raw if isinstance(raw, BatchDocumentItem) else BatchDocumentItem.model_validate(raw)
                document_id = await self.add_document(
                    item.title,
                    item.content,
                    item.metadata,
                    item.source or default_source,
                )
                results.append(BatchItemResult(title=title, success=True, document_id=document_id))
            except PydanticValidationError as e:
                message = _describe_invalid_item(e)
                logger.warning(
                    f"{__name__}:batch_upload - Item rejected",
                    extra={"title": safe_log_value(title, 100), "error": message},
                )
                results.append(BatchItemResult(title=title, success=False, error=message))
            except Exception as e:
                logger.warning(
                    f"{__name__}:batch_upload - Item failed",
                    extra={"title": safe_log_value(title, 100), "error": str(e)},
                )
                message = e.message if hasattr(e, "message") else str(e)
                results.append(BatchItemResult(title=title, success=False, error=message))

        logger.info(
            f"{__name__}:batch_upload - Batch completed",
            extra={
                "total": len(results),
                "succeeded": sum(1 for r in results if r.success),
            },
        )
        return results

    async def _log_query(
        self,
        query_text: str,
        results: list[SearchResult],
        user_id: str | None,
        conversation_id: str | None,
    ) -> None:
        """Append a query log row in its own transaction; failures are logged only."""
        try:
            async with self.session_factory() as session, session.begin():
                await query_log_crud.create(
                    session,
                    query_text=query_text,
                    results_count=len(results),
                    chunks_retrieved=[
                        {"id": str(r.chunk.id), "similarity": r.similarity} for r in results
                    ],
                    user_id=user_id,
                    conversation_id=conversation_id,
                )
        except Exception as e:
            logger.warning(
                f"{__name__}:_log_query - Failed to log query",
                extra={"error": str(e), "conversation_id": conversation_id},
            )

    @staticmethod
    def _parse_id(document_id: uuid.UUID | str) -> uuid.UUID:
        if isinstance(document_id, uuid.UUID):
            return document_id
        try:
            return uuid.UUID(str(document_id))
        except ValueError as e:
            raise ValidationError(
                f"Invalid document id: {document_id}",
                field="document_id",
            ) from e

    @staticmethod
    def _to_document(model: DocumentModel) -> Document:
        status = model.status
        return Document(
            id=model.id,
            title=model.title,
            content=model.content,
            metadata=model.doc_metadata or {},
            source=model.source,
            status=status.value if isinstance(status, DocumentStatus) else str(status),
            chunk_count=model.chunk_count,
            created_at=model.created_at,
        )

    @staticmethod
    def _to_chunk(model: ChunkModel, include_embedding: bool = False) -> Chunk:
        embedding = None
        if include_embedding and model.embedding is not None:
            embedding = [float(v) for v in model.embedding]
        return Chunk(
            id=model.id,
            document_id=model.document_id,
            chunk_text=model.chunk_text,
            chunk_index=model.chunk_index,
            metadata=model.chunk_metadata or {},
            embedding=embedding,
        )


def _item_title(raw: Any) -> str | None:
    """Best-effort title of a batch item, for its result row."""
    if isinstance(raw, BatchDocumentItem):
        return raw.title
    title = raw.get("title") if isinstance(raw, dict) else None
    return title if isinstance(title, str) else None


def _describe_invalid_item(error: PydanticValidationError) -> str:
    """Flatten pydantic errors into one line, e.g. 'content: Input should be a valid string'."""
    parts = []
    for entry in error.errors():
        location = ".".join(str(part) for part in entry.get("loc", ()))
        parts.append(f"{location}: {entry['msg']}" if location else entry["msg"])
    return "Invalid document: " + "; ".join(parts)
