"""
Knowledge base API endpoints.

Routes:
- POST /rag/documents/upload - Upload a file, extract text, and index it
- POST /rag/documents/batch - Index many text documents
- POST /rag/search - Similarity search over indexed chunks
- POST /rag/retrieve - Agent-formatted retrieval (never fails the request)
- GET /rag/documents - List documents, newest first
- GET /rag/documents/{id} - Get one document (optionally with chunks)
- DELETE /rag/documents/{id} - Delete a document and its chunks
- GET /rag/stats - Document, chunk, and query counts

Failures are returned by the registered exception handlers as
{ok: false, error, details?}.

Dependencies: fastapi, helpdesk.application.services, helpdesk.core.rag, helpdesk.models
System role: Knowledge base HTTP API
"""

import logging

from fastapi import APIRouter, Depends, File, Form, Header, UploadFile
from fastapi.concurrency import run_in_threadpool

from helpdesk.api.deps import get_document_processor, get_rag_storage, get_retrieval_tool
from helpdesk.application.services.rag_storage import RAGStorage
from helpdesk.core.exceptions import DocumentNotFoundError, StoreError, ValidationError
from helpdesk.core.rag.file_processor import DocumentProcessor
from helpdesk.core.rag.retrieval_tool import RetrievalTool
from helpdesk.models.document import (
    BatchUploadRequest,
    BatchUploadResponse,
    DeleteResponse,
    DocumentListResponse,
    DocumentResponse,
    DocumentSummary,
    SearchHit,
    SearchRequest,
    SearchResponse,
    StatsResponse,
    UploadResponse,
)
from helpdesk.models.retrieval import RetrievalContext, RetrievalResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rag", tags=["rag"])

PREVIEW_LENGTH = 200
EMPTY_TEXT_ERROR = (
    "No text could be extracted from the file. If this is a PDF, ensure it "
    "contains selectable text, not just images."
)


@router.post("/documents/upload", response_model=UploadResponse)
async def upload_document(
    file: UploadFile = File(...),
    title: str | None = Form(None),
    source: str | None = Form(None),
    user_id: str | None = Form(None),
    processor: DocumentProcessor = Depends(get_document_processor),
    storage: RAGStorage = Depends(get_rag_storage),
) -> UploadResponse:
    """
    Upload a file and index its text.

    Args:
        file: Uploaded file (type must be supported, size within limit)
        title: Document title (defaults to the file name)
        source: Provenance tag (defaults to "upload")
        user_id: Uploader, stored as uploadedBy in the document metadata

    Returns:
        UploadResponse: New document ID and extraction metadata

    Raises:
        ValidationError(400): Unsupported type, too large, or no extractable text
        ParsingError(500): Extraction failed
    """
    if not file.filename:
        raise ValidationError("No valid file provided", field="file")

    data = await file.read()
    extracted = await run_in_threadpool(
        processor.process_file,
        file.filename,
        file.content_type,
        data,
    )

    if not extracted.text.strip():
        raise ValidationError(EMPTY_TEXT_ERROR, field="file")

    document_title = title or file.filename
    logger.info(
        "Indexing uploaded document",
        extra={"file_name": file.filename, "title": document_title, "user_id": user_id},
    )

    document_id = await storage.add_document(
        document_title,
        extracted.text,
        {**extracted.metadata, "uploadedBy": user_id},
        source or "upload",
    )

    return UploadResponse(
        message="Document uploaded and indexed successfully",
        document_id=document_id,
        metadata=extracted.metadata,
    )


@router.post("/documents/batch", response_model=BatchUploadResponse)
async def batch_upload(
    request: BatchUploadRequest,
    storage: RAGStorage = Depends(get_rag_storage),
) -> BatchUploadResponse:
    """
    Index many text documents; each item succeeds or fails on its own.

    Raises:
        ValidationError(400): Empty documents array
    """
    results = await storage.batch_upload(request.documents)
    success_count = sum(1 for r in results if r.success)

    return BatchUploadResponse(
        message=f"Batch upload completed: {success_count}/{len(results)} successful",
        results=results,
    )


@router.post("/search", response_model=SearchResponse)
async def search_documents(
    request: SearchRequest,
    x_user_id: str | None = Header(None, alias="X-User-Id"),
    x_conversation_id: str | None = Header(None, alias="X-Conversation-Id"),
    storage: RAGStorage = Depends(get_rag_storage),
) -> SearchResponse:
    """
    Similarity search over indexed chunks.

    Raises:
        ValidationError(400): Blank query
    """
    results = await storage.search(
        request.query,
        request.top_k,
        user_id=x_user_id,
        conversation_id=x_conversation_id,
    )

    return SearchResponse(
        query=request.query,
        results_count=len(results),
        results=[
            SearchHit(
                document_id=r.document.id,
                document_title=r.document.title,
                chunk_text=r.chunk.chunk_text,
                similarity=r.similarity,
                source=r.document.source,
            )
            for r in results
        ],
    )


@router.post("/retrieve", response_model=RetrievalResponse, response_model_exclude_none=True)
async def retrieve(
    request: SearchRequest,
    x_user_id: str | None = Header(None, alias="X-User-Id"),
    x_conversation_id: str | None = Header(None, alias="X-Conversation-Id"),
    retrieval_tool: RetrievalTool = Depends(get_retrieval_tool),
) -> RetrievalResponse:
    """
    Agent-formatted retrieval.

    Always answers 200; failures are reported inside the response body.
    """
    return await retrieval_tool.retrieve(
        request.query,
        request.top_k,
        RetrievalContext(user_id=x_user_id, conversation_id=x_conversation_id),
    )


@router.get("/documents", response_model=DocumentListResponse)
async def list_documents(
    storage: RAGStorage = Depends(get_rag_storage),
) -> DocumentListResponse:
    """List all documents, newest first, with a short content preview."""
    documents = await storage.get_all_documents()

    return DocumentListResponse(
        count=len(documents),
        documents=[
            DocumentSummary(
                id=d.id,
                title=d.title,
                source=d.source,
                status=d.status,
                metadata=d.metadata,
                created_at=d.created_at,
                preview=_preview(d.content),
            )
            for d in documents
        ],
    )


@router.get("/documents/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    include_chunks: bool = False,
    storage: RAGStorage = Depends(get_rag_storage),
) -> DocumentResponse:
    """
    Get one document.

    Args:
        document_id: Document UUID
        include_chunks: Also return the document's chunks in index order
            (text and metadata only, embeddings are not sent)

    Raises:
        ValidationError(400): Malformed document ID
        DocumentNotFoundError(404): No such document
    """
    document = await storage.get_document(document_id)
    if document is None:
        raise DocumentNotFoundError(document_id)

    chunks = (
        await storage.get_document_chunks(document.id, include_embeddings=False)
        if include_chunks
        else None
    )
    return DocumentResponse(document=document, chunks=chunks)


@router.delete("/documents/{document_id}", response_model=DeleteResponse)
async def delete_document(
    document_id: str,
    storage: RAGStorage = Depends(get_rag_storage),
) -> DeleteResponse:
    """
    Delete a document and all of its chunks.

    Raises:
        ValidationError(400): Malformed document ID
        DocumentNotFoundError(404): No such document
        StoreError(500): Delete failed
    """
    document = await storage.get_document(document_id)
    if document is None:
        raise DocumentNotFoundError(document_id)

    if not await storage.delete_document(document.id):
        raise StoreError("Failed to delete document", operation="delete")

    return DeleteResponse(message="Document deleted successfully", document_id=document.id)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    storage: RAGStorage = Depends(get_rag_storage),
) -> StatsResponse:
    """Document, chunk, and query counts."""
    return StatsResponse(stats=await storage.get_stats())


def _preview(content: str) -> str:
    if len(content) <= PREVIEW_LENGTH:
        return content
    return content[:PREVIEW_LENGTH] + "..."
