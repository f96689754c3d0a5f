"""
HTTP API layer.

FastAPI application exposing knowledge base ingestion, search, and health
endpoints under /api/v1.
"""
