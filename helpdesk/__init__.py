"""
Support-desk knowledge engine.

Retrieval-augmented knowledge base for a customer-support chat backend:
chunking, embedding, pgvector storage, similarity search, and the
agent-facing retrieval tool.
"""
