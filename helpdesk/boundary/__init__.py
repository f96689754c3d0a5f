"""
Boundary layer for external system integrations.

Handles all interactions with external systems (PostgreSQL with pgvector).
"""
