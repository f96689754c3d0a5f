"""
Application layer.

Use case orchestration over the core components and the database boundary.
"""
