"""
Core business logic module.

Contains the exception hierarchy and the knowledge base components.
"""
