"""Persistence: SQLAlchemy models, repositories, and session management."""
