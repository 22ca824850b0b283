# src/townsquare/services/__init__.py
"""Supporting services for the Townsquare application."""

from .session_store import DatabaseSessionStore

__all__ = ["DatabaseSessionStore"]
