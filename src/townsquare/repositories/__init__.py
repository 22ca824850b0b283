"""Data access layer."""

from .storage import DatabaseStorage, Storage

__all__ = ["DatabaseStorage", "Storage"]
