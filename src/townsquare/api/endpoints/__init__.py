# src/townsquare/api/endpoints/__init__.py
"""API endpoint modules."""

from .auth import router as auth_router
from .communities import router as communities_router
from .posts import router as posts_router

__all__ = [
    "auth_router",
    "communities_router",
    "posts_router",
]
