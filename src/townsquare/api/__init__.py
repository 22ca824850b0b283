"""HTTP API for the Townsquare service."""

from .endpoints import auth_router, communities_router, posts_router

__all__ = [
    "auth_router",
    "communities_router",
    "posts_router",
]
