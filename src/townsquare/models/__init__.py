# src/townsquare/models/__init__.py
"""SQLAlchemy models for the Townsquare application."""

from .community import Community, CommunityMember
from .post import Post
from .session import SessionRecord
from .user import User

__all__ = [
    "Community", "CommunityMember",
    "Post",
    "SessionRecord",
    "User",
]
