# src/townsquare/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import Invalid, MessageResponse, Valid, validate_payload
from .community import CommunityCreate, CommunityResponse, MembershipResponse
from .post import PostCreate, PostResponse
from .user import AuthSessionResponse, LoginRequest, UserCreate, UserResponse

__all__ = [
    "Invalid", "MessageResponse", "Valid", "validate_payload",
    "CommunityCreate", "CommunityResponse", "MembershipResponse",
    "PostCreate", "PostResponse",
    "AuthSessionResponse", "LoginRequest", "UserCreate", "UserResponse",
]
