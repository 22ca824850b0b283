# src/townsquare/schemas/community.py
"""Community-related Pydantic schemas."""

from .common import CamelModel, InsertModel, UTCDateTime


class CommunityCreate(InsertModel):
    """Schema for creating a new community."""

    name: str
    description: str
    thumbnail: str
    is_local: bool = False


class CommunityResponse(CamelModel):
    """Schema for community information returned by the API."""

    id: int
    name: str
    description: str
    thumbnail: str
    is_local: bool
    created_at: UTCDateTime
    creator_id: int


class MembershipResponse(CamelModel):
    """Whether the caller belongs to a community."""

    is_member: bool
