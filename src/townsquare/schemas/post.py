"""Post-related Pydantic schemas."""

from pydantic import Field

from .common import CamelModel, InsertModel, UTCDateTime


class PostCreate(InsertModel):
    """Schema for creating a new post.

    ``community_id`` is accepted for compatibility with older clients but the
    community in the request path always takes precedence.
    """

    title: str = Field(..., description="Post title")
    content: str = Field(..., description="Post body")
    community_id: int | None = Field(None, description="Ignored in favour of the path id")


class PostResponse(CamelModel):
    """Schema for post information returned by the API."""

    id: int
    title: str
    content: str
    community_id: int
    author_id: int
    created_at: UTCDateTime
