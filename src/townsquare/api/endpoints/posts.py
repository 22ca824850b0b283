"""Post endpoints, nested under the community they belong to."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status

from townsquare.api.dependencies import CurrentUserDep, JsonBodyDep, StorageDep
from townsquare.core.errors import InvalidInputError
from townsquare.models import Post
from townsquare.schemas.common import (
    Invalid,
    MessageResponse,
    ValidationErrorResponse,
    validate_payload,
)
from townsquare.schemas.post import PostCreate, PostResponse

from .communities import require_community

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/communities", tags=["posts"])


@router.get("/{community_id}/posts", response_model=list[PostResponse])
async def list_community_posts(community_id: int, storage: StorageDep) -> list[Post]:
    """Get every post of a community.

    Reading needs neither a session nor membership; an unknown community
    simply has no posts.
    """
    return storage.list_posts(community_id)


@router.post(
    "/{community_id}/posts",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse},
        status.HTTP_401_UNAUTHORIZED: {"model": MessageResponse},
        status.HTTP_404_NOT_FOUND: {"model": MessageResponse},
    },
)
async def create_post(
    current_user: CurrentUserDep,
    community_id: int,
    payload: JsonBodyDep,
    storage: StorageDep,
) -> Post:
    """Create a post in a community as the caller.

    The community lookup always precedes the insert; storage does not check it.
    """
    result = validate_payload(PostCreate, payload)
    if isinstance(result, Invalid):
        raise InvalidInputError(result.errors, message="Invalid post data")

    require_community(storage, community_id)
    post = storage.create_post(result.value, community_id=community_id, author_id=current_user.id)
    logger.info("User %d posted %d in community %d", current_user.id, post.id, community_id)
    return post
