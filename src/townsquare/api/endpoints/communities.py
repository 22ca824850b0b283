# src/townsquare/api/endpoints/communities.py
"""Community-related endpoints for the Townsquare API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status

from townsquare.api.dependencies import CurrentUserDep, JsonBodyDep, StorageDep
from townsquare.core.errors import InvalidInputError, NotFoundError
from townsquare.models import Community
from townsquare.repositories.storage import Storage
from townsquare.schemas.common import (
    Invalid,
    MessageResponse,
    ValidationErrorResponse,
    validate_payload,
)
from townsquare.schemas.community import CommunityCreate, CommunityResponse, MembershipResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/communities", tags=["communities"])

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": MessageResponse}}
_UNAUTHORIZED = {status.HTTP_401_UNAUTHORIZED: {"model": MessageResponse}}


def require_community(storage: Storage, community_id: int) -> Community:
    """Return the community or raise 404."""
    community = storage.get_community(community_id)
    if community is None:
        raise NotFoundError("Community", community_id)
    return community


@router.get("", response_model=list[CommunityResponse])
async def list_communities(storage: StorageDep, q: str | None = None) -> list[Community]:
    """List communities, optionally filtered by a case-insensitive search term."""
    return storage.list_communities(q)


@router.get("/{community_id}", response_model=CommunityResponse, responses=_NOT_FOUND)
async def get_community(community_id: int, storage: StorageDep) -> Community:
    """Get a specific community by ID."""
    return require_community(storage, community_id)


@router.post(
    "",
    response_model=CommunityResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse},
        **_UNAUTHORIZED,
    },
)
async def create_community(
    current_user: CurrentUserDep,
    payload: JsonBodyDep,
    storage: StorageDep,
) -> Community:
    """Create a new community owned by the caller.

    The creator is not enrolled as a member.
    """
    result = validate_payload(CommunityCreate, payload)
    if isinstance(result, Invalid):
        raise InvalidInputError(result.errors, message="Invalid community data")

    community = storage.create_community(result.value, creator_id=current_user.id)
    logger.info("User %d created community %d", current_user.id, community.id)
    return community


@router.post(
    "/{community_id}/join",
    status_code=status.HTTP_200_OK,
    response_class=Response,
    responses={**_NOT_FOUND, **_UNAUTHORIZED},
)
async def join_community(
    current_user: CurrentUserDep,
    community_id: int,
    storage: StorageDep,
) -> Response:
    """Join a community. Joining again is accepted and recorded again."""
    require_community(storage, community_id)
    storage.join_community(current_user.id, community_id)
    logger.info("User %d joined community %d", current_user.id, community_id)
    return Response(status_code=status.HTTP_200_OK)


@router.post(
    "/{community_id}/leave",
    status_code=status.HTTP_200_OK,
    response_class=Response,
    responses={**_NOT_FOUND, **_UNAUTHORIZED},
)
async def leave_community(
    current_user: CurrentUserDep,
    community_id: int,
    storage: StorageDep,
) -> Response:
    """Leave a community; succeeds even if the caller never joined."""
    require_community(storage, community_id)
    storage.leave_community(current_user.id, community_id)
    logger.info("User %d left community %d", current_user.id, community_id)
    return Response(status_code=status.HTTP_200_OK)


@router.get(
    "/{community_id}/membership",
    response_model=MembershipResponse,
    responses={**_NOT_FOUND, **_UNAUTHORIZED},
)
async def get_membership(
    current_user: CurrentUserDep,
    community_id: int,
    storage: StorageDep,
) -> MembershipResponse:
    """Report whether the caller belongs to a community."""
    require_community(storage, community_id)
    return MembershipResponse(is_member=storage.is_member(current_user.id, community_id))
