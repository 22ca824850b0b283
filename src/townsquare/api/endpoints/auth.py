# src/townsquare/api/endpoints/auth.py
"""Authentication endpoints: register, login, logout and current user."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from townsquare.api.dependencies import (
    CurrentUserDep,
    JsonBodyDep,
    SessionStoreDep,
    StorageDep,
    get_request_token,
)
from townsquare.core.errors import (
    InvalidInputError,
    UnauthorizedError,
    UniqueConstraintViolationError,
)
from townsquare.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from townsquare.core.settings import settings
from townsquare.models import User
from townsquare.schemas.common import Invalid, validate_payload
from townsquare.schemas.user import AuthSessionResponse, LoginRequest, UserCreate, UserResponse
from townsquare.services.session_store import DatabaseSessionStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["authentication"])


def _start_session(
    user: User,
    session_store: DatabaseSessionStore,
    response: Response,
) -> AuthSessionResponse:
    """Persist a session for ``user`` and hand its token to the client."""
    session_id = session_store.create({"user_id": user.id})
    token = create_access_token(user.id, session_id)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return AuthSessionResponse(
        access_token=token,
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/register",
    summary="Register a new user and log them in",
    response_model=AuthSessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: JsonBodyDep,
    storage: StorageDep,
    session_store: SessionStoreDep,
    response: Response,
) -> AuthSessionResponse:
    """Create an account; duplicate usernames are rejected with 409."""
    result = validate_payload(UserCreate, payload)
    if isinstance(result, Invalid):
        raise InvalidInputError(result.errors, message="Invalid user data")
    data = result.value

    if storage.get_user_by_username(data.username) is not None:
        raise UniqueConstraintViolationError("Username already exists", field="username")

    user = storage.create_user(data, hash_password(data.password))
    logger.info("Registered user %d", user.id)
    return _start_session(user, session_store, response)


@router.post(
    "/login",
    summary="Authenticate with username and password",
    response_model=AuthSessionResponse,
    status_code=status.HTTP_200_OK,
)
async def login(
    payload: JsonBodyDep,
    storage: StorageDep,
    session_store: SessionStoreDep,
    response: Response,
) -> AuthSessionResponse:
    """Exchange credentials for a session token."""
    result = validate_payload(LoginRequest, payload)
    if isinstance(result, Invalid):
        raise InvalidInputError(result.errors, message="Invalid login data")
    credentials = result.value

    user = storage.get_user_by_username(credentials.username)
    if user is None or not verify_password(user.password, credentials.password):
        logger.warning("Failed login attempt")
        raise UnauthorizedError("Invalid username or password")

    logger.info("User %d logged in", user.id)
    return _start_session(user, session_store, response)


@router.post(
    "/logout",
    summary="End the current session",
    status_code=status.HTTP_200_OK,
    response_class=Response,
)
async def logout(
    token: Annotated[str | None, Depends(get_request_token)],
    session_store: SessionStoreDep,
) -> Response:
    """Destroy the caller's session, if any, and clear the cookie.

    Logging out without a session is not an error.
    """
    if token is not None:
        decoded = decode_access_token(token)
        if decoded is not None:
            session_store.destroy(decoded[1])
    response = Response(status_code=status.HTTP_200_OK)
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.get("/user", summary="Return the authenticated user", response_model=UserResponse)
async def current_user(user: CurrentUserDep) -> User:
    """Return the caller's profile."""
    return user
