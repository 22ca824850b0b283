"""Shared API dependencies for authentication and request plumbing."""

import json
import logging
from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from townsquare.core.errors import FieldError, InvalidInputError, UnauthorizedError
from townsquare.core.security import decode_access_token
from townsquare.core.settings import settings
from townsquare.db.session import get_db
from townsquare.models import User
from townsquare.repositories.storage import DatabaseStorage, Storage
from townsquare.services.session_store import DatabaseSessionStore

logger = logging.getLogger(__name__)

# Credentials may arrive as a bearer header or the session cookie; missing
# credentials are reported as 401 by get_current_identity, not by these schemes.
bearer_scheme = HTTPBearer(auto_error=False)
cookie_scheme = APIKeyCookie(name=settings.session_cookie_name, auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_storage(db: SessionDep) -> Storage:
    """Return the data access layer bound to the request's session."""
    return DatabaseStorage(db)


def get_session_store(db: SessionDep) -> DatabaseSessionStore:
    """Return the session store bound to the request's session."""
    return DatabaseSessionStore(db)


StorageDep = Annotated[Storage, Depends(get_storage)]
SessionStoreDep = Annotated[DatabaseSessionStore, Depends(get_session_store)]


@dataclass(frozen=True)
class Identity:
    """The authenticated caller of a request."""

    user: User
    session_id: str

    @property
    def user_id(self) -> int:
        return self.user.id


def get_request_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    cookie_token: Annotated[str | None, Depends(cookie_scheme)],
) -> str | None:
    """Return the raw session token, preferring the Authorization header."""
    if credentials is not None:
        return credentials.credentials
    return cookie_token


def get_current_identity(
    token: Annotated[str | None, Depends(get_request_token)],
    storage: StorageDep,
    session_store: SessionStoreDep,
) -> Identity:
    """Resolve the caller from a signed token and its stored session.

    Raises:
        UnauthorizedError: If the token is missing, forged or expired, the
            session was destroyed or has lapsed, or the user no longer exists.
    """
    if token is None:
        raise UnauthorizedError()

    decoded = decode_access_token(token)
    if decoded is None:
        logger.warning("Rejected malformed or expired session token")
        raise UnauthorizedError()
    user_id, session_id = decoded

    data = session_store.get(session_id)
    if data is None or data.get("user_id") != user_id:
        raise UnauthorizedError()

    user = storage.get_user(user_id)
    if user is None:
        raise UnauthorizedError()

    session_store.touch(session_id)
    return Identity(user=user, session_id=session_id)


CurrentIdentityDep = Annotated[Identity, Depends(get_current_identity)]


def get_current_user(identity: CurrentIdentityDep) -> User:
    """Return the authenticated user of the request."""
    return identity.user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


async def read_json_body(request: Request) -> Any:
    """Decode the request body as JSON without validating its shape.

    Declared after the auth dependency in mutating routes so that
    unauthenticated callers get 401 before their payload is looked at.
    """
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError as err:
        raise InvalidInputError(
            [FieldError(field="body", message="Malformed JSON", type="json_invalid")],
            message="Invalid request body",
        ) from err


JsonBodyDep = Annotated[Any, Depends(read_json_body)]
