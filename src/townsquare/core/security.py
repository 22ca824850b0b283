"""Password hashing and signed session tokens."""
from __future__ import annotations

import nacl.pwhash
from jose import JWTError, jwt
from nacl.exceptions import InvalidkeyError

from townsquare.core.settings import settings


def hash_password(password: str) -> str:
    """Return an argon2id hash of ``password`` in modular crypt format."""
    return nacl.pwhash.str(password.encode("utf-8")).decode("ascii")


def verify_password(password_hash: str, password: str) -> bool:
    """Check ``password`` against a stored hash.

    Returns:
        True when the password matches; False for a mismatch or an unreadable hash.
    """
    try:
        return nacl.pwhash.verify(password_hash.encode("ascii"), password.encode("utf-8"))
    except (InvalidkeyError, ValueError, UnicodeEncodeError):
        return False


def create_access_token(user_id: int, session_id: str) -> str:
    """Sign a token binding a user id to a stored session.

    The token carries no expiry of its own; it lives as long as the session
    row it names, which is extended on every authenticated request.
    """
    to_encode: dict[str, object] = {"sub": str(user_id), "sid": session_id}
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> tuple[int, str] | None:
    """Return ``(user_id, session_id)`` from a valid token, else None."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None

    subject = payload.get("sub")
    session_id = payload.get("sid")
    if not isinstance(subject, str) or not isinstance(session_id, str):
        return None
    try:
        return int(subject), session_id
    except ValueError:
        return None
