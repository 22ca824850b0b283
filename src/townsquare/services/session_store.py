"""Database-backed store for authentication sessions.

Sessions live in the ``sessions`` table so they survive process restarts.
Each row holds a JSON payload and an absolute expiry; expired rows are
treated as missing and removed by :meth:`DatabaseSessionStore.prune_expired`.
"""
from __future__ import annotations

import logging
import secrets
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session

from townsquare.core.errors import StoreUnavailableError
from townsquare.core.settings import settings
from townsquare.db.time import utc_in, utcnow
from townsquare.models import SessionRecord

__all__ = ["DatabaseSessionStore", "SessionData"]

logger = logging.getLogger(__name__)

SessionData = dict[str, Any]


class DatabaseSessionStore:
    """Load, save, destroy and reap sessions in the relational store."""

    def __init__(self, session: Session, ttl_seconds: int | None = None) -> None:
        """Initialize the store.

        Args:
            session: SQLAlchemy session used for every statement.
            ttl_seconds: Lifetime of a session after its last save or touch.
                Defaults to ``SESSION_TTL_SECONDS``.
        """
        self.session = session
        self.ttl_seconds = settings.session_ttl_seconds if ttl_seconds is None else ttl_seconds

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except (OperationalError, InterfaceError) as exc:
            self.session.rollback()
            logger.error("Session store unavailable during %s: %s", operation, exc)
            raise StoreUnavailableError(operation) from exc

    def create_table_if_missing(self) -> None:
        """Create the ``sessions`` table unless it already exists."""
        with self._guard("create_table"):
            SessionRecord.__table__.create(bind=self.session.get_bind(), checkfirst=True)

    def create(self, data: SessionData) -> str:
        """Persist a new session and return its random identifier."""
        sid = secrets.token_urlsafe(32)
        self.set(sid, data)
        return sid

    def get(self, sid: str) -> SessionData | None:
        """Return the payload of a live session, or None if missing or expired."""
        stmt = select(SessionRecord.sess).where(
            SessionRecord.sid == sid,
            SessionRecord.expire > utcnow(),
        )
        with self._guard("get"):
            return self.session.execute(stmt).scalars().first()

    def set(self, sid: str, data: SessionData) -> None:
        """Insert or replace a session, restarting its lifetime."""
        with self._guard("set"):
            record = self.session.get(SessionRecord, sid)
            if record is None:
                record = SessionRecord(sid=sid, sess=data, expire=utc_in(self.ttl_seconds))
                self.session.add(record)
            else:
                record.sess = data
                record.expire = utc_in(self.ttl_seconds)
            self.session.commit()

    def touch(self, sid: str) -> None:
        """Push back the expiry of a live session."""
        stmt = (
            update(SessionRecord)
            .where(SessionRecord.sid == sid, SessionRecord.expire > utcnow())
            .values(expire=utc_in(self.ttl_seconds))
            .execution_options(synchronize_session=False)
        )
        with self._guard("touch"):
            self.session.execute(stmt)
            self.session.commit()

    def destroy(self, sid: str) -> None:
        """Delete a session; unknown ids are ignored."""
        with self._guard("destroy"):
            self.session.execute(delete(SessionRecord).where(SessionRecord.sid == sid))
            self.session.commit()

    def prune_expired(self) -> int:
        """Delete every expired session and return how many were removed."""
        with self._guard("prune_expired"):
            result = self.session.execute(
                delete(SessionRecord)
                .where(SessionRecord.expire <= utcnow())
                .execution_options(synchronize_session=False)
            )
            self.session.commit()
        removed = result.rowcount or 0
        if removed:
            logger.info("Pruned %d expired sessions", removed)
        return removed
