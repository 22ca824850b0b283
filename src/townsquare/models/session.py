"""Persistent backing for authentication sessions."""
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from townsquare.db.session import Base


class SessionRecord(Base):
    """One login session, reaped once ``expire`` has passed."""

    __tablename__ = "sessions"

    sid: Mapped[str] = mapped_column(String(128), primary_key=True)
    sess: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    expire: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
