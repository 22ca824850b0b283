# src/townsquare/models/user.py
"""SQLAlchemy model for registered user identities."""

from __future__ import annotations

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from townsquare.db.session import Base


class User(Base):
    """Identity record created at registration and never edited afterwards."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    # argon2id hash; the plaintext never reaches the store.
    password: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    latitude: Mapped[str | None] = mapped_column(Text, nullable=True)
    longitude: Mapped[str | None] = mapped_column(Text, nullable=True)
