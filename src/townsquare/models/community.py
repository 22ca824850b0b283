"""SQLAlchemy models for communities and their members."""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from townsquare.db.session import Base
from townsquare.db.time import utcnow


class Community(Base):
    """A named discussion space users can join and post within."""

    __tablename__ = "communities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail: Mapped[str] = mapped_column(Text, nullable=False)
    is_local: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    # Refers to users.id by convention only; no foreign key is declared.
    creator_id: Mapped[int] = mapped_column(Integer, nullable=False)


class CommunityMember(Base):
    """Join record linking a user to a community.

    (user_id, community_id) is not unique, so repeated joins add rows.
    """

    __tablename__ = "community_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    community_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
