"""Data access layer: the only code that reads or writes the relational store."""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol

from sqlalchemy import delete, exists, or_, select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session

from townsquare.core.errors import StoreUnavailableError, UniqueConstraintViolationError
from townsquare.db.time import utcnow
from townsquare.models import Community, CommunityMember, Post, User
from townsquare.schemas.community import CommunityCreate
from townsquare.schemas.post import PostCreate
from townsquare.schemas.user import UserCreate

__all__ = ["DatabaseStorage", "Storage"]

logger = logging.getLogger(__name__)


class Storage(Protocol):
    """Operations the route handlers rely on."""

    def get_user(self, user_id: int) -> User | None: ...
    def get_user_by_username(self, username: str) -> User | None: ...
    def create_user(self, data: UserCreate, password_hash: str) -> User: ...

    def get_community(self, community_id: int) -> Community | None: ...
    def list_communities(self, query: str | None = None) -> list[Community]: ...
    def create_community(self, data: CommunityCreate, creator_id: int) -> Community: ...

    def get_post(self, post_id: int) -> Post | None: ...
    def list_posts(self, community_id: int) -> list[Post]: ...
    def create_post(self, data: PostCreate, community_id: int, author_id: int) -> Post: ...

    def join_community(self, user_id: int, community_id: int) -> None: ...
    def leave_community(self, user_id: int, community_id: int) -> None: ...
    def is_member(self, user_id: int, community_id: int) -> bool: ...


class DatabaseStorage:
    """SQLAlchemy-backed implementation of :class:`Storage`.

    Every public method is a single statement in its own transaction. Nothing
    here spans entities, so creating a community does not enrol its creator.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the storage with a request-scoped SQLAlchemy session."""
        self.session = session

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        """Roll back and translate driver connectivity failures."""
        try:
            yield
        except (OperationalError, InterfaceError) as exc:
            self.session.rollback()
            logger.error("Store unavailable during %s: %s", operation, exc)
            raise StoreUnavailableError(operation) from exc

    # Users

    def get_user(self, user_id: int) -> User | None:
        """Return a user by primary key, or None."""
        with self._guard("get_user"):
            return self.session.execute(select(User).where(User.id == user_id)).scalars().first()

    def get_user_by_username(self, username: str) -> User | None:
        """Return a user by exact username, or None."""
        stmt = select(User).where(User.username == username)
        with self._guard("get_user_by_username"):
            return self.session.execute(stmt).scalars().first()

    def create_user(self, data: UserCreate, password_hash: str) -> User:
        """Insert a user.

        Raises:
            UniqueConstraintViolationError: If the username is already taken.
        """
        user = User(
            username=data.username,
            password=password_hash,
            location=data.location,
            latitude=data.latitude,
            longitude=data.longitude,
        )
        with self._guard("create_user"):
            self.session.add(user)
            try:
                self.session.commit()
            except IntegrityError as exc:
                self.session.rollback()
                raise UniqueConstraintViolationError(
                    "Username already exists", field="username"
                ) from exc
            self.session.refresh(user)
        return user

    # Communities

    def get_community(self, community_id: int) -> Community | None:
        """Return a community by primary key, or None."""
        stmt = select(Community).where(Community.id == community_id)
        with self._guard("get_community"):
            return self.session.execute(stmt).scalars().first()

    def list_communities(self, query: str | None = None) -> list[Community]:
        """Return communities ordered by creation.

        A non-empty ``query`` keeps communities whose name or description
        contains it, ignoring case. The query is matched literally.
        """
        stmt = select(Community)
        if query:
            stmt = stmt.where(
                or_(
                    Community.name.icontains(query, autoescape=True),
                    Community.description.icontains(query, autoescape=True),
                )
            )
        stmt = stmt.order_by(Community.created_at, Community.id)
        with self._guard("list_communities"):
            return list(self.session.execute(stmt).scalars())

    def create_community(self, data: CommunityCreate, creator_id: int) -> Community:
        """Insert a community owned by ``creator_id`` stamped with the current time."""
        community = Community(
            name=data.name,
            description=data.description,
            thumbnail=data.thumbnail,
            is_local=data.is_local,
            created_at=utcnow(),
            creator_id=creator_id,
        )
        with self._guard("create_community"):
            self.session.add(community)
            self.session.commit()
            self.session.refresh(community)
        return community

    # Posts

    def get_post(self, post_id: int) -> Post | None:
        """Return a post by primary key, or None."""
        with self._guard("get_post"):
            return self.session.execute(select(Post).where(Post.id == post_id)).scalars().first()

    def list_posts(self, community_id: int) -> list[Post]:
        """Return every post of a community, oldest first."""
        stmt = (
            select(Post)
            .where(Post.community_id == community_id)
            .order_by(Post.created_at, Post.id)
        )
        with self._guard("list_posts"):
            return list(self.session.execute(stmt).scalars())

    def create_post(self, data: PostCreate, community_id: int, author_id: int) -> Post:
        """Insert a post.

        The community is not looked up here; callers check it first.
        """
        post = Post(
            title=data.title,
            content=data.content,
            community_id=community_id,
            author_id=author_id,
            created_at=utcnow(),
        )
        with self._guard("create_post"):
            self.session.add(post)
            self.session.commit()
            self.session.refresh(post)
        return post

    # Memberships

    def join_community(self, user_id: int, community_id: int) -> None:
        """Record a membership; repeated joins add duplicate rows."""
        with self._guard("join_community"):
            self.session.add(CommunityMember(user_id=user_id, community_id=community_id))
            self.session.commit()

    def leave_community(self, user_id: int, community_id: int) -> None:
        """Remove every membership row for the pair; a no-op when none exist."""
        stmt = delete(CommunityMember).where(
            CommunityMember.user_id == user_id,
            CommunityMember.community_id == community_id,
        )
        with self._guard("leave_community"):
            self.session.execute(stmt)
            self.session.commit()

    def is_member(self, user_id: int, community_id: int) -> bool:
        """Return True when at least one membership row exists."""
        stmt = select(
            exists().where(
                CommunityMember.user_id == user_id,
                CommunityMember.community_id == community_id,
            )
        )
        with self._guard("is_member"):
            return bool(self.session.execute(stmt).scalar())
