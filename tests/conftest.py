# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator

import pytest

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ["DATABASE_URL"] = "sqlite://"

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from townsquare.core.security import create_access_token, hash_password  # noqa: E402
from townsquare.db.session import Base  # noqa: E402
from townsquare.db.session import get_db as app_get_session  # noqa: E402
from townsquare.db.time import utcnow  # noqa: E402
from townsquare.main import app as fastapi_app  # noqa: E402
from townsquare.models import Community, User  # noqa: E402
from townsquare.repositories.storage import DatabaseStorage  # noqa: E402
from townsquare.services.session_store import DatabaseSessionStore  # noqa: E402

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "correct horse battery staple"


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def storage(db_session: Session) -> DatabaseStorage:
    return DatabaseStorage(db_session)


@pytest.fixture()
def session_store(db_session: Session) -> DatabaseSessionStore:
    return DatabaseSessionStore(db_session, ttl_seconds=3600)


def make_user(db_session: Session, username: str) -> User:
    user = User(username=username, password=hash_password(TEST_PASSWORD))
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def bearer_headers(user: User, session_store: DatabaseSessionStore) -> dict[str, str]:
    session_id = session_store.create({"user_id": user.id})
    token = create_access_token(user.id, session_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return a persisted test user."""
    return make_user(db_session, "alice")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second persisted user."""
    return make_user(db_session, "bob")


@pytest.fixture()
def auth_headers(test_user: User, session_store: DatabaseSessionStore) -> dict[str, str]:
    """Return authorization headers backed by a stored session for the test user."""
    return bearer_headers(test_user, session_store)


@pytest.fixture()
def other_auth_headers(other_user: User, session_store: DatabaseSessionStore) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return bearer_headers(other_user, session_store)


@pytest.fixture()
def community(db_session: Session, test_user: User) -> Community:
    """Create a default test community owned by the test user."""
    community = Community(
        name="Hiking",
        description="Trails and summit reports",
        thumbnail="https://img.example/hiking.png",
        is_local=True,
        created_at=utcnow(),
        creator_id=test_user.id,
    )
    db_session.add(community)
    db_session.commit()
    db_session.refresh(community)
    return community
