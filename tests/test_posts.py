# tests/test_posts.py
"""Tests for post endpoints."""

from datetime import datetime, timedelta
from unittest.mock import MagicMock

from fastapi import status
from sqlalchemy import func, select

from townsquare.api.dependencies import get_storage
from townsquare.core.errors import StoreUnavailableError
from townsquare.models import Post
from townsquare.repositories.storage import DatabaseStorage


def _post_count(db_session) -> int:
    return db_session.execute(select(func.count()).select_from(Post)).scalar_one()


def test_create_post(client, community, test_user, auth_headers) -> None:
    response = client.post(
        f"/api/communities/{community.id}/posts",
        json={"title": "Hi", "content": "Hello"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["title"] == "Hi"
    assert data["content"] == "Hello"
    assert data["communityId"] == community.id
    assert data["authorId"] == test_user.id
    assert data["createdAt"]


def test_create_post_ignores_client_author_and_community(
    client, community, test_user, other_user, auth_headers
) -> None:
    response = client.post(
        f"/api/communities/{community.id}/posts",
        json={
            "title": "Hi",
            "content": "Hello",
            "authorId": other_user.id,
            "communityId": community.id + 50,
        },
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["authorId"] == test_user.id
    assert data["communityId"] == community.id


def test_create_post_in_missing_community_never_inserts(app, client, db_session, auth_headers) -> None:
    spy = MagicMock(wraps=DatabaseStorage(db_session))
    app.dependency_overrides[get_storage] = lambda: spy

    response = client.post(
        "/api/communities/4242/posts",
        json={"title": "Hi", "content": "Hello"},
        headers=auth_headers,
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"message": "Community not found"}
    spy.get_community.assert_called_once_with(4242)
    spy.create_post.assert_not_called()
    assert _post_count(db_session) == 0


def test_create_post_invalid_payload(client, community, auth_headers, db_session) -> None:
    response = client.post(
        f"/api/communities/{community.id}/posts",
        json={"title": 12},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["message"] == "Invalid post data"
    assert {e["field"] for e in body["errors"]} == {"title", "content"}
    assert _post_count(db_session) == 0


def test_create_post_without_body(client, community, auth_headers) -> None:
    response = client.post(f"/api/communities/{community.id}/posts", headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_create_post_unauthenticated(client, community, db_session) -> None:
    response = client.post(
        f"/api/communities/{community.id}/posts",
        json={"title": "Hi", "content": "Hello"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert _post_count(db_session) == 0


def test_list_posts_needs_no_auth_or_membership(client, community, auth_headers) -> None:
    for title in ("first", "second"):
        client.post(
            f"/api/communities/{community.id}/posts",
            json={"title": title, "content": "..."},
            headers=auth_headers,
        )

    response = client.get(f"/api/communities/{community.id}/posts")
    assert response.status_code == status.HTTP_200_OK
    assert [p["title"] for p in response.json()] == ["first", "second"]


def test_list_posts_of_unknown_community_is_empty(client) -> None:
    response = client.get("/api/communities/4242/posts")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []


def test_store_unavailable_maps_to_503(app, client) -> None:
    broken = MagicMock()
    broken.list_posts.side_effect = StoreUnavailableError("list_posts")
    app.dependency_overrides[get_storage] = lambda: broken

    response = client.get("/api/communities/1/posts")
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json() == {"message": "Database unavailable"}


def test_listed_posts_report_created_at_in_utc(client, community, auth_headers, db_session) -> None:
    client.post(
        f"/api/communities/{community.id}/posts",
        json={"title": "Hi", "content": "Hello"},
        headers=auth_headers,
    )
    db_session.expire_all()

    (post,) = client.get(f"/api/communities/{community.id}/posts").json()
    assert datetime.fromisoformat(post["createdAt"]).utcoffset() == timedelta(0)
