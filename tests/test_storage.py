"""Tests for the data access layer."""

from unittest.mock import patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from townsquare.core.errors import StoreUnavailableError, UniqueConstraintViolationError
from townsquare.models import CommunityMember, User
from townsquare.schemas import CommunityCreate, PostCreate, UserCreate


def _community(name: str, description: str = "A place", is_local: bool = False) -> CommunityCreate:
    return CommunityCreate(name=name, description=description, thumbnail="t.png", is_local=is_local)


def _membership_rows(db_session, user_id: int, community_id: int) -> int:
    return db_session.execute(
        select(func.count()).select_from(CommunityMember).where(
            CommunityMember.user_id == user_id,
            CommunityMember.community_id == community_id,
        )
    ).scalar_one()


class TestUsers:
    def test_create_and_fetch_user(self, storage):
        user = storage.create_user(
            UserCreate(username="carol", password="ignored", location="Lyon"),
            password_hash="hashed",
        )
        assert user.id is not None
        assert user.password == "hashed"
        assert storage.get_user(user.id).username == "carol"
        assert storage.get_user_by_username("carol").id == user.id

    def test_missing_user_is_absent_not_an_error(self, storage):
        assert storage.get_user(4242) is None
        assert storage.get_user_by_username("nobody") is None

    def test_duplicate_username_raises(self, storage, test_user, db_session):
        with pytest.raises(UniqueConstraintViolationError) as exc_info:
            storage.create_user(UserCreate(username="alice", password="x"), password_hash="h")
        assert exc_info.value.field == "username"

        # The session stays usable and the original row is untouched.
        users = db_session.execute(select(User).where(User.username == "alice")).scalars().all()
        assert [u.id for u in users] == [test_user.id]


class TestCommunities:
    def test_create_community_assigns_creator_and_timestamp(self, storage, test_user):
        community = storage.create_community(_community("Hiking", is_local=True), test_user.id)
        assert community.creator_id == test_user.id
        assert community.created_at is not None
        assert community.is_local is True
        assert storage.get_community(community.id).name == "Hiking"

    def test_ids_strictly_increase(self, storage, test_user):
        ids = [storage.create_community(_community(f"c{i}"), test_user.id).id for i in range(4)]
        assert ids == sorted(ids)
        assert len(set(ids)) == len(ids)

    def test_get_missing_community(self, storage):
        assert storage.get_community(999) is None

    def test_list_without_query_returns_everything_in_creation_order(self, storage, test_user):
        created = [storage.create_community(_community(n), test_user.id) for n in ("b", "a", "c")]
        listed = storage.list_communities()
        assert [c.id for c in listed] == [c.id for c in created]
        assert [c.id for c in storage.list_communities("")] == [c.id for c in created]

    def test_search_matches_name_or_description_ignoring_case(self, storage, test_user):
        hiking = storage.create_community(_community("Hiking Club", "Trails"), test_user.id)
        chess = storage.create_community(_community("Chess", "Weekend HIKES too"), test_user.id)
        storage.create_community(_community("Baking", "Bread"), test_user.id)

        assert {c.id for c in storage.list_communities("hik")} == {hiking.id, chess.id}
        assert [c.id for c in storage.list_communities("TRAIL")] == [hiking.id]
        assert storage.list_communities("sailing") == []

    def test_search_treats_wildcards_literally(self, storage, test_user):
        percent = storage.create_community(_community("100% Vegan", "Plants"), test_user.id)
        storage.create_community(_community("Vegan", "Plants"), test_user.id)
        storage.create_community(_community("a_b", "underscore"), test_user.id)

        assert [c.id for c in storage.list_communities("0% v")] == [percent.id]
        assert storage.list_communities("%%") == []
        assert [c.name for c in storage.list_communities("_")] == ["a_b"]


class TestPosts:
    def test_create_post_sets_server_fields(self, storage, community, test_user):
        post = storage.create_post(
            PostCreate(title="Hi", content="Hello"), community_id=community.id, author_id=test_user.id
        )
        assert post.author_id == test_user.id
        assert post.community_id == community.id
        assert post.created_at is not None
        assert storage.get_post(post.id).title == "Hi"

    def test_path_community_wins_over_payload(self, storage, community, test_user):
        post = storage.create_post(
            PostCreate(title="Hi", content="Hello", community_id=community.id + 100),
            community_id=community.id,
            author_id=test_user.id,
        )
        assert post.community_id == community.id

    def test_storage_does_not_check_community_existence(self, storage, test_user):
        post = storage.create_post(
            PostCreate(title="Orphan", content="..."), community_id=31337, author_id=test_user.id
        )
        assert post.community_id == 31337

    def test_list_posts_is_scoped_and_ordered(self, storage, community, test_user, other_user):
        other = storage.create_community(_community("Other"), test_user.id)
        first = storage.create_post(PostCreate(title="1", content="a"), community.id, test_user.id)
        storage.create_post(PostCreate(title="x", content="b"), other.id, test_user.id)
        second = storage.create_post(PostCreate(title="2", content="c"), community.id, other_user.id)

        assert [p.id for p in storage.list_posts(community.id)] == [first.id, second.id]
        assert storage.list_posts(404) == []

    def test_get_missing_post(self, storage):
        assert storage.get_post(1) is None


class TestMemberships:
    def test_join_then_is_member(self, storage, community, test_user, other_user):
        assert not storage.is_member(test_user.id, community.id)
        storage.join_community(test_user.id, community.id)
        assert storage.is_member(test_user.id, community.id)
        assert not storage.is_member(other_user.id, community.id)

    def test_repeated_join_adds_rows(self, storage, community, test_user, db_session):
        for _ in range(3):
            storage.join_community(test_user.id, community.id)
        assert _membership_rows(db_session, test_user.id, community.id) == 3

    def test_single_leave_removes_every_duplicate(self, storage, community, test_user, db_session):
        storage.join_community(test_user.id, community.id)
        storage.join_community(test_user.id, community.id)

        storage.leave_community(test_user.id, community.id)

        assert not storage.is_member(test_user.id, community.id)
        assert _membership_rows(db_session, test_user.id, community.id) == 0

    def test_leave_without_membership_is_a_no_op(self, storage, community, test_user):
        storage.leave_community(test_user.id, community.id)
        assert not storage.is_member(test_user.id, community.id)

    def test_leave_only_affects_the_given_pair(self, storage, community, test_user, other_user):
        storage.join_community(test_user.id, community.id)
        storage.join_community(other_user.id, community.id)
        storage.leave_community(test_user.id, community.id)
        assert storage.is_member(other_user.id, community.id)


class TestStoreUnavailable:
    def test_connection_failure_is_translated(self, storage, db_session):
        failure = OperationalError("SELECT", {}, Exception("connection refused"))
        with patch.object(db_session, "execute", side_effect=failure):
            with pytest.raises(StoreUnavailableError) as exc_info:
                storage.get_community(1)
        assert exc_info.value.operation == "get_community"
        assert exc_info.value.status_code == 503

    def test_failure_on_write_is_translated(self, storage, db_session, test_user):
        failure = OperationalError("INSERT", {}, Exception("server closed the connection"))
        with patch.object(db_session, "commit", side_effect=failure):
            with pytest.raises(StoreUnavailableError):
                storage.join_community(test_user.id, 1)
