"""
Integration Tests - User Queries
"""
from datetime import datetime, timedelta, timezone

import pytest

from marketplace.database.models import Role, User
from marketplace.errors import InvalidArgument, NotFound
from marketplace.queries import users


class TestUserLookups:
    """Tests for user lookups and registration windows"""

    async def test_get_user_by_id(self, db):
        user = await users.get_user_by_id(db, 1)
        assert user.username == "alice"

    async def test_get_user_by_id_missing(self, db):
        with pytest.raises(NotFound) as exc:
            await users.get_user_by_id(db, 999)
        assert exc.value.entity == "User"

    async def test_get_user_profile_info_missing(self, db):
        with pytest.raises(NotFound):
            await users.get_user_profile_info(db, 999)

    async def test_get_recent_users(self, db):
        recent = await users.get_recent_users(db, 2)
        assert [u.username for u in recent] == ["dave", "carol"]

    async def test_registration_range_is_inclusive(self, db):
        found = await users.get_users_by_registration_date_range(
            db, datetime(2024, 2, 1), datetime(2024, 3, 1)
        )
        assert {u.username for u in found} == {"bob", "carol"}

    async def test_registration_range_rejects_inverted_bounds(self, db):
        with pytest.raises(InvalidArgument):
            await users.get_users_by_registration_date_range(
                db, datetime(2024, 3, 1), datetime(2024, 2, 1)
            )

    async def test_get_recent_users_negative_limit(self, db):
        with pytest.raises(InvalidArgument):
            await users.get_recent_users(db, -1)

    async def test_get_user_language_sorted_by_code(self, db):
        languages = await users.get_user_language(db, 1)
        assert [lang.code for lang in languages] == ["en", "fr"]

    async def test_get_user_language_unknown_user(self, db):
        assert await users.get_user_language(db, 999) == []
        assert await users.get_user_language(db, 3) == []

    async def test_get_language_speakers(self, db):
        speakers = await users.get_language_speakers(db, 900)
        assert [u.username for u in speakers] == ["alice", "bob"]


class TestRoles:
    """Tests for role queries"""

    async def test_get_users_by_role(self, db):
        regular = await users.get_users_by_role(db, Role.USER)
        assert [u.username for u in regular] == ["bob", "dave"]

    async def test_get_user_roles(self, db):
        assert await users.get_user_roles(db, 3) == [Role.MODERATOR]
        assert await users.get_user_roles(db, 999) == []

    def test_get_all_roles(self):
        assert set(users.get_all_roles()) == {Role.ADMIN, Role.MODERATOR, Role.USER}

    async def test_role_statistics(self, db):
        stats = dict(await users.get_user_role_statistics(db))
        assert stats == {Role.ADMIN: 1, Role.MODERATOR: 1, Role.USER: 2}

    async def test_active_users_window(self, db):
        active = await users.get_active_users(db, now=datetime(2024, 6, 1))
        assert [u.username for u in active] == ["alice"]

    async def test_active_users_default_to_current_utc_time(self, db):
        yesterday = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(days=1)
        db.add(User(id=5, email="erin@example.com", username="erin", password="x", last_active=yesterday))
        await db.flush()

        active = await users.get_active_users(db)
        assert [u.username for u in active] == ["erin"]


class TestUserCollections:
    """Tests for per-user collections and counts"""

    async def test_products_and_count(self, db):
        products = await users.get_user_products(db, 1)
        assert {p.id for p in products} == {10, 11, 13}
        assert await users.get_user_product_count(db, 1) == 3
        assert await users.get_user_product_count(db, 4) == 0

    async def test_favorites_and_views(self, db):
        assert {p.id for p in await users.get_user_favorites(db, 2)} == {10, 13}
        assert {p.id for p in await users.get_user_viewed_products(db, 2)} == {10, 11, 12}
        assert await users.get_user_favorites(db, 4) == []

    async def test_reviews(self, db):
        assert {r.id for r in await users.get_user_reviews(db, 2)} == {100, 103}

    async def test_follow_graph(self, db):
        assert {u.username for u in await users.get_user_followers(db, 1)} == {"bob", "carol"}
        assert [u.username for u in await users.get_user_following(db, 1)] == ["bob"]
        assert await users.get_user_follower_count(db, 1) == 2
        assert await users.get_user_following_count(db, 1) == 1

    async def test_ratings(self, db):
        assert {r.id for r in await users.get_user_ratings(db, 1)} == {500, 501}
        assert [r.id for r in await users.get_user_ratings_given(db, 1)] == [501]
        assert [r.id for r in await users.get_user_ratings_received(db, 1)] == [500]

    async def test_messages_and_reactions(self, db):
        assert [m.id for m in await users.get_user_sent_messages(db, 1)] == [600]
        assert [m.id for m in await users.get_user_received_messages(db, 1)] == [601]
        reactions = await users.get_message_reactions(db, 600)
        assert [r.user_id for r in reactions] == [2]

    async def test_activity(self, db):
        log = await users.get_user_activity_log(db, 1)
        assert [a.action for a in log] == [1, 2]
        assert await users.get_user_activity_count(db, 1) == 2

    async def test_search_history_loads_user(self, db):
        history = await users.get_user_search_history(db, 1)
        assert history[0].query == "jordan 1"
        assert history[0].user.username == "alice"

    async def test_saved_searches(self, db):
        assert [s.query for s in await users.get_user_saved_searches(db, 1)] == ["size 10"]

    async def test_notifications(self, db):
        assert len(await users.get_user_notifications(db, 1)) == 2
        unread = await users.get_user_unread_notifications(db, 1)
        assert [n.message for n in unread] == ["New follower"]

    async def test_badges_and_achievements(self, db):
        badges = await users.get_user_badges(db, 1)
        assert badges[0].badge.name == "Top Seller"
        achievements = await users.get_user_achievements(db, 1)
        assert achievements[0].achievement.criteria == {"sales": 1}
