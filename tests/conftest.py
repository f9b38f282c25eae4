"""
Test Suite Configuration
"""
from datetime import datetime
from typing import AsyncGenerator

import pytest
from pydantic import SecretStr
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.config import Settings
from marketplace.config.settings import SecuritySettings
from marketplace.database import Base, Database
from marketplace.database.models import (
    Achievement,
    Badge,
    Condition,
    FlagReason,
    FlagStatus,
    Language,
    Message,
    MessageReaction,
    Notification,
    Product,
    ProductFlag,
    Raffle,
    RaffleEntry,
    RaffleResult,
    RaffleStatus,
    RaffleType,
    ReactionType,
    Review,
    Role,
    Sale,
    SavedSearch,
    SearchHistory,
    User,
    UserAchievement,
    UserActivity,
    UserBadge,
    UserFollow,
    UserRating,
    product_favorites,
    product_views,
    user_languages,
)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
        security=SecuritySettings(
            admin_phrase=SecretStr("open-sesame"),
            moderator_phrase=SecretStr("keep-it-civil"),
        ),
    )


@pytest.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """File-backed SQLite database with the schema created"""
    db = Database.from_url(f"sqlite+aiosqlite:///{tmp_path / 'marketplace.db'}")
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield db

    await db.dispose()


@pytest.fixture
async def session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Session against the empty test database"""
    async with database.session() as s:
        yield s


async def _seed(session: AsyncSession) -> None:
    session.add_all([
        User(id=1, email="alice@example.com", username="alice", password="x", role=Role.ADMIN,
             created_at=datetime(2024, 1, 1), last_active=datetime(2024, 5, 25)),
        User(id=2, email="bob@example.com", username="bob", password="x", role=Role.USER,
             created_at=datetime(2024, 2, 1), last_active=datetime(2024, 4, 1)),
        User(id=3, email="carol@example.com", username="carol", password="x", role=Role.MODERATOR,
             created_at=datetime(2024, 3, 1)),
        User(id=4, email="dave@example.com", username="dave", password="x", role=Role.USER,
             created_at=datetime(2024, 3, 15)),
    ])
    await session.flush()

    session.add_all([
        Product(id=10, seller_id=1, title="Sneaker A", price=200.0, cost=100.0, stock=2,
                condition=Condition.BRAND_NEW, has_raffle=True,
                created_at=datetime(2024, 4, 1), listed_at=datetime(2024, 4, 1)),
        Product(id=11, seller_id=1, title="Sneaker B", price=150.0, cost=0.0, stock=10,
                condition=Condition.USED,
                created_at=datetime(2024, 4, 10), listed_at=datetime(2024, 4, 10)),
        Product(id=12, seller_id=2, title="Sneaker C", price=90.0, cost=None, stock=0,
                condition=Condition.USED,
                created_at=datetime(2024, 4, 20), listed_at=datetime(2024, 4, 20)),
        Product(id=13, seller_id=1, title="Sneaker D", price=120.0, cost=100.0, stock=5,
                condition=Condition.IN_BOX, has_raffle=True,
                created_at=datetime(2024, 4, 30), listed_at=datetime(2024, 4, 30)),
    ])
    await session.flush()

    await session.execute(insert(product_favorites).values([
        {"user_id": 2, "product_id": 10},
        {"user_id": 2, "product_id": 13},
        {"user_id": 3, "product_id": 10},
    ]))
    await session.execute(insert(product_views).values([
        {"user_id": 2, "product_id": 10},
        {"user_id": 2, "product_id": 11},
        {"user_id": 2, "product_id": 12},
        {"user_id": 3, "product_id": 10},
        {"user_id": 4, "product_id": 10},
    ]))

    session.add_all([
        Review(id=100, product_id=10, user_id=2, content="This is a great product", percentage=80.0,
               created_at=datetime(2024, 5, 1)),
        Review(id=101, product_id=10, user_id=3, content="Terrible and poor quality", percentage=20.0,
               created_at=datetime(2024, 5, 2)),
        Review(id=102, product_id=10, user_id=4, content="It arrived on Tuesday", percentage=50.0,
               created_at=datetime(2024, 5, 3)),
        Review(id=103, product_id=13, user_id=2, content="Good fit", percentage=90.0,
               created_at=datetime(2024, 5, 4)),
        Sale(id=200, product_id=10, user_id=2, quantity=1, total_price=200.0,
             sold_at=datetime(2024, 5, 1, 10, 0)),
        Sale(id=201, product_id=10, user_id=3, quantity=2, total_price=400.0,
             sold_at=datetime(2024, 5, 1, 18, 0)),
        Sale(id=202, product_id=10, user_id=4, quantity=1, total_price=200.0,
             sold_at=datetime(2024, 5, 3, 9, 0)),
        Sale(id=203, product_id=13, user_id=2, quantity=1, total_price=120.0,
             sold_at=datetime(2024, 5, 3, 12, 0)),
        ProductFlag(id=300, product_id=12, user_id=2, reason=FlagReason.COUNTERFEIT,
                    status=FlagStatus.PENDING, created_at=datetime(2024, 5, 5)),
        ProductFlag(id=301, product_id=12, user_id=3, reason=FlagReason.SPAM,
                    status=FlagStatus.RESOLVED, created_at=datetime(2024, 5, 6)),
        ProductFlag(id=302, product_id=11, user_id=3, reason=FlagReason.MISLEADING,
                    status=FlagStatus.PENDING, created_at=datetime(2024, 5, 7)),
        Raffle(id=42, product_id=10, title="Sneaker A drop", type=RaffleType.ONLINE,
               status=RaffleStatus.CLOSED, ends_at=datetime(2024, 5, 10),
               created_at=datetime(2024, 5, 1)),
        Raffle(id=43, product_id=13, title="Sneaker D drop", type=RaffleType.IN_APP,
               status=RaffleStatus.OPEN, ends_at=datetime(2024, 6, 10),
               created_at=datetime(2024, 5, 2)),
    ])
    await session.flush()

    session.add_all([
        RaffleEntry(id=400, raffle_id=42, user_id=2, result=RaffleResult.WON,
                    created_at=datetime(2024, 5, 2)),
        RaffleEntry(id=401, raffle_id=42, user_id=3, result=RaffleResult.LOST,
                    created_at=datetime(2024, 5, 3)),
        RaffleEntry(id=402, raffle_id=42, user_id=4, result=RaffleResult.WON,
                    created_at=datetime(2024, 5, 4)),
        RaffleEntry(id=403, raffle_id=43, user_id=2, result=RaffleResult.PENDING,
                    created_at=datetime(2024, 5, 5)),
        UserFollow(follower_id=2, followed_id=1),
        UserFollow(follower_id=3, followed_id=1),
        UserFollow(follower_id=1, followed_id=2),
        UserRating(id=500, rater_id=2, rated_id=1, rating=5),
        UserRating(id=501, rater_id=1, rated_id=3, rating=4),
        Message(id=600, sender_id=1, receiver_id=2, content="Still available?"),
        Message(id=601, sender_id=2, receiver_id=1, content="Yes"),
        UserActivity(user_id=1, action=1, created_at=datetime(2024, 5, 1)),
        UserActivity(user_id=1, action=2, created_at=datetime(2024, 5, 2)),
        Notification(user_id=1, message="Your item sold", read=True),
        Notification(user_id=1, message="New follower", read=False),
        SearchHistory(user_id=1, query="jordan 1"),
        SavedSearch(user_id=1, query="size 10"),
        Badge(id=700, name="Top Seller", description="Sold 10 items"),
        Achievement(id=800, name="First Sale", description="Made a first sale", criteria={"sales": 1}),
        Language(id=900, code="en", name="English"),
        Language(id=901, code="fr", name="French"),
        Language(id=902, code="de", name="German"),
    ])
    await session.flush()

    session.add_all([
        MessageReaction(message_id=600, user_id=2, type=ReactionType.LIKE),
        UserBadge(user_id=1, badge_id=700),
        UserAchievement(user_id=1, achievement_id=800),
    ])
    await session.execute(insert(user_languages).values([
        {"user_id": 1, "language_id": 901},
        {"user_id": 1, "language_id": 900},
        {"user_id": 2, "language_id": 900},
    ]))


@pytest.fixture
async def seeded(database: Database) -> Database:
    """Test database populated with a small marketplace"""
    async with database.session() as s:
        await _seed(s)
    return database


@pytest.fixture
async def db(seeded: Database) -> AsyncGenerator[AsyncSession, None]:
    """Session against the seeded test database"""
    async with seeded.session() as s:
        yield s
