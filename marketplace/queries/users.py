"""
User Queries

Account lookups, the social graph (follows, ratings, messages) and the
per-user activity collections.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from marketplace.config import get_settings
from marketplace.database.models import (
    Language,
    Message,
    MessageReaction,
    Notification,
    Product,
    Review,
    Role,
    SavedSearch,
    SearchHistory,
    User,
    UserAchievement,
    UserActivity,
    UserBadge,
    UserFollow,
    UserRating,
)
from marketplace.queries.base import SortOrder, get_or_raise, in_range, limited, ordered


# =============================================================================
# LOOKUPS
# =============================================================================

async def get_user_by_id(session: AsyncSession, user_id: int) -> User:
    return await get_or_raise(session, User, user_id)


async def get_all_users(session: AsyncSession) -> Sequence[User]:
    result = await session.execute(select(User).order_by(User.id))
    return result.scalars().all()


async def get_recent_users(session: AsyncSession, limit: int) -> Sequence[User]:
    """Most recently registered users, newest first."""
    query = limited(ordered(select(User), User.created_at, SortOrder.DESC), limit)
    result = await session.execute(query)
    return result.scalars().all()


async def get_users_by_registration_date_range(
    session: AsyncSession, start_date: datetime, end_date: datetime
) -> Sequence[User]:
    query = in_range(select(User), User.created_at, start_date, end_date)
    result = await session.execute(query.order_by(User.created_at))
    return result.scalars().all()


async def get_user_profile_info(session: AsyncSession, user_id: int) -> User:
    return await get_or_raise(session, User, user_id)


async def get_user_language(session: AsyncSession, user_id: int) -> Sequence[Language]:
    """Languages the user speaks, by code; empty for an unknown user."""
    result = await session.execute(
        select(Language).where(Language.users.any(User.id == user_id)).order_by(Language.code)
    )
    return result.scalars().all()


async def get_language_speakers(session: AsyncSession, language_id: int) -> Sequence[User]:
    result = await session.execute(
        select(User).where(User.languages.any(Language.id == language_id)).order_by(User.id)
    )
    return result.scalars().all()


# =============================================================================
# ROLES
# =============================================================================

async def get_users_by_role(session: AsyncSession, role: Role) -> Sequence[User]:
    result = await session.execute(select(User).where(User.role == role).order_by(User.id))
    return result.scalars().all()


async def get_user_roles(session: AsyncSession, user_id: int) -> List[Role]:
    """The user's role as a one-element list, or empty for an unknown user."""
    result = await session.execute(select(User.role).where(User.id == user_id))
    role = result.scalar_one_or_none()
    return [role] if role is not None else []


def get_all_roles() -> List[Role]:
    return list(Role)


async def get_user_role_statistics(session: AsyncSession) -> List[Tuple[Role, int]]:
    """Number of users per role, for roles that have at least one user."""
    result = await session.execute(
        select(User.role, func.count(User.id).label("user_count"))
        .group_by(User.role)
        .order_by(User.role)
    )
    return [(row.role, row.user_count) for row in result.all()]


async def get_active_users(
    session: AsyncSession, now: Optional[datetime] = None
) -> Sequence[User]:
    """Users whose last activity falls within the configured window."""
    window = get_settings().query.active_user_window_days
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    cutoff = now - timedelta(days=window)
    result = await session.execute(
        select(User).where(User.last_active >= cutoff).order_by(User.last_active.desc())
    )
    return result.scalars().all()


# =============================================================================
# PRODUCTS AND REVIEWS BY USER
# =============================================================================

async def get_user_products(session: AsyncSession, user_id: int) -> Sequence[Product]:
    result = await session.execute(select(Product).where(Product.seller_id == user_id))
    return result.scalars().all()


async def get_user_product_count(session: AsyncSession, user_id: int) -> int:
    result = await session.execute(
        select(func.count(Product.id)).where(Product.seller_id == user_id)
    )
    return result.scalar() or 0


async def get_user_favorites(session: AsyncSession, user_id: int) -> Sequence[Product]:
    result = await session.execute(
        select(Product).where(Product.favorited_by.any(User.id == user_id))
    )
    return result.scalars().all()


async def get_user_viewed_products(session: AsyncSession, user_id: int) -> Sequence[Product]:
    result = await session.execute(
        select(Product).where(Product.viewed_by.any(User.id == user_id))
    )
    return result.scalars().all()


async def get_user_reviews(session: AsyncSession, user_id: int) -> Sequence[Review]:
    result = await session.execute(select(Review).where(Review.user_id == user_id))
    return result.scalars().all()


# =============================================================================
# SOCIAL GRAPH
# =============================================================================

async def get_user_followers(session: AsyncSession, user_id: int) -> Sequence[User]:
    """Users following ``user_id``."""
    result = await session.execute(
        select(User)
        .join(UserFollow, UserFollow.follower_id == User.id)
        .where(UserFollow.followed_id == user_id)
    )
    return result.scalars().all()


async def get_user_following(session: AsyncSession, user_id: int) -> Sequence[User]:
    """Users that ``user_id`` follows."""
    result = await session.execute(
        select(User)
        .join(UserFollow, UserFollow.followed_id == User.id)
        .where(UserFollow.follower_id == user_id)
    )
    return result.scalars().all()


async def get_user_follower_count(session: AsyncSession, user_id: int) -> int:
    result = await session.execute(
        select(func.count(UserFollow.id)).where(UserFollow.followed_id == user_id)
    )
    return result.scalar() or 0


async def get_user_following_count(session: AsyncSession, user_id: int) -> int:
    result = await session.execute(
        select(func.count(UserFollow.id)).where(UserFollow.follower_id == user_id)
    )
    return result.scalar() or 0


async def get_user_ratings(session: AsyncSession, user_id: int) -> Sequence[UserRating]:
    """Ratings the user gave or received."""
    result = await session.execute(
        select(UserRating).where(
            or_(UserRating.rater_id == user_id, UserRating.rated_id == user_id)
        )
    )
    return result.scalars().all()


async def get_user_ratings_given(session: AsyncSession, user_id: int) -> Sequence[UserRating]:
    result = await session.execute(select(UserRating).where(UserRating.rater_id == user_id))
    return result.scalars().all()


async def get_user_ratings_received(session: AsyncSession, user_id: int) -> Sequence[UserRating]:
    result = await session.execute(select(UserRating).where(UserRating.rated_id == user_id))
    return result.scalars().all()


async def get_user_sent_messages(session: AsyncSession, user_id: int) -> Sequence[Message]:
    result = await session.execute(select(Message).where(Message.sender_id == user_id))
    return result.scalars().all()


async def get_user_received_messages(session: AsyncSession, user_id: int) -> Sequence[Message]:
    result = await session.execute(select(Message).where(Message.receiver_id == user_id))
    return result.scalars().all()


async def get_message_reactions(session: AsyncSession, message_id: int) -> Sequence[MessageReaction]:
    result = await session.execute(
        select(MessageReaction).where(MessageReaction.message_id == message_id)
    )
    return result.scalars().all()


# =============================================================================
# ACTIVITY
# =============================================================================

async def get_user_activity_log(session: AsyncSession, user_id: int) -> Sequence[UserActivity]:
    result = await session.execute(
        select(UserActivity).where(UserActivity.user_id == user_id).order_by(UserActivity.created_at)
    )
    return result.scalars().all()


async def get_user_activity_count(session: AsyncSession, user_id: int) -> int:
    result = await session.execute(
        select(func.count(UserActivity.id)).where(UserActivity.user_id == user_id)
    )
    return result.scalar() or 0


async def get_user_search_history(session: AsyncSession, user_id: int) -> Sequence[SearchHistory]:
    result = await session.execute(
        select(SearchHistory)
        .where(SearchHistory.user_id == user_id)
        .options(selectinload(SearchHistory.user))
    )
    return result.scalars().all()


async def get_user_saved_searches(session: AsyncSession, user_id: int) -> Sequence[SavedSearch]:
    result = await session.execute(select(SavedSearch).where(SavedSearch.user_id == user_id))
    return result.scalars().all()


async def get_user_notifications(session: AsyncSession, user_id: int) -> Sequence[Notification]:
    result = await session.execute(select(Notification).where(Notification.user_id == user_id))
    return result.scalars().all()


async def get_user_unread_notifications(
    session: AsyncSession, user_id: int
) -> Sequence[Notification]:
    result = await session.execute(
        select(Notification).where(Notification.user_id == user_id, Notification.read.is_(False))
    )
    return result.scalars().all()


async def get_user_badges(session: AsyncSession, user_id: int) -> Sequence[UserBadge]:
    result = await session.execute(
        select(UserBadge).where(UserBadge.user_id == user_id).options(selectinload(UserBadge.badge))
    )
    return result.scalars().all()


async def get_user_achievements(session: AsyncSession, user_id: int) -> Sequence[UserAchievement]:
    result = await session.execute(
        select(UserAchievement)
        .where(UserAchievement.user_id == user_id)
        .options(selectinload(UserAchievement.achievement))
    )
    return result.scalars().all()
