"""
GraphQL Types

Strawberry object types mirroring the marketplace entities, plus the
result types of the computed aggregates.
"""

from typing import List, Optional

import strawberry
from strawberry.scalars import JSON

from marketplace.analytics import Sentiment as SentimentEnum, classify
from marketplace.database import models
from marketplace.queries import raffles as raffle_queries
from marketplace.queries import users as user_queries
from marketplace.queries.base import SortOrder as SortOrderEnum
from marketplace.serving.api.graphql.context import db_session
from marketplace.serving.api.graphql.scalars import Date, DateTime


# =============================================================================
# ENUMS
# =============================================================================

Role = strawberry.enum(models.Role, description="User role")
Condition = strawberry.enum(models.Condition, description="Product condition")
RaffleType = strawberry.enum(models.RaffleType, description="How a raffle is entered")
RaffleStatus = strawberry.enum(models.RaffleStatus, description="Raffle lifecycle status")
RaffleResult = strawberry.enum(models.RaffleResult, description="Raffle entry outcome")
ReactionType = strawberry.enum(models.ReactionType, description="Message reaction type")
FlagReason = strawberry.enum(models.FlagReason, description="Product flag reason")
FlagStatus = strawberry.enum(models.FlagStatus, description="Product flag moderation status")
Sentiment = strawberry.enum(SentimentEnum, description="Review sentiment bucket")
SortOrder = strawberry.enum(SortOrderEnum, description="Sort direction")


# =============================================================================
# USERS
# =============================================================================

@strawberry.type
class User:
    id: int
    email: str
    username: str
    role: Role
    bio: Optional[str]
    profile_picture: Optional[str]
    created_at: DateTime
    last_active: Optional[DateTime]

    @classmethod
    def from_model(cls, u: models.User) -> "User":
        return cls(
            id=u.id,
            email=u.email,
            username=u.username,
            role=u.role,
            bio=u.bio,
            profile_picture=u.profile_picture,
            created_at=u.created_at,
            last_active=u.last_active,
        )

    @strawberry.field
    async def product_count(self, info: strawberry.Info) -> int:
        """Number of products this user has listed"""
        async with db_session(info) as db:
            return await user_queries.get_user_product_count(db, self.id)


@strawberry.type
class Language:
    id: int
    code: str
    name: str

    @classmethod
    def from_model(cls, lang: models.Language) -> "Language":
        return cls(id=lang.id, code=lang.code, name=lang.name)

    @strawberry.field
    async def users(self, info: strawberry.Info) -> List[User]:
        """Users who speak this language"""
        async with db_session(info) as db:
            return [User.from_model(u) for u in await user_queries.get_language_speakers(db, self.id)]


@strawberry.type
class UserRating:
    id: int
    rater_id: int
    rated_id: int
    rating: int
    created_at: DateTime

    @classmethod
    def from_model(cls, r: models.UserRating) -> "UserRating":
        return cls(id=r.id, rater_id=r.rater_id, rated_id=r.rated_id, rating=r.rating, created_at=r.created_at)


@strawberry.type
class UserActivity:
    id: int
    user_id: int
    action: int
    created_at: DateTime

    @classmethod
    def from_model(cls, a: models.UserActivity) -> "UserActivity":
        return cls(id=a.id, user_id=a.user_id, action=a.action, created_at=a.created_at)


@strawberry.type
class Notification:
    id: int
    user_id: int
    message: str
    read: bool
    created_at: DateTime

    @classmethod
    def from_model(cls, n: models.Notification) -> "Notification":
        return cls(id=n.id, user_id=n.user_id, message=n.message, read=bool(n.read), created_at=n.created_at)


@strawberry.type
class SearchHistory:
    id: int
    user_id: int
    query: str
    created_at: DateTime
    user: Optional[User]

    @classmethod
    def from_model(cls, s: models.SearchHistory) -> "SearchHistory":
        return cls(
            id=s.id,
            user_id=s.user_id,
            query=s.query,
            created_at=s.created_at,
            user=User.from_model(s.user) if s.user else None,
        )


@strawberry.type
class SavedSearch:
    id: int
    user_id: int
    query: str
    created_at: DateTime

    @classmethod
    def from_model(cls, s: models.SavedSearch) -> "SavedSearch":
        return cls(id=s.id, user_id=s.user_id, query=s.query, created_at=s.created_at)


@strawberry.type
class Message:
    id: int
    sender_id: int
    receiver_id: int
    content: str
    created_at: DateTime

    @classmethod
    def from_model(cls, m: models.Message) -> "Message":
        return cls(
            id=m.id,
            sender_id=m.sender_id,
            receiver_id=m.receiver_id,
            content=m.content,
            created_at=m.created_at,
        )


@strawberry.type
class MessageReaction:
    id: int
    message_id: int
    user_id: int
    type: ReactionType
    created_at: DateTime

    @classmethod
    def from_model(cls, r: models.MessageReaction) -> "MessageReaction":
        return cls(id=r.id, message_id=r.message_id, user_id=r.user_id, type=r.type, created_at=r.created_at)


@strawberry.type
class Badge:
    id: int
    name: str
    description: str
    created_at: DateTime


@strawberry.type
class UserBadge:
    id: int
    user_id: int
    badge_id: int
    created_at: DateTime
    badge: Optional[Badge]

    @classmethod
    def from_model(cls, ub: models.UserBadge) -> "UserBadge":
        badge = None
        if ub.badge is not None:
            badge = Badge(
                id=ub.badge.id,
                name=ub.badge.name,
                description=ub.badge.description,
                created_at=ub.badge.created_at,
            )
        return cls(id=ub.id, user_id=ub.user_id, badge_id=ub.badge_id, created_at=ub.created_at, badge=badge)


@strawberry.type
class Achievement:
    id: int
    name: str
    description: str
    criteria: JSON
    created_at: DateTime


@strawberry.type
class UserAchievement:
    id: int
    user_id: int
    achievement_id: int
    created_at: DateTime
    achievement: Optional[Achievement]

    @classmethod
    def from_model(cls, ua: models.UserAchievement) -> "UserAchievement":
        achievement = None
        if ua.achievement is not None:
            a = ua.achievement
            achievement = Achievement(
                id=a.id, name=a.name, description=a.description, criteria=a.criteria, created_at=a.created_at
            )
        return cls(
            id=ua.id,
            user_id=ua.user_id,
            achievement_id=ua.achievement_id,
            created_at=ua.created_at,
            achievement=achievement,
        )


# =============================================================================
# CATALOG
# =============================================================================

@strawberry.type
class Product:
    id: int
    seller_id: int
    title: str
    description: str
    price: float
    cost: Optional[float]
    stock: int
    quantity: int
    condition: Condition
    has_raffle: bool
    created_at: DateTime
    listed_at: DateTime
    sold_at: Optional[DateTime]
    release_date: Optional[DateTime]

    @classmethod
    def from_model(cls, p: models.Product) -> "Product":
        return cls(
            id=p.id,
            seller_id=p.seller_id,
            title=p.title,
            description=p.description or "",
            price=float(p.price),
            cost=float(p.cost) if p.cost is not None else None,
            stock=p.stock or 0,
            quantity=p.quantity or 0,
            condition=p.condition,
            has_raffle=bool(p.has_raffle),
            created_at=p.created_at,
            listed_at=p.listed_at,
            sold_at=p.sold_at,
            release_date=p.release_date,
        )

    @strawberry.field
    async def seller(self, info: strawberry.Info) -> Optional[User]:
        """Resolve the seller of this product"""
        async with db_session(info) as db:
            seller = await db.get(models.User, self.seller_id)
            return User.from_model(seller) if seller else None


@strawberry.type
class ProductMargin:
    product: Product
    margin: float


@strawberry.type
class Review:
    id: int
    product_id: int
    user_id: int
    content: str
    percentage: float
    created_at: DateTime

    @classmethod
    def from_model(cls, r: models.Review) -> "Review":
        return cls(
            id=r.id,
            product_id=r.product_id,
            user_id=r.user_id,
            content=r.content,
            percentage=float(r.percentage),
            created_at=r.created_at,
        )

    @strawberry.field
    def sentiment(self) -> Sentiment:
        return classify(self.content)


@strawberry.type
class FeedbackSummary:
    product_id: int
    total_reviews: int
    average_rating: float
    positive: int
    negative: int
    neutral: int


@strawberry.type
class Sale:
    id: int
    product_id: int
    user_id: int
    quantity: int
    total_price: float
    sold_at: DateTime

    @classmethod
    def from_model(cls, s: models.Sale) -> "Sale":
        return cls(
            id=s.id,
            product_id=s.product_id,
            user_id=s.user_id,
            quantity=s.quantity,
            total_price=float(s.total_price),
            sold_at=s.sold_at,
        )


@strawberry.type
class SalesSummary:
    total_revenue: float
    total_quantity: int
    sale_count: int
    average_sale_value: float


@strawberry.type
class DailySales:
    date: Date
    revenue: float
    quantity: int
    sale_count: int


@strawberry.type
class ProductFlag:
    id: int
    product_id: int
    user_id: int
    reason: FlagReason
    status: FlagStatus
    created_at: DateTime

    @classmethod
    def from_model(cls, f: models.ProductFlag) -> "ProductFlag":
        return cls(
            id=f.id,
            product_id=f.product_id,
            user_id=f.user_id,
            reason=f.reason,
            status=f.status,
            created_at=f.created_at,
        )


# =============================================================================
# RAFFLES
# =============================================================================

@strawberry.type
class RaffleEntry:
    id: int
    user_id: int
    raffle_id: int
    result: RaffleResult
    created_at: DateTime

    @classmethod
    def from_model(cls, e: models.RaffleEntry) -> "RaffleEntry":
        return cls(id=e.id, user_id=e.user_id, raffle_id=e.raffle_id, result=e.result, created_at=e.created_at)


@strawberry.type
class Raffle:
    id: int
    product_id: int
    title: str
    description: str
    type: RaffleType
    status: RaffleStatus
    ends_at: DateTime
    created_at: DateTime

    @classmethod
    def from_model(cls, r: models.Raffle) -> "Raffle":
        return cls(
            id=r.id,
            product_id=r.product_id,
            title=r.title or "",
            description=r.description or "",
            type=r.type,
            status=r.status,
            ends_at=r.ends_at,
            created_at=r.created_at,
        )

    @strawberry.field
    async def entries(self, info: strawberry.Info) -> List[RaffleEntry]:
        """Resolve entries submitted for this raffle"""
        async with db_session(info) as db:
            rows = await raffle_queries.get_raffle_entries(db, self.id)
            return [RaffleEntry.from_model(e) for e in rows]


@strawberry.type
class RaffleStatistics:
    raffle_id: int
    total_entries: int
    won: int
    lost: int
    pending: int


# =============================================================================
# INPUTS
# =============================================================================

@strawberry.input
class CreateUserInput:
    email: str
    username: str
    password: str
    phrase: Optional[str] = None
