"""
Database Models - Marketplace Entities

Declarative SQLAlchemy models for the marketplace read model. The schema is
owned by the relational store; this module only maps it.

Core entities:
- User: accounts and their social graph (follows, ratings, badges, languages)
- Product: listings with reviews, sales, flags, favorites and views
- Raffle / RaffleEntry: product raffles and user participation
- Review / Sale: feedback and completed purchases
"""

from datetime import datetime
from enum import Enum
from typing import Optional, List

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Enum as SQLEnum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


# =============================================================================
# ENUMERATIONS
# =============================================================================

class Role(str, Enum):
    """User role enumeration"""
    ADMIN = "ADMIN"
    MODERATOR = "MODERATOR"
    USER = "USER"


class Condition(str, Enum):
    """Product condition enumeration"""
    BRAND_NEW = "BRAND_NEW"
    TRIED_ON = "TRIED_ON"
    NEW_WITH_DEFECTS = "NEW_WITH_DEFECTS"
    NEW_WITH_TAGS = "NEW_WITH_TAGS"
    NEW_WITHOUT_TAGS = "NEW_WITHOUT_TAGS"
    USED = "USED"
    IN_BOX = "IN_BOX"
    NO_BOX = "NO_BOX"


class RaffleType(str, Enum):
    """How a raffle is entered"""
    IN_APP = "IN_APP"
    ONLINE = "ONLINE"
    IN_STORE = "IN_STORE"


class RaffleStatus(str, Enum):
    """Raffle lifecycle status"""
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    CANCELED = "CANCELED"


class RaffleResult(str, Enum):
    """Outcome of a raffle entry; PENDING until the raffle closes"""
    WON = "WON"
    LOST = "LOST"
    PENDING = "PENDING"


class ReactionType(str, Enum):
    """Message reaction types"""
    LIKE = "LIKE"
    LOVE = "LOVE"
    WOW = "WOW"
    SAD = "SAD"
    ANGRY = "ANGRY"
    CHEER = "CHEER"
    LAUGH = "LAUGH"
    SURPRISE = "SURPRISE"
    DISLIKE = "DISLIKE"
    CONFUSED = "CONFUSED"
    GRATEFUL = "GRATEFUL"
    APPLAUD = "APPLAUD"


class FlagReason(str, Enum):
    """Why a product was flagged"""
    COUNTERFEIT = "COUNTERFEIT"
    PROHIBITED_ITEM = "PROHIBITED_ITEM"
    MISLEADING = "MISLEADING"
    SPAM = "SPAM"
    OFFENSIVE = "OFFENSIVE"
    OTHER = "OTHER"


class FlagStatus(str, Enum):
    """Moderation status of a product flag"""
    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    RESOLVED = "RESOLVED"
    DISMISSED = "DISMISSED"


# =============================================================================
# ASSOCIATION TABLES
# =============================================================================

product_favorites = Table(
    "product_favorites",
    Base.metadata,
    Column("user_id", ForeignKey("users.id"), primary_key=True),
    Column("product_id", ForeignKey("products.id"), primary_key=True),
)

product_views = Table(
    "product_views",
    Base.metadata,
    Column("user_id", ForeignKey("users.id"), primary_key=True),
    Column("product_id", ForeignKey("products.id"), primary_key=True),
)

user_languages = Table(
    "user_languages",
    Base.metadata,
    Column("user_id", ForeignKey("users.id"), primary_key=True),
    Column("language_id", ForeignKey("languages.id"), primary_key=True),
)


# =============================================================================
# USERS
# =============================================================================

class User(Base):
    """Marketplace account"""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)  # argon2 hash
    role: Mapped[Role] = mapped_column(SQLEnum(Role), default=Role.USER, nullable=False)
    bio: Mapped[Optional[str]] = mapped_column(Text)
    profile_picture: Mapped[Optional[str]] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    last_active: Mapped[Optional[datetime]] = mapped_column(DateTime)

    # Relationships
    products: Mapped[List["Product"]] = relationship(back_populates="seller")
    favorites: Mapped[List["Product"]] = relationship(
        secondary=product_favorites, back_populates="favorited_by"
    )
    viewed_products: Mapped[List["Product"]] = relationship(
        secondary=product_views, back_populates="viewed_by"
    )
    reviews: Mapped[List["Review"]] = relationship(back_populates="user")
    raffle_entries: Mapped[List["RaffleEntry"]] = relationship(back_populates="user")
    languages: Mapped[List["Language"]] = relationship(
        secondary=user_languages, back_populates="users"
    )

    __table_args__ = (
        Index("ix_users_role", "role"),
        Index("ix_users_created_at", "created_at"),
    )


class Language(Base):
    """Language a user speaks, keyed by ISO code"""
    __tablename__ = "languages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    users: Mapped[List["User"]] = relationship(
        secondary=user_languages, back_populates="languages"
    )


class UserFollow(Base):
    """Directed follow edge between two users"""
    __tablename__ = "user_follows"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    follower_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    followed_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    follower: Mapped["User"] = relationship(foreign_keys=[follower_id])
    followed: Mapped["User"] = relationship(foreign_keys=[followed_id])

    __table_args__ = (
        UniqueConstraint("follower_id", "followed_id", name="uq_user_follow"),
    )


class UserRating(Base):
    """Rating one user gives another"""
    __tablename__ = "user_ratings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    rater_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    rated_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())


class UserActivity(Base):
    """Activity log row"""
    __tablename__ = "user_activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    action: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())


class Notification(Base):
    """User notification"""
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    read: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())


class SearchHistory(Base):
    """Search performed by a user"""
    __tablename__ = "search_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    query: Mapped[str] = mapped_column(String(500), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    user: Mapped["User"] = relationship()


class SavedSearch(Base):
    """Search a user saved for later"""
    __tablename__ = "saved_searches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    query: Mapped[str] = mapped_column(String(500), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())


class Message(Base):
    """Direct message between two users"""
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sender_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    receiver_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    reactions: Mapped[List["MessageReaction"]] = relationship(back_populates="message")


class MessageReaction(Base):
    """Reaction to a message"""
    __tablename__ = "message_reactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    message_id: Mapped[int] = mapped_column(ForeignKey("messages.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    type: Mapped[ReactionType] = mapped_column(SQLEnum(ReactionType), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    message: Mapped["Message"] = relationship(back_populates="reactions")


class Badge(Base):
    """Badge definition"""
    __tablename__ = "badges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())


class UserBadge(Base):
    """Badge earned by a user"""
    __tablename__ = "user_badges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    badge_id: Mapped[int] = mapped_column(ForeignKey("badges.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    badge: Mapped["Badge"] = relationship()


class Achievement(Base):
    """Achievement definition"""
    __tablename__ = "achievements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    criteria: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())


class UserAchievement(Base):
    """Achievement earned by a user"""
    __tablename__ = "user_achievements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    achievement_id: Mapped[int] = mapped_column(ForeignKey("achievements.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    achievement: Mapped["Achievement"] = relationship()


# =============================================================================
# CATALOG
# =============================================================================

class Product(Base):
    """
    Product listing

    ``cost`` is optional; margin computations only consider products whose
    cost is strictly positive.
    """
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    seller_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")

    # Pricing and inventory
    price: Mapped[float] = mapped_column(Float, nullable=False)
    cost: Mapped[Optional[float]] = mapped_column(Float)
    stock: Mapped[int] = mapped_column(Integer, default=0)
    quantity: Mapped[int] = mapped_column(Integer, default=0)

    condition: Mapped[Condition] = mapped_column(SQLEnum(Condition), default=Condition.BRAND_NEW)
    has_raffle: Mapped[bool] = mapped_column(Boolean, default=False)

    # Dates
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    listed_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    sold_at: Mapped[Optional[datetime]] = mapped_column(DateTime)
    release_date: Mapped[Optional[datetime]] = mapped_column(DateTime)

    # Relationships
    seller: Mapped["User"] = relationship(back_populates="products")
    favorited_by: Mapped[List["User"]] = relationship(
        secondary=product_favorites, back_populates="favorites"
    )
    viewed_by: Mapped[List["User"]] = relationship(
        secondary=product_views, back_populates="viewed_products"
    )
    reviews: Mapped[List["Review"]] = relationship(back_populates="product")
    sales: Mapped[List["Sale"]] = relationship(back_populates="product")
    raffles: Mapped[List["Raffle"]] = relationship(back_populates="product")
    flags: Mapped[List["ProductFlag"]] = relationship(back_populates="product")

    __table_args__ = (
        Index("ix_products_seller", "seller_id"),
        Index("ix_products_price", "price"),
        Index("ix_products_created_at", "created_at"),
    )


class Review(Base):
    """Product review; ``percentage`` is a 0-100 rating"""
    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    percentage: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    product: Mapped["Product"] = relationship(back_populates="reviews")
    user: Mapped["User"] = relationship(back_populates="reviews")

    __table_args__ = (
        Index("ix_reviews_product", "product_id"),
        Index("ix_reviews_created_at", "created_at"),
    )


class Sale(Base):
    """Completed purchase of a product"""
    __tablename__ = "sales"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price: Mapped[float] = mapped_column(Float, nullable=False)
    sold_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    product: Mapped["Product"] = relationship(back_populates="sales")

    __table_args__ = (
        Index("ix_sales_product", "product_id"),
        Index("ix_sales_sold_at", "sold_at"),
    )


class ProductFlag(Base):
    """Moderation flag raised against a product"""
    __tablename__ = "product_flags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    reason: Mapped[FlagReason] = mapped_column(SQLEnum(FlagReason), nullable=False)
    status: Mapped[FlagStatus] = mapped_column(SQLEnum(FlagStatus), default=FlagStatus.PENDING)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    product: Mapped["Product"] = relationship(back_populates="flags")


# =============================================================================
# RAFFLES
# =============================================================================

class Raffle(Base):
    """Raffle for the right to buy a product"""
    __tablename__ = "raffles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"), nullable=False)
    title: Mapped[str] = mapped_column(String(200), default="")
    description: Mapped[str] = mapped_column(Text, default="")
    type: Mapped[RaffleType] = mapped_column(SQLEnum(RaffleType), nullable=False)
    status: Mapped[RaffleStatus] = mapped_column(SQLEnum(RaffleStatus), default=RaffleStatus.OPEN)
    ends_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    product: Mapped["Product"] = relationship(back_populates="raffles")
    entries: Mapped[List["RaffleEntry"]] = relationship(back_populates="raffle")

    __table_args__ = (
        Index("ix_raffles_status", "status"),
        Index("ix_raffles_ends_at", "ends_at"),
    )


class RaffleEntry(Base):
    """A user's participation in a raffle"""
    __tablename__ = "raffle_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    raffle_id: Mapped[int] = mapped_column(ForeignKey("raffles.id"), nullable=False)
    result: Mapped[RaffleResult] = mapped_column(SQLEnum(RaffleResult), default=RaffleResult.PENDING)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    user: Mapped["User"] = relationship(back_populates="raffle_entries")
    raffle: Mapped["Raffle"] = relationship(back_populates="entries")

    __table_args__ = (
        Index("ix_raffle_entries_raffle", "raffle_id"),
        Index("ix_raffle_entries_user", "user_id"),
    )
