"""
GraphQL Schema - Marketplace Read Model

Root Query and Mutation types. Each domain contributes its own query type,
merged into a single root; every resolver opens one session through the
request context and delegates to ``marketplace.queries``.
"""

from typing import List, Optional

import strawberry
from strawberry.fastapi import GraphQLRouter
from strawberry.tools import merge_types

from marketplace.accounts import create_user
from marketplace.config import Settings, get_settings
from marketplace.queries import flags, products, raffles, reviews, sales, users
from marketplace.serving.api.graphql.context import db_session, get_context
from marketplace.serving.api.graphql.extensions import ErrorCodeExtension
from marketplace.serving.api.graphql.scalars import DateTime
from marketplace.serving.api.graphql.types import (
    Condition,
    CreateUserInput,
    DailySales,
    FeedbackSummary,
    FlagReason,
    FlagStatus,
    Language,
    Message,
    MessageReaction,
    Notification,
    Product,
    ProductFlag,
    ProductMargin,
    Raffle,
    RaffleEntry,
    RaffleResult,
    RaffleStatistics,
    RaffleStatus,
    RaffleType,
    Review,
    Role,
    Sale,
    SalesSummary,
    SavedSearch,
    SearchHistory,
    Sentiment,
    SortOrder,
    User,
    UserAchievement,
    UserActivity,
    UserBadge,
    UserRating,
)


# =============================================================================
# USER QUERIES
# =============================================================================

@strawberry.type
class UserQuery:
    @strawberry.field
    async def get_user_by_id(self, info: strawberry.Info, id: int) -> User:
        async with db_session(info) as db:
            return User.from_model(await users.get_user_by_id(db, id))

    @strawberry.field
    async def get_all_users(self, info: strawberry.Info) -> List[User]:
        async with db_session(info) as db:
            return [User.from_model(u) for u in await users.get_all_users(db)]

    @strawberry.field
    async def get_recent_users(self, info: strawberry.Info, limit: int) -> List[User]:
        """Most recently registered users"""
        async with db_session(info) as db:
            return [User.from_model(u) for u in await users.get_recent_users(db, limit)]

    @strawberry.field
    async def get_users_by_registration_date_range(
        self, info: strawberry.Info, start_date: DateTime, end_date: DateTime
    ) -> List[User]:
        async with db_session(info) as db:
            rows = await users.get_users_by_registration_date_range(db, start_date, end_date)
            return [User.from_model(u) for u in rows]

    @strawberry.field
    async def get_user_profile_info(self, info: strawberry.Info, user_id: int) -> User:
        async with db_session(info) as db:
            return User.from_model(await users.get_user_profile_info(db, user_id))

    @strawberry.field
    async def get_user_language(self, info: strawberry.Info, user_id: int) -> List[Language]:
        """Languages spoken by the user"""
        async with db_session(info) as db:
            return [Language.from_model(lang) for lang in await users.get_user_language(db, user_id)]

    @strawberry.field
    async def get_users_by_role(self, info: strawberry.Info, role: Role) -> List[User]:
        async with db_session(info) as db:
            return [User.from_model(u) for u in await users.get_users_by_role(db, role)]

    @strawberry.field
    async def get_admin_users(self, info: strawberry.Info) -> List[User]:
        async with db_session(info) as db:
            return [User.from_model(u) for u in await users.get_users_by_role(db, Role.ADMIN)]

    @strawberry.field
    async def get_moderator_users(self, info: strawberry.Info) -> List[User]:
        async with db_session(info) as db:
            return [User.from_model(u) for u in await users.get_users_by_role(db, Role.MODERATOR)]

    @strawberry.field
    async def get_regular_users(self, info: strawberry.Info) -> List[User]:
        async with db_session(info) as db:
            return [User.from_model(u) for u in await users.get_users_by_role(db, Role.USER)]

    @strawberry.field
    async def get_user_roles(self, info: strawberry.Info, user_id: int) -> List[Role]:
        async with db_session(info) as db:
            return await users.get_user_roles(db, user_id)

    @strawberry.field
    def get_all_roles(self) -> List[Role]:
        return users.get_all_roles()

    @strawberry.field
    async def get_user_role_statistics(self, info: strawberry.Info) -> List[List[str]]:
        """User count per role as ``[role, count]`` pairs"""
        async with db_session(info) as db:
            stats = await users.get_user_role_statistics(db)
            return [[role.value, str(count)] for role, count in stats]

    @strawberry.field
    async def get_active_users(self, info: strawberry.Info) -> List[User]:
        """Users active within the configured window"""
        async with db_session(info) as db:
            return [User.from_model(u) for u in await users.get_active_users(db)]

    @strawberry.field
    async def get_user_products(self, info: strawberry.Info, user_id: int) -> List[Product]:
        async with db_session(info) as db:
            return [Product.from_model(p) for p in await users.get_user_products(db, user_id)]

    @strawberry.field
    async def get_user_product_count(self, info: strawberry.Info, user_id: int) -> int:
        async with db_session(info) as db:
            return await users.get_user_product_count(db, user_id)

    @strawberry.field
    async def get_user_favorites(self, info: strawberry.Info, user_id: int) -> List[Product]:
        async with db_session(info) as db:
            return [Product.from_model(p) for p in await users.get_user_favorites(db, user_id)]

    @strawberry.field
    async def get_user_viewed_products(self, info: strawberry.Info, user_id: int) -> List[Product]:
        async with db_session(info) as db:
            return [Product.from_model(p) for p in await users.get_user_viewed_products(db, user_id)]

    @strawberry.field
    async def get_user_reviews(self, info: strawberry.Info, user_id: int) -> List[Review]:
        async with db_session(info) as db:
            return [Review.from_model(r) for r in await users.get_user_reviews(db, user_id)]

    @strawberry.field
    async def get_user_followers(self, info: strawberry.Info, user_id: int) -> List[User]:
        async with db_session(info) as db:
            return [User.from_model(u) for u in await users.get_user_followers(db, user_id)]

    @strawberry.field
    async def get_user_following(self, info: strawberry.Info, user_id: int) -> List[User]:
        async with db_session(info) as db:
            return [User.from_model(u) for u in await users.get_user_following(db, user_id)]

    @strawberry.field
    async def get_user_follower_count(self, info: strawberry.Info, user_id: int) -> int:
        async with db_session(info) as db:
            return await users.get_user_follower_count(db, user_id)

    @strawberry.field
    async def get_user_following_count(self, info: strawberry.Info, user_id: int) -> int:
        async with db_session(info) as db:
            return await users.get_user_following_count(db, user_id)

    @strawberry.field
    async def get_user_ratings(self, info: strawberry.Info, user_id: int) -> List[UserRating]:
        """Ratings the user gave or received"""
        async with db_session(info) as db:
            return [UserRating.from_model(r) for r in await users.get_user_ratings(db, user_id)]

    @strawberry.field
    async def get_user_ratings_given(self, info: strawberry.Info, user_id: int) -> List[UserRating]:
        async with db_session(info) as db:
            return [UserRating.from_model(r) for r in await users.get_user_ratings_given(db, user_id)]

    @strawberry.field
    async def get_user_ratings_received(self, info: strawberry.Info, user_id: int) -> List[UserRating]:
        async with db_session(info) as db:
            return [UserRating.from_model(r) for r in await users.get_user_ratings_received(db, user_id)]

    @strawberry.field
    async def get_user_sent_messages(self, info: strawberry.Info, user_id: int) -> List[Message]:
        async with db_session(info) as db:
            return [Message.from_model(m) for m in await users.get_user_sent_messages(db, user_id)]

    @strawberry.field
    async def get_user_received_messages(self, info: strawberry.Info, user_id: int) -> List[Message]:
        async with db_session(info) as db:
            return [Message.from_model(m) for m in await users.get_user_received_messages(db, user_id)]

    @strawberry.field
    async def get_message_reactions(self, info: strawberry.Info, message_id: int) -> List[MessageReaction]:
        async with db_session(info) as db:
            rows = await users.get_message_reactions(db, message_id)
            return [MessageReaction.from_model(r) for r in rows]

    @strawberry.field
    async def get_user_activity_log(self, info: strawberry.Info, user_id: int) -> List[UserActivity]:
        async with db_session(info) as db:
            return [UserActivity.from_model(a) for a in await users.get_user_activity_log(db, user_id)]

    @strawberry.field
    async def get_user_activity_count(self, info: strawberry.Info, user_id: int) -> int:
        async with db_session(info) as db:
            return await users.get_user_activity_count(db, user_id)

    @strawberry.field
    async def get_user_search_history(self, info: strawberry.Info, user_id: int) -> List[SearchHistory]:
        async with db_session(info) as db:
            rows = await users.get_user_search_history(db, user_id)
            return [SearchHistory.from_model(s) for s in rows]

    @strawberry.field
    async def get_user_saved_searches(self, info: strawberry.Info, user_id: int) -> List[SavedSearch]:
        async with db_session(info) as db:
            return [SavedSearch.from_model(s) for s in await users.get_user_saved_searches(db, user_id)]

    @strawberry.field
    async def get_user_notifications(self, info: strawberry.Info, user_id: int) -> List[Notification]:
        async with db_session(info) as db:
            return [Notification.from_model(n) for n in await users.get_user_notifications(db, user_id)]

    @strawberry.field
    async def get_user_unread_notifications(self, info: strawberry.Info, user_id: int) -> List[Notification]:
        async with db_session(info) as db:
            rows = await users.get_user_unread_notifications(db, user_id)
            return [Notification.from_model(n) for n in rows]

    @strawberry.field
    async def get_user_badges(self, info: strawberry.Info, user_id: int) -> List[UserBadge]:
        async with db_session(info) as db:
            return [UserBadge.from_model(b) for b in await users.get_user_badges(db, user_id)]

    @strawberry.field
    async def get_user_achievements(self, info: strawberry.Info, user_id: int) -> List[UserAchievement]:
        async with db_session(info) as db:
            rows = await users.get_user_achievements(db, user_id)
            return [UserAchievement.from_model(a) for a in rows]


# =============================================================================
# PRODUCT QUERIES
# =============================================================================

@strawberry.type
class ProductQuery:
    @strawberry.field
    async def get_product_by_id(self, info: strawberry.Info, id: int) -> Product:
        async with db_session(info) as db:
            return Product.from_model(await products.get_product_by_id(db, id))

    @strawberry.field
    async def get_all_products(
        self,
        info: strawberry.Info,
        sort: Optional[SortOrder] = None,
        limit: Optional[int] = None,
    ) -> List[Product]:
        """All products by creation date, newest first unless ``sort`` says otherwise"""
        async with db_session(info) as db:
            rows = await products.get_all_products(db, order=sort or SortOrder.DESC, limit=limit)
            return [Product.from_model(p) for p in rows]

    @strawberry.field
    async def get_recent_products(self, info: strawberry.Info, limit: int) -> List[Product]:
        async with db_session(info) as db:
            return [Product.from_model(p) for p in await products.get_recent_products(db, limit)]

    @strawberry.field
    async def get_products_by_price_range(
        self,
        info: strawberry.Info,
        min_price: float,
        max_price: float,
        sort: Optional[SortOrder] = None,
    ) -> List[Product]:
        async with db_session(info) as db:
            rows = await products.get_products_by_price_range(
                db, min_price, max_price, order=sort or SortOrder.ASC
            )
            return [Product.from_model(p) for p in rows]

    @strawberry.field
    async def get_products_listed_between(
        self, info: strawberry.Info, start_date: DateTime, end_date: DateTime
    ) -> List[Product]:
        async with db_session(info) as db:
            rows = await products.get_products_listed_between(db, start_date, end_date)
            return [Product.from_model(p) for p in rows]

    @strawberry.field
    async def get_products_by_condition(self, info: strawberry.Info, condition: Condition) -> List[Product]:
        async with db_session(info) as db:
            return [Product.from_model(p) for p in await products.get_products_by_condition(db, condition)]

    @strawberry.field
    async def get_products_with_raffles(self, info: strawberry.Info) -> List[Product]:
        async with db_session(info) as db:
            return [Product.from_model(p) for p in await products.get_products_with_raffles(db)]

    @strawberry.field
    async def get_low_stock_products(self, info: strawberry.Info, threshold: int) -> List[Product]:
        async with db_session(info) as db:
            return [Product.from_model(p) for p in await products.get_low_stock_products(db, threshold)]

    @strawberry.field
    async def get_most_viewed_products(self, info: strawberry.Info, limit: int) -> List[Product]:
        async with db_session(info) as db:
            return [Product.from_model(p) for p in await products.get_most_viewed_products(db, limit)]

    @strawberry.field
    async def get_most_favorited_products(self, info: strawberry.Info, limit: int) -> List[Product]:
        async with db_session(info) as db:
            return [Product.from_model(p) for p in await products.get_most_favorited_products(db, limit)]

    @strawberry.field
    async def get_products_by_rating_count(self, info: strawberry.Info, min_rating_count: int) -> List[Product]:
        async with db_session(info) as db:
            rows = await products.get_products_by_rating_count(db, min_rating_count)
            return [Product.from_model(p) for p in rows]

    @strawberry.field
    async def get_products_by_profit_margin(
        self, info: strawberry.Info, min_margin: Optional[float] = None
    ) -> List[ProductMargin]:
        """Products with a positive cost, highest margin first"""
        async with db_session(info) as db:
            ranked = await products.get_products_by_profit_margin(db, min_margin)
            return [ProductMargin(product=Product.from_model(p), margin=m) for p, m in ranked]


# =============================================================================
# REVIEW QUERIES
# =============================================================================

@strawberry.type
class ReviewQuery:
    @strawberry.field
    async def get_product_reviews(self, info: strawberry.Info, product_id: int) -> List[Review]:
        async with db_session(info) as db:
            return [Review.from_model(r) for r in await reviews.get_product_reviews(db, product_id)]

    @strawberry.field
    async def get_reviews_by_date_range(
        self, info: strawberry.Info, start_date: DateTime, end_date: DateTime
    ) -> List[Review]:
        async with db_session(info) as db:
            rows = await reviews.get_reviews_by_date_range(db, start_date, end_date)
            return [Review.from_model(r) for r in rows]

    @strawberry.field
    async def get_product_average_rating(self, info: strawberry.Info, product_id: int) -> float:
        async with db_session(info) as db:
            return await reviews.get_product_average_rating(db, product_id)

    @strawberry.field
    async def get_product_feedback_summary(self, info: strawberry.Info, product_id: int) -> FeedbackSummary:
        async with db_session(info) as db:
            summary = await reviews.get_product_feedback_summary(db, product_id)
            return FeedbackSummary(
                product_id=summary.product_id,
                total_reviews=summary.total_reviews,
                average_rating=summary.average_rating,
                positive=summary.positive,
                negative=summary.negative,
                neutral=summary.neutral,
            )

    @strawberry.field
    async def get_review_sentiment(self, info: strawberry.Info, review_id: int) -> Sentiment:
        async with db_session(info) as db:
            return await reviews.get_review_sentiment(db, review_id)


# =============================================================================
# RAFFLE QUERIES
# =============================================================================

@strawberry.type
class RaffleQuery:
    @strawberry.field
    async def get_raffle_by_id(self, info: strawberry.Info, id: int) -> Raffle:
        async with db_session(info) as db:
            return Raffle.from_model(await raffles.get_raffle_by_id(db, id))

    @strawberry.field
    async def get_raffles_by_status(self, info: strawberry.Info, status: RaffleStatus) -> List[Raffle]:
        async with db_session(info) as db:
            return [Raffle.from_model(r) for r in await raffles.get_raffles_by_status(db, status)]

    @strawberry.field
    async def get_raffles_by_type(self, info: strawberry.Info, type: RaffleType) -> List[Raffle]:
        async with db_session(info) as db:
            return [Raffle.from_model(r) for r in await raffles.get_raffles_by_type(db, type)]

    @strawberry.field
    async def get_raffles_ending_between(
        self, info: strawberry.Info, start_date: DateTime, end_date: DateTime
    ) -> List[Raffle]:
        async with db_session(info) as db:
            rows = await raffles.get_raffles_ending_between(db, start_date, end_date)
            return [Raffle.from_model(r) for r in rows]

    @strawberry.field
    async def get_raffle_entries(self, info: strawberry.Info, raffle_id: int) -> List[RaffleEntry]:
        async with db_session(info) as db:
            return [RaffleEntry.from_model(e) for e in await raffles.get_raffle_entries(db, raffle_id)]

    @strawberry.field
    async def get_raffle_entry_count(self, info: strawberry.Info, raffle_id: int) -> int:
        async with db_session(info) as db:
            return await raffles.get_raffle_entry_count(db, raffle_id)

    @strawberry.field
    async def get_raffle_winners(self, info: strawberry.Info, raffle_id: int) -> List[RaffleEntry]:
        async with db_session(info) as db:
            return [RaffleEntry.from_model(e) for e in await raffles.get_raffle_winners(db, raffle_id)]

    @strawberry.field
    async def get_entries_by_result(
        self, info: strawberry.Info, raffle_id: int, result: RaffleResult
    ) -> List[RaffleEntry]:
        async with db_session(info) as db:
            rows = await raffles.get_entries_by_result(db, raffle_id, result)
            return [RaffleEntry.from_model(e) for e in rows]

    @strawberry.field
    async def get_user_raffle_entries(self, info: strawberry.Info, user_id: int) -> List[RaffleEntry]:
        async with db_session(info) as db:
            return [RaffleEntry.from_model(e) for e in await raffles.get_user_raffle_entries(db, user_id)]

    @strawberry.field
    async def get_user_raffle_winning_percentage(self, info: strawberry.Info, user_id: int) -> float:
        async with db_session(info) as db:
            return await raffles.get_user_raffle_winning_percentage(db, user_id)

    @strawberry.field
    async def get_user_raffle_participation_rate(self, info: strawberry.Info, user_id: int) -> float:
        async with db_session(info) as db:
            return await raffles.get_user_raffle_participation_rate(db, user_id)

    @strawberry.field
    async def get_raffles_by_entry_count(self, info: strawberry.Info, min_entry_count: int) -> List[Raffle]:
        async with db_session(info) as db:
            rows = await raffles.get_raffles_by_entry_count(db, min_entry_count)
            return [Raffle.from_model(r) for r in rows]

    @strawberry.field
    async def get_raffle_statistics(self, info: strawberry.Info, raffle_id: int) -> RaffleStatistics:
        async with db_session(info) as db:
            stats = await raffles.get_raffle_statistics(db, raffle_id)
            return RaffleStatistics(
                raffle_id=stats.raffle_id,
                total_entries=stats.total_entries,
                won=stats.won,
                lost=stats.lost,
                pending=stats.pending,
            )


# =============================================================================
# SALES AND FLAG QUERIES
# =============================================================================

@strawberry.type
class SalesQuery:
    @strawberry.field
    async def get_product_sales(self, info: strawberry.Info, product_id: int) -> List[Sale]:
        async with db_session(info) as db:
            return [Sale.from_model(s) for s in await sales.get_product_sales(db, product_id)]

    @strawberry.field
    async def get_sales_by_date_range(
        self, info: strawberry.Info, start_date: DateTime, end_date: DateTime
    ) -> List[Sale]:
        async with db_session(info) as db:
            return [Sale.from_model(s) for s in await sales.get_sales_by_date_range(db, start_date, end_date)]

    @strawberry.field
    async def get_sales_summary(
        self, info: strawberry.Info, start_date: DateTime, end_date: DateTime
    ) -> SalesSummary:
        async with db_session(info) as db:
            summary = await sales.get_sales_summary(db, start_date, end_date)
            return SalesSummary(
                total_revenue=summary.total_revenue,
                total_quantity=summary.total_quantity,
                sale_count=summary.sale_count,
                average_sale_value=summary.average_sale_value,
            )

    @strawberry.field
    async def get_daily_sales(
        self, info: strawberry.Info, start_date: DateTime, end_date: DateTime
    ) -> List[DailySales]:
        """Sales grouped by calendar day, oldest first"""
        async with db_session(info) as db:
            days = await sales.get_daily_sales(db, start_date, end_date)
            return [
                DailySales(date=d.date, revenue=d.revenue, quantity=d.quantity, sale_count=d.sale_count)
                for d in days
            ]


@strawberry.type
class FlagQuery:
    @strawberry.field
    async def get_product_flags(self, info: strawberry.Info, product_id: int) -> List[ProductFlag]:
        async with db_session(info) as db:
            return [ProductFlag.from_model(f) for f in await flags.get_product_flags(db, product_id)]

    @strawberry.field
    async def get_flags_by_reason(self, info: strawberry.Info, reason: FlagReason) -> List[ProductFlag]:
        async with db_session(info) as db:
            return [ProductFlag.from_model(f) for f in await flags.get_flags_by_reason(db, reason)]

    @strawberry.field
    async def get_flags_by_status(self, info: strawberry.Info, status: FlagStatus) -> List[ProductFlag]:
        async with db_session(info) as db:
            return [ProductFlag.from_model(f) for f in await flags.get_flags_by_status(db, status)]

    @strawberry.field
    async def get_flagged_products(self, info: strawberry.Info, min_flag_count: int) -> List[Product]:
        async with db_session(info) as db:
            return [Product.from_model(p) for p in await flags.get_flagged_products(db, min_flag_count)]


# =============================================================================
# MUTATIONS
# =============================================================================

@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_user(self, info: strawberry.Info, input: CreateUserInput) -> User:
        """
        Register a user account.

        A ``phrase`` matching the configured admin or moderator phrase grants
        that role; any other non-empty phrase is rejected.
        """
        async with db_session(info) as db:
            user = await create_user(
                db,
                info.context.settings.security,
                email=input.email,
                username=input.username,
                password=input.password,
                phrase=input.phrase,
            )
            return User.from_model(user)


# =============================================================================
# SCHEMA & ROUTER
# =============================================================================

Query = merge_types("Query", (UserQuery, ProductQuery, ReviewQuery, RaffleQuery, SalesQuery, FlagQuery))

schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    extensions=[ErrorCodeExtension],
)


def create_graphql_router(settings: Optional[Settings] = None) -> GraphQLRouter:
    """GraphQL router for FastAPI; GraphiQL is served outside production."""
    settings = settings or get_settings()
    return GraphQLRouter(
        schema,
        path="",
        graphql_ide=None if settings.is_production else "graphiql",
        context_getter=get_context,
    )
