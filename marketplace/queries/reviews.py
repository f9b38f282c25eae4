"""
Review Queries

Review collections and the feedback aggregates computed over them.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.analytics import Sentiment, average, breakdown, classify
from marketplace.database.models import Review
from marketplace.queries.base import get_or_raise, in_range

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FeedbackSummary:
    """Average rating and sentiment bucket counts for one product"""
    product_id: int
    total_reviews: int
    average_rating: float
    positive: int
    negative: int
    neutral: int


async def get_product_reviews(session: AsyncSession, product_id: int) -> Sequence[Review]:
    result = await session.execute(
        select(Review).where(Review.product_id == product_id).order_by(Review.created_at)
    )
    return result.scalars().all()


async def get_reviews_by_date_range(
    session: AsyncSession, start_date: datetime, end_date: datetime
) -> Sequence[Review]:
    query = in_range(select(Review), Review.created_at, start_date, end_date)
    result = await session.execute(query.order_by(Review.created_at))
    return result.scalars().all()


async def get_product_average_rating(session: AsyncSession, product_id: int) -> float:
    """Mean review percentage for a product; 0 when it has no reviews."""
    result = await session.execute(
        select(Review.percentage).where(Review.product_id == product_id)
    )
    return average(list(result.scalars().all()))


async def get_product_feedback_summary(session: AsyncSession, product_id: int) -> FeedbackSummary:
    reviews = await get_product_reviews(session, product_id)
    buckets = breakdown(r.content for r in reviews)

    summary = FeedbackSummary(
        product_id=product_id,
        total_reviews=len(reviews),
        average_rating=average([r.percentage for r in reviews]),
        positive=buckets.positive,
        negative=buckets.negative,
        neutral=buckets.neutral,
    )
    logger.debug(
        "Feedback summary computed",
        product_id=product_id,
        total_reviews=summary.total_reviews,
        average_rating=summary.average_rating,
    )
    return summary


async def get_review_sentiment(session: AsyncSession, review_id: int) -> Sentiment:
    review = await get_or_raise(session, Review, review_id)
    return classify(review.content)
