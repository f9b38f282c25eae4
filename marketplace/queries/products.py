"""
Product Queries

Catalog lookups and filtered collections, plus the product-level
aggregates: popularity by views/favorites, minimum rating-count filter and
profit-margin ranking.
"""

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from marketplace.analytics import rank_by_margin
from marketplace.database.models import (
    Condition,
    Product,
    product_favorites,
    product_views,
)
from marketplace.errors import InvalidArgument
from marketplace.queries.base import (
    SortOrder,
    check_threshold,
    get_or_raise,
    in_range,
    limited,
    ordered,
)

logger = structlog.get_logger(__name__)


async def get_product_by_id(session: AsyncSession, product_id: int) -> Product:
    return await get_or_raise(session, Product, product_id)


async def get_all_products(
    session: AsyncSession,
    order: SortOrder = SortOrder.DESC,
    limit: Optional[int] = None,
) -> Sequence[Product]:
    """All products ordered by creation date."""
    query = limited(ordered(select(Product), Product.created_at, order), limit)
    result = await session.execute(query)
    return result.scalars().all()


async def get_recent_products(session: AsyncSession, limit: int) -> Sequence[Product]:
    query = limited(ordered(select(Product), Product.created_at, SortOrder.DESC), limit)
    result = await session.execute(query)
    return result.scalars().all()


async def get_products_by_price_range(
    session: AsyncSession,
    min_price: float,
    max_price: float,
    order: SortOrder = SortOrder.ASC,
) -> Sequence[Product]:
    """Products priced within ``[min_price, max_price]``, ordered by price."""
    check_threshold(min_price, "min_price")
    if min_price > max_price:
        raise InvalidArgument(f"min_price {min_price} is greater than max_price {max_price}")

    query = select(Product).where(Product.price >= min_price, Product.price <= max_price)
    result = await session.execute(ordered(query, Product.price, order))
    return result.scalars().all()


async def get_products_listed_between(
    session: AsyncSession, start_date: datetime, end_date: datetime
) -> Sequence[Product]:
    query = in_range(select(Product), Product.listed_at, start_date, end_date)
    result = await session.execute(query.order_by(Product.listed_at))
    return result.scalars().all()


async def get_products_by_condition(session: AsyncSession, condition: Condition) -> Sequence[Product]:
    result = await session.execute(select(Product).where(Product.condition == condition))
    return result.scalars().all()


async def get_products_with_raffles(session: AsyncSession) -> Sequence[Product]:
    result = await session.execute(select(Product).where(Product.raffles.any()))
    return result.scalars().all()


async def get_low_stock_products(session: AsyncSession, threshold: int) -> Sequence[Product]:
    """Products with stock at or below ``threshold``, lowest first."""
    check_threshold(threshold, "threshold")
    result = await session.execute(
        select(Product).where(Product.stock <= threshold).order_by(Product.stock)
    )
    return result.scalars().all()


async def _most_linked(session: AsyncSession, link_table, limit: Optional[int]) -> Sequence[Product]:
    counts = (
        select(link_table.c.product_id, func.count().label("link_count"))
        .group_by(link_table.c.product_id)
        .subquery()
    )
    query = (
        select(Product)
        .join(counts, counts.c.product_id == Product.id)
        .order_by(counts.c.link_count.desc())
    )
    result = await session.execute(limited(query, limit))
    return result.scalars().all()


async def get_most_viewed_products(session: AsyncSession, limit: int) -> Sequence[Product]:
    """Products with at least one view, most viewed first."""
    return await _most_linked(session, product_views, limit)


async def get_most_favorited_products(session: AsyncSession, limit: int) -> Sequence[Product]:
    """Products with at least one favorite, most favorited first."""
    return await _most_linked(session, product_favorites, limit)


async def get_products_by_rating_count(
    session: AsyncSession, min_rating_count: int
) -> List[Product]:
    """
    Products with at least ``min_rating_count`` reviews.

    Loads every product with its reviews and filters in memory, so memory
    use grows with the size of the reviews table.
    """
    check_threshold(min_rating_count, "min_rating_count")
    result = await session.execute(select(Product).options(selectinload(Product.reviews)))
    products = result.scalars().all()

    matched = [p for p in products if len(p.reviews) >= min_rating_count]
    logger.debug(
        "Rating count filter applied",
        min_rating_count=min_rating_count,
        candidates=len(products),
        matched=len(matched),
    )
    return matched


async def get_products_by_profit_margin(
    session: AsyncSession, min_margin: Optional[float] = None
) -> List[Tuple[Product, float]]:
    """
    Products paired with their margin ``(price - cost) / cost``.

    Products whose cost is null or not positive are excluded entirely.
    Sorted by margin, highest first.
    """
    result = await session.execute(select(Product).where(Product.cost.is_not(None)))
    products = result.scalars().all()
    return rank_by_margin(((p, p.price, p.cost) for p in products), min_margin=min_margin)
