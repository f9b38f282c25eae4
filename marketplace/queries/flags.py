"""
Product Flag Queries
"""

from typing import List, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from marketplace.database.models import FlagReason, FlagStatus, Product, ProductFlag
from marketplace.queries.base import check_threshold


async def get_product_flags(session: AsyncSession, product_id: int) -> Sequence[ProductFlag]:
    result = await session.execute(
        select(ProductFlag).where(ProductFlag.product_id == product_id).order_by(ProductFlag.created_at)
    )
    return result.scalars().all()


async def get_flags_by_reason(session: AsyncSession, reason: FlagReason) -> Sequence[ProductFlag]:
    result = await session.execute(select(ProductFlag).where(ProductFlag.reason == reason))
    return result.scalars().all()


async def get_flags_by_status(session: AsyncSession, status: FlagStatus) -> Sequence[ProductFlag]:
    result = await session.execute(select(ProductFlag).where(ProductFlag.status == status))
    return result.scalars().all()


async def get_flagged_products(session: AsyncSession, min_flag_count: int) -> List[Product]:
    """Products flagged at least ``min_flag_count`` times (filtered in memory)."""
    check_threshold(min_flag_count, "min_flag_count")
    result = await session.execute(select(Product).options(selectinload(Product.flags)))
    return [p for p in result.scalars().all() if len(p.flags) >= min_flag_count]
