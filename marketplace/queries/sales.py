"""
Sales Queries

Sale collections and revenue rollups over a date range.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Sequence

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.analytics import daily_sales
from marketplace.database.models import Sale
from marketplace.queries.base import check_date_range, in_range

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SalesSummary:
    total_revenue: float
    total_quantity: int
    sale_count: int
    average_sale_value: float


@dataclass(frozen=True)
class DailySales:
    date: date
    revenue: float
    quantity: int
    sale_count: int


async def get_product_sales(session: AsyncSession, product_id: int) -> Sequence[Sale]:
    result = await session.execute(
        select(Sale).where(Sale.product_id == product_id).order_by(Sale.sold_at)
    )
    return result.scalars().all()


async def get_sales_by_date_range(
    session: AsyncSession, start_date: datetime, end_date: datetime
) -> Sequence[Sale]:
    query = in_range(select(Sale), Sale.sold_at, start_date, end_date)
    result = await session.execute(query.order_by(Sale.sold_at))
    return result.scalars().all()


async def get_sales_summary(
    session: AsyncSession, start_date: datetime, end_date: datetime
) -> SalesSummary:
    """Revenue, units and sale count for the range; zeros when it is empty."""
    check_date_range(start_date, end_date)
    result = await session.execute(
        select(
            func.sum(Sale.total_price).label("revenue"),
            func.sum(Sale.quantity).label("quantity"),
            func.count(Sale.id).label("sales"),
            func.avg(Sale.total_price).label("avg_value"),
        ).where(Sale.sold_at >= start_date, Sale.sold_at <= end_date)
    )
    row = result.one()

    return SalesSummary(
        total_revenue=float(row.revenue or 0),
        total_quantity=int(row.quantity or 0),
        sale_count=row.sales or 0,
        average_sale_value=float(row.avg_value or 0),
    )


async def get_daily_sales(
    session: AsyncSession, start_date: datetime, end_date: datetime
) -> List[DailySales]:
    """Sales in the range grouped by calendar day, ascending."""
    query = in_range(
        select(Sale.sold_at, Sale.total_price, Sale.quantity), Sale.sold_at, start_date, end_date
    )
    result = await session.execute(query)
    rows = [(r.sold_at, r.total_price, r.quantity) for r in result.all()]

    days = [DailySales(**row) for row in daily_sales(rows)]
    logger.debug("Daily sales rolled up", sales=len(rows), days=len(days))
    return days
