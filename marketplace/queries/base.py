"""
Query Building Blocks

Argument validation and the small pieces every read query shares: lookup
by primary key, inclusive date ranges, single-key ordering and limits.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Type, TypeVar

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.config import get_settings
from marketplace.database.models import Base
from marketplace.errors import InvalidArgument, NotFound

ModelT = TypeVar("ModelT", bound=Base)


class SortOrder(str, Enum):
    """Direction for single-key ordering"""
    ASC = "asc"
    DESC = "desc"


async def get_or_raise(session: AsyncSession, model: Type[ModelT], key: int) -> ModelT:
    """Fetch a row by primary key or raise ``NotFound``."""
    row = await session.get(model, key)
    if row is None:
        raise NotFound(model.__name__, key)
    return row


def check_date_range(start: datetime, end: datetime) -> None:
    """Reject ranges whose start falls after their end."""
    if start > end:
        raise InvalidArgument(f"start date {start.isoformat()} is after end date {end.isoformat()}")


def check_limit(limit: Optional[int]) -> Optional[int]:
    """
    Validate a caller-supplied limit.

    Negative limits are rejected; limits above the configured maximum are
    clamped to it. ``None`` means no limit.
    """
    if limit is None:
        return None
    if limit < 0:
        raise InvalidArgument(f"limit must be non-negative, got {limit}")
    return min(limit, get_settings().query.max_collection_limit)


def check_threshold(value: float, name: str) -> None:
    """Reject negative thresholds for minimum-count and range filters."""
    if value < 0:
        raise InvalidArgument(f"{name} must be non-negative, got {value}")


def in_range(query: Select, column, start: datetime, end: datetime) -> Select:
    """Restrict ``column`` to ``[start, end]``, inclusive at both bounds."""
    check_date_range(start, end)
    return query.where(column >= start, column <= end)


def ordered(query: Select, column, order: SortOrder = SortOrder.DESC) -> Select:
    """Order by a single column; ties keep the store's natural order."""
    return query.order_by(column.desc() if order == SortOrder.DESC else column.asc())


def limited(query: Select, limit: Optional[int]) -> Select:
    limit = check_limit(limit)
    if limit is None:
        return query
    return query.limit(limit)
