"""
Raffle Queries

Raffle lookups, entry collections, and per-raffle / per-user statistics.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Sequence

import structlog
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from marketplace.analytics import percentage
from marketplace.database.models import (
    Raffle,
    RaffleEntry,
    RaffleResult,
    RaffleStatus,
    RaffleType,
)
from marketplace.queries.base import check_threshold, get_or_raise, in_range

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RaffleStatistics:
    """Entry counts by result for one raffle"""
    raffle_id: int
    total_entries: int
    won: int
    lost: int
    pending: int


async def get_raffle_by_id(session: AsyncSession, raffle_id: int) -> Raffle:
    return await get_or_raise(session, Raffle, raffle_id)


async def get_raffles_by_status(session: AsyncSession, status: RaffleStatus) -> Sequence[Raffle]:
    result = await session.execute(
        select(Raffle).where(Raffle.status == status).order_by(Raffle.ends_at)
    )
    return result.scalars().all()


async def get_raffles_by_type(session: AsyncSession, raffle_type: RaffleType) -> Sequence[Raffle]:
    result = await session.execute(
        select(Raffle).where(Raffle.type == raffle_type).order_by(Raffle.ends_at)
    )
    return result.scalars().all()


async def get_raffles_ending_between(
    session: AsyncSession, start_date: datetime, end_date: datetime
) -> Sequence[Raffle]:
    query = in_range(select(Raffle), Raffle.ends_at, start_date, end_date)
    result = await session.execute(query.order_by(Raffle.ends_at))
    return result.scalars().all()


# =============================================================================
# ENTRIES
# =============================================================================

async def get_raffle_entries(session: AsyncSession, raffle_id: int) -> Sequence[RaffleEntry]:
    result = await session.execute(
        select(RaffleEntry).where(RaffleEntry.raffle_id == raffle_id).order_by(RaffleEntry.created_at)
    )
    return result.scalars().all()


async def get_raffle_entry_count(session: AsyncSession, raffle_id: int) -> int:
    result = await session.execute(
        select(func.count(RaffleEntry.id)).where(RaffleEntry.raffle_id == raffle_id)
    )
    return result.scalar() or 0


async def get_entries_by_result(
    session: AsyncSession, raffle_id: int, result: RaffleResult
) -> Sequence[RaffleEntry]:
    rows = await session.execute(
        select(RaffleEntry)
        .where(RaffleEntry.raffle_id == raffle_id, RaffleEntry.result == result)
        .order_by(RaffleEntry.created_at)
    )
    return rows.scalars().all()


async def get_raffle_winners(session: AsyncSession, raffle_id: int) -> Sequence[RaffleEntry]:
    return await get_entries_by_result(session, raffle_id, RaffleResult.WON)


async def get_user_raffle_entries(session: AsyncSession, user_id: int) -> Sequence[RaffleEntry]:
    result = await session.execute(
        select(RaffleEntry).where(RaffleEntry.user_id == user_id).order_by(RaffleEntry.created_at)
    )
    return result.scalars().all()


# =============================================================================
# STATISTICS
# =============================================================================

async def get_raffle_statistics(session: AsyncSession, raffle_id: int) -> RaffleStatistics:
    result = await session.execute(
        select(RaffleEntry.result, func.count(RaffleEntry.id).label("entry_count"))
        .where(RaffleEntry.raffle_id == raffle_id)
        .group_by(RaffleEntry.result)
    )
    counts = {row.result: row.entry_count for row in result.all()}
    return RaffleStatistics(
        raffle_id=raffle_id,
        total_entries=sum(counts.values()),
        won=counts.get(RaffleResult.WON, 0),
        lost=counts.get(RaffleResult.LOST, 0),
        pending=counts.get(RaffleResult.PENDING, 0),
    )


async def get_user_raffle_winning_percentage(session: AsyncSession, user_id: int) -> float:
    """Share of the user's entries that won, as a percentage; 0 with no entries."""
    result = await session.execute(
        select(
            func.count(RaffleEntry.id).label("total"),
            func.sum(case((RaffleEntry.result == RaffleResult.WON, 1), else_=0)).label("won"),
        ).where(RaffleEntry.user_id == user_id)
    )
    row = result.one()
    return percentage(row.won or 0, row.total or 0)


async def get_user_raffle_participation_rate(session: AsyncSession, user_id: int) -> float:
    """User's entries over all raffles in the system, as a percentage; 0 with no raffles."""
    entries = (
        await session.execute(
            select(func.count(RaffleEntry.id)).where(RaffleEntry.user_id == user_id)
        )
    ).scalar() or 0
    raffles = (await session.execute(select(func.count(Raffle.id)))).scalar() or 0
    return percentage(entries, raffles)


async def get_raffles_by_entry_count(session: AsyncSession, min_entry_count: int) -> List[Raffle]:
    """
    Raffles with at least ``min_entry_count`` entries.

    Entries are loaded for every raffle and compared in memory.
    """
    check_threshold(min_entry_count, "min_entry_count")
    result = await session.execute(select(Raffle).options(selectinload(Raffle.entries)))
    raffles = result.scalars().all()

    matched = [r for r in raffles if len(r.entries) >= min_entry_count]
    logger.debug(
        "Entry count filter applied",
        min_entry_count=min_entry_count,
        candidates=len(raffles),
        matched=len(matched),
    )
    return matched
