"""
In-Process Rollups

Reductions applied after rows are fetched from the store: averages,
percentages, profit margins and day-level sales grouping.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import polars as pl


def average(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return float(sum(values)) / len(values)


def percentage(part: int, whole: int) -> float:
    """``part / whole * 100``; 0.0 when ``whole`` is zero."""
    if whole <= 0:
        return 0.0
    return part / whole * 100.0


def profit_margin(price: float, cost: Optional[float]) -> Optional[float]:
    """
    Margin as a ratio of cost: ``(price - cost) / cost``.

    Returns None when cost is missing or not strictly positive; such
    products carry no meaningful margin and are excluded by callers.
    """
    if cost is None or cost <= 0:
        return None
    return (price - cost) / cost


def rank_by_margin(
    items: Iterable[Tuple[Any, float, Optional[float]]],
    min_margin: Optional[float] = None,
) -> List[Tuple[Any, float]]:
    """
    Compute margins for ``(item, price, cost)`` tuples.

    Items without a positive cost are dropped, then items below
    ``min_margin`` (when given). Result is sorted by margin, highest first.
    """
    ranked = []
    for item, price, cost in items:
        margin = profit_margin(price, cost)
        if margin is None:
            continue
        if min_margin is not None and margin < min_margin:
            continue
        ranked.append((item, margin))
    ranked.sort(key=lambda pair: pair[1], reverse=True)
    return ranked


def daily_sales(rows: Iterable[Tuple[datetime, float, int]]) -> List[Dict[str, Any]]:
    """
    Group ``(sold_at, total_price, quantity)`` rows by calendar day.

    Returns:
        List of dicts with ``date``, ``revenue``, ``quantity`` and
        ``sale_count``, ascending by date.
    """
    rows = list(rows)
    if not rows:
        return []

    df = pl.DataFrame(
        {
            "sold_at": [r[0] for r in rows],
            "total_price": [float(r[1]) for r in rows],
            "quantity": [int(r[2]) for r in rows],
        },
        schema={"sold_at": pl.Datetime, "total_price": pl.Float64, "quantity": pl.Int64},
    )

    grouped = (
        df.with_columns(pl.col("sold_at").dt.date().alias("date"))
        .group_by("date")
        .agg([
            pl.col("total_price").sum().alias("revenue"),
            pl.col("quantity").sum().alias("quantity"),
            pl.len().alias("sale_count"),
        ])
        .sort("date")
    )
    return grouped.to_dicts()
