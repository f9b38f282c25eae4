"""
Analytics Module
"""
from .rollups import average, percentage, profit_margin, rank_by_margin, daily_sales
from .sentiment import Sentiment, SentimentBreakdown, classify, breakdown

__all__ = [
    "average",
    "percentage",
    "profit_margin",
    "rank_by_margin",
    "daily_sales",
    "Sentiment",
    "SentimentBreakdown",
    "classify",
    "breakdown",
]
