"""
Unit Tests - Sentiment and Rollups
"""
from datetime import date, datetime

import pytest

from marketplace.analytics import (
    Sentiment,
    average,
    breakdown,
    classify,
    daily_sales,
    percentage,
    profit_margin,
    rank_by_margin,
)


class TestSentiment:
    """Tests for the keyword sentiment heuristic"""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("This is a great product", Sentiment.POSITIVE),
            ("Terrible and poor quality", Sentiment.NEGATIVE),
            ("It arrived on Tuesday", Sentiment.NEUTRAL),
            ("EXCELLENT", Sentiment.POSITIVE),
            ("", Sentiment.NEUTRAL),
        ],
    )
    def test_classify(self, text, expected):
        assert classify(text) == expected

    def test_positive_checked_first(self):
        """Text matching both lists lands in the positive bucket"""
        assert classify("good shoes, bad laces") == Sentiment.POSITIVE
        assert classify("unhappy with it") == Sentiment.POSITIVE

    def test_breakdown_counts_sum_to_total(self):
        texts = ["great", "bad", "meh", "poor", "happy"]

        result = breakdown(texts)

        assert (result.positive, result.negative, result.neutral) == (2, 2, 1)
        assert result.total == len(texts)

    def test_breakdown_empty(self):
        assert breakdown([]).total == 0


class TestRollups:
    """Tests for in-process reductions"""

    def test_average(self):
        assert average([80.0, 20.0, 50.0]) == 50.0
        assert average([]) == 0.0

    def test_percentage(self):
        assert percentage(2, 3) == pytest.approx(66.6667, rel=1e-4)
        assert percentage(0, 0) == 0.0

    @pytest.mark.parametrize(
        "price,cost,expected",
        [
            (200.0, 100.0, 1.0),
            (120.0, 100.0, 0.2),
            (80.0, 100.0, -0.2),
            (150.0, 0.0, None),
            (150.0, -5.0, None),
            (150.0, None, None),
        ],
    )
    def test_profit_margin(self, price, cost, expected):
        if expected is None:
            assert profit_margin(price, cost) is None
        else:
            assert profit_margin(price, cost) == pytest.approx(expected)

    def test_rank_by_margin_excludes_and_sorts(self):
        items = [("a", 120.0, 100.0), ("b", 150.0, 0.0), ("c", 200.0, 100.0), ("d", 90.0, None)]

        ranked = rank_by_margin(items)

        assert [item for item, _ in ranked] == ["c", "a"]
        assert ranked[0][1] == pytest.approx(1.0)

    def test_rank_by_margin_minimum(self):
        items = [("a", 120.0, 100.0), ("c", 200.0, 100.0)]

        assert [item for item, _ in rank_by_margin(items, min_margin=0.5)] == ["c"]

    def test_daily_sales_groups_by_day(self):
        rows = [
            (datetime(2024, 5, 3, 9, 0), 200.0, 1),
            (datetime(2024, 5, 1, 10, 0), 200.0, 1),
            (datetime(2024, 5, 1, 18, 0), 400.0, 2),
        ]

        days = daily_sales(rows)

        assert [d["date"] for d in days] == [date(2024, 5, 1), date(2024, 5, 3)]
        assert days[0]["revenue"] == 600.0
        assert days[0]["quantity"] == 3
        assert days[0]["sale_count"] == 2
        assert days[1]["sale_count"] == 1

    def test_daily_sales_empty(self):
        assert daily_sales([]) == []
