"""
Unit Tests - Query Argument Validation
"""
from datetime import datetime

import pytest

from marketplace.errors import InvalidArgument, NotFound
from marketplace.queries.base import check_date_range, check_limit, check_threshold


class TestArgumentChecks:
    """Tests for shared argument validation"""

    def test_limit_passthrough(self):
        assert check_limit(None) is None
        assert check_limit(0) == 0
        assert check_limit(25) == 25

    def test_limit_clamped_to_maximum(self):
        assert check_limit(10_000) == 500

    def test_negative_limit_rejected(self):
        with pytest.raises(InvalidArgument):
            check_limit(-1)

    def test_inverted_date_range_rejected(self):
        with pytest.raises(InvalidArgument):
            check_date_range(datetime(2024, 5, 2), datetime(2024, 5, 1))

    def test_single_instant_range_allowed(self):
        check_date_range(datetime(2024, 5, 1), datetime(2024, 5, 1))

    def test_negative_threshold_rejected(self):
        with pytest.raises(InvalidArgument):
            check_threshold(-1, "min_rating_count")


class TestErrors:
    """Tests for the error taxonomy"""

    def test_not_found_message_and_code(self):
        error = NotFound("Product", 999)

        assert error.code == "NOT_FOUND"
        assert error.message == "Product with id 999 not found"
        assert error.entity == "Product"

    def test_invalid_argument_code(self):
        assert InvalidArgument("bad").code == "INVALID_ARGUMENT"
