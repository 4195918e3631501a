"""Unit tests for domain/filters.py.

Tests verify:
1. Half-open date ranges on local close date
2. Account, tag (any/all) and side criteria
3. Contract violations raise ValueError
4. Filtering is order preserving and idempotent
"""

from datetime import date, datetime, timedelta

import pytest

from trade_analytics.domain.filters import FilterCriteria, filter_trades

from factories import BASE, UTC, round_trip


@pytest.fixture
def trades():
    """Three trades on consecutive days, mixed accounts, tags and sides."""
    return (
        round_trip(10.0, 11.0, account="A", tags=("orb",), opened=BASE),
        round_trip(10.0, 9.0, account="B", tags=("orb", "gap"), side="short",
                   opened=BASE + timedelta(days=1)),
        round_trip(10.0, 12.0, account="A", opened=BASE + timedelta(days=2)),
    )


# =============================================================================
# Date Range
# =============================================================================

class TestDateRange:
    """Tests for the [start, end) close-date window."""

    def test_no_criteria_keeps_everything(self, trades):
        """Empty criteria pass every trade."""
        assert filter_trades(FilterCriteria(), trades) == trades

    def test_end_is_exclusive(self, trades):
        """A trade closing on the end date is excluded."""
        criteria = FilterCriteria(start=date(2024, 3, 4), end=date(2024, 3, 5))
        assert filter_trades(criteria, trades) == trades[:1]

    def test_open_ended_start(self, trades):
        """Only an end bound."""
        criteria = FilterCriteria(end=date(2024, 3, 6))
        assert filter_trades(criteria, trades) == trades[:2]

    def test_empty_range(self, trades):
        """start == end selects nothing."""
        criteria = FilterCriteria(start=date(2024, 3, 5), end=date(2024, 3, 5))
        assert filter_trades(criteria, trades) == ()

    def test_range_without_trades(self, trades):
        """A range with no trades yields an empty tuple."""
        criteria = FilterCriteria(start=date(2025, 1, 1), end=date(2025, 2, 1))
        assert filter_trades(criteria, trades) == ()

    def test_reporting_zone_moves_close_date(self):
        """22:00 New York on the 4th is the 5th in UTC."""
        late = round_trip(
            10.0, 11.0,
            opened=datetime(2024, 3, 5, 2, 50, tzinfo=UTC),
            held=timedelta(minutes=10),
        )
        march_4 = {"start": date(2024, 3, 4), "end": date(2024, 3, 5)}

        assert filter_trades(FilterCriteria(**march_4, timezone="America/New_York"), [late]) == (late,)
        assert filter_trades(FilterCriteria(**march_4, timezone="UTC"), [late]) == ()


# =============================================================================
# Accounts, Tags, Sides
# =============================================================================

class TestCriteria:
    """Tests for set-valued criteria."""

    def test_accounts(self, trades):
        """Only listed accounts pass."""
        result = filter_trades(FilterCriteria(accounts={"A"}), trades)
        assert [t.account for t in result] == ["A", "A"]

    def test_single_account_string(self, trades):
        """A bare string is one account, not a set of characters."""
        assert FilterCriteria(accounts="A").accounts == frozenset({"A"})

    def test_tags_any(self, trades):
        """By default any listed tag is enough."""
        result = filter_trades(FilterCriteria(tags={"gap", "missing"}), trades)
        assert result == trades[1:2]

    def test_tags_all(self, trades):
        """match_all_tags requires every listed tag."""
        both = FilterCriteria(tags={"orb", "gap"}, match_all_tags=True)
        assert filter_trades(both, trades) == trades[1:2]

        either = FilterCriteria(tags={"orb", "gap"})
        assert filter_trades(either, trades) == trades[:2]

    def test_untagged_trades_fail_tag_filter(self, trades):
        """Trades without tags never match a tag filter."""
        result = filter_trades(FilterCriteria(tags={"orb"}), trades)
        assert trades[2] not in result

    def test_sides(self, trades):
        """Side filter."""
        result = filter_trades(FilterCriteria(sides={"short"}), trades)
        assert [t.side for t in result] == ["short"]

    def test_criteria_combine(self, trades):
        """Every criterion must hold."""
        criteria = FilterCriteria(accounts={"A"}, tags={"orb"}, sides={"long"})
        assert filter_trades(criteria, trades) == trades[:1]


# =============================================================================
# Contract
# =============================================================================

class TestContract:
    """Tests for invalid criteria and filter properties."""

    def test_start_after_end(self):
        """start > end is a caller error."""
        with pytest.raises(ValueError, match="must not be after"):
            FilterCriteria(start=date(2024, 2, 1), end=date(2024, 1, 1))

    def test_unknown_side(self):
        """Sides outside long/short are rejected."""
        with pytest.raises(ValueError, match="sides must be"):
            FilterCriteria(sides={"flat"})

    def test_unknown_timezone(self):
        """Unknown IANA names are rejected."""
        with pytest.raises(ValueError, match="unknown timezone"):
            FilterCriteria(timezone="Mars/Olympus_Mons")

    def test_idempotent(self, trades):
        """Filtering twice equals filtering once."""
        criteria = FilterCriteria(accounts={"A"}, start=date(2024, 3, 4))
        once = filter_trades(criteria, trades)
        assert filter_trades(criteria, once) == once

    def test_preserves_order(self, trades):
        """Input order is kept."""
        reversed_trades = tuple(reversed(trades))
        assert filter_trades(FilterCriteria(), reversed_trades) == reversed_trades


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
