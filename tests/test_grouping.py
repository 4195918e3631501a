"""Unit tests for domain/grouping.py.

Tests verify:
1. One-to-one dimensions place each trade in exactly one group
2. Tags fan out, and untagged trades get their own group
3. Duration bins and time-of-day windows
4. Group summaries follow the undefined-is-None convention
"""

from datetime import datetime, timedelta

import pytest

from trade_analytics.domain.grouping import (
    NO_STRATEGY,
    UNTAGGED,
    GroupingEngine,
    duration_label,
    time_of_day_label,
)

from factories import BASE, UTC, round_trip, with_net


@pytest.fixture
def trades():
    return (
        with_net(30.0, symbol="AAPL", tags=("orb", "gap"), strategy="breakout"),
        with_net(-10.0, symbol="AAPL", tags=("orb",), strategy="breakout"),
        with_net(20.0, symbol="MSFT", strategy="fade"),
        with_net(5.0, symbol="TSLA"),
    )


# =============================================================================
# Dimensions
# =============================================================================

class TestDimensions:
    """Tests for group membership."""

    def test_symbol_membership(self, trades):
        """Every trade lands in exactly one symbol group."""
        groups = GroupingEngine().partition(trades, "symbol")
        assert list(groups) == ["AAPL", "MSFT", "TSLA"]
        assert sum(g.summary.trade_count for g in groups.values()) == len(trades)

    def test_strategy_default_group(self, trades):
        """Trades without a strategy are grouped under the placeholder."""
        groups = GroupingEngine().partition(trades, "strategy")
        assert set(groups) == {"breakout", "fade", NO_STRATEGY}
        assert groups["breakout"].summary.trade_count == 2

    def test_tag_fan_out(self, trades):
        """A trade with two tags counts in both groups."""
        groups = GroupingEngine().partition(trades, "tag")
        assert groups["orb"].summary.trade_count == 2
        assert groups["gap"].summary.trade_count == 1
        assert groups[UNTAGGED].summary.trade_count == 2
        assert sum(g.summary.trade_count for g in groups.values()) == 5

    def test_unknown_dimension(self, trades):
        """Unknown dimensions raise ValueError."""
        with pytest.raises(ValueError, match="dimension must be one of"):
            GroupingEngine().partition(trades, "weekday")

    def test_group_all(self, trades):
        """group() returns every requested dimension."""
        groups = GroupingEngine().group(trades, ("symbol", "tag"))
        assert list(groups) == ["symbol", "tag"]

    def test_empty(self):
        """No trades, no groups."""
        assert dict(GroupingEngine().partition((), "symbol")) == {}


# =============================================================================
# Duration and Time of Day
# =============================================================================

class TestTimeBins:
    """Tests for duration bins and time-of-day windows."""

    @pytest.mark.parametrize("seconds,label", [
        (30, "<1m"),
        (60, "1-5m"),
        (90, "1-5m"),
        (1800, "30m-2h"),
        (3 * 3600, ">2h"),
    ])
    def test_duration_label(self, seconds, label):
        """Upper bounds are exclusive."""
        assert duration_label(timedelta(seconds=seconds)) == label

    def test_duration_groups_in_bin_order(self):
        """Duration groups follow bin order, not alphabetical order."""
        trades = (
            round_trip(1.0, 2.0, held=timedelta(hours=3)),
            round_trip(1.0, 2.0, held=timedelta(seconds=30)),
            round_trip(1.0, 2.0, held=timedelta(minutes=10)),
        )
        groups = GroupingEngine().partition(trades, "duration")
        assert list(groups) == ["<1m", "5-30m", ">2h"]

    def test_time_of_day_label(self):
        """Window start formatted as HH:MM."""
        assert time_of_day_label(9 * 60 + 45) == "09:00"
        assert time_of_day_label(9 * 60 + 45, 30) == "09:30"

    def test_time_of_day_uses_reporting_zone(self):
        """BASE is 09:30 in New York and 14:30 in UTC."""
        trade = round_trip(1.0, 2.0, opened=BASE)
        assert list(GroupingEngine("America/New_York").partition([trade], "time_of_day")) == ["09:00"]
        assert list(GroupingEngine("UTC").partition([trade], "time_of_day")) == ["14:00"]

    def test_time_of_day_uses_entry_time(self):
        """Grouped by when the trade opened, not closed."""
        trade = round_trip(
            1.0, 2.0,
            opened=datetime(2024, 3, 4, 10, 55, tzinfo=UTC),
            held=timedelta(minutes=20),
        )
        assert list(GroupingEngine().partition([trade], "time_of_day")) == ["10:00"]

    def test_window_must_divide_day(self):
        """Windows that do not tile a day are rejected."""
        with pytest.raises(ValueError, match="must divide a day"):
            GroupingEngine(time_of_day_minutes=7)


# =============================================================================
# Group Summaries
# =============================================================================

class TestGroupSummary:
    """Tests for per-group statistics."""

    def test_summary_values(self, trades):
        """Win rate, averages and profit factor for AAPL."""
        summary = GroupingEngine().partition(trades, "symbol")["AAPL"].summary
        assert summary.win_rate == pytest.approx(0.5)
        assert summary.avg_win == pytest.approx(30.0)
        assert summary.avg_loss == pytest.approx(10.0)
        assert summary.profit_factor == pytest.approx(3.0)

    def test_profit_factor_undefined_without_losses(self, trades):
        """No losing trades gives None, not infinity."""
        summary = GroupingEngine().partition(trades, "symbol")["MSFT"].summary
        assert summary.profit_factor is None
        assert summary.avg_loss is None
        assert summary.win_rate == 1.0

    def test_summary_has_no_running_total(self, trades):
        """Groups are unordered, so the summary carries no cumulative column."""
        summary = GroupingEngine().partition(trades, "symbol")["AAPL"].summary
        assert summary.net_proceeds == pytest.approx(20.0)
        assert not hasattr(summary, "cumulative_net_proceeds")

    def test_to_dict(self, trades):
        """Rows carry dimension, key and summary fields."""
        row = GroupingEngine().partition(trades, "symbol")["TSLA"].to_dict()
        assert row["dimension"] == "symbol"
        assert row["key"] == "TSLA"
        assert row["trade_count"] == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
