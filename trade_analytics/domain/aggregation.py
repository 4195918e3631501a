"""Aggregator: Period buckets with running cumulative totals.

Bucketing rules:
- Daily buckets are keyed by calendar close date in the reporting zone
- Only days with trades get a bucket; empty days are never synthesized,
  so "no data" stays distinct from "zero P&L"
- Week (ISO, Monday start) and month buckets re-sum the daily buckets
- Every bucket's period_start uses one fixed UTC offset captured when
  the Aggregator is constructed
- cumulative_net_proceeds is a full prefix sum over buckets ordered by
  period start, recomputed on every call

Period keys:
    day    2024-03-15
    week   2024-W11
    month  2024-03
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from types import MappingProxyType
from typing import Literal, Mapping, Sequence

import polars as pl

from trade_analytics.domain.metrics.summary import TradeSummary, summarize
from trade_analytics.domain.models import RoundTurnTrade
from trade_analytics.domain.timezones import (
    capture_offset,
    local_date,
    period_start,
    resolve_timezone,
)

logger = logging.getLogger(__name__)

Granularity = Literal["day", "week", "month"]
GRANULARITIES: tuple[str, ...] = ("day", "week", "month")

_TRUNCATE = {"day": "1d", "week": "1w", "month": "1mo"}

_SCHEMA = {
    "close_date": pl.Date,
    "gross_proceeds": pl.Float64,
    "commissions": pl.Float64,
    "net_proceeds": pl.Float64,
    "outcome": pl.Utf8,
}


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True, slots=True)
class AggregateBucket:
    """Totals for one period.

    Attributes:
        period: Period key ("2024-03-15", "2024-W11", "2024-03")
        period_start: Start of the period in the captured fixed offset
        cumulative_net_proceeds: Prefix sum of net up to this bucket
    """
    period: str
    period_start: datetime
    trade_count: int
    win_count: int
    loss_count: int
    scratch_count: int
    gross_proceeds: float
    commissions: float
    net_proceeds: float
    cumulative_net_proceeds: float

    def to_dict(self) -> dict:
        return {
            "period": self.period,
            "period_start": self.period_start.isoformat(),
            "trade_count": self.trade_count,
            "win_count": self.win_count,
            "loss_count": self.loss_count,
            "scratch_count": self.scratch_count,
            "gross_proceeds": self.gross_proceeds,
            "commissions": self.commissions,
            "net_proceeds": self.net_proceeds,
            "cumulative_net_proceeds": self.cumulative_net_proceeds,
        }


def period_key(day: date, granularity: str) -> str:
    """Format the key of the period starting on ``day``."""
    if granularity == "day":
        return day.isoformat()
    if granularity == "week":
        year, week, _ = day.isocalendar()
        return f"{year}-W{week:02d}"
    if granularity == "month":
        return f"{day.year}-{day.month:02d}"
    raise ValueError(f"granularity must be one of {GRANULARITIES}, got: {granularity!r}")


# =============================================================================
# Aggregator
# =============================================================================

class Aggregator:
    """Buckets trades by period in a reporting zone.

    The zone's UTC offset is captured once, at construction, from
    ``anchor``; period starts never re-evaluate it.

    Example:
        >>> agg = Aggregator("America/New_York", anchor=first_close)
        >>> daily = agg.daily(trades)
        >>> monthly = agg.by_period(trades, "month")
        >>> list(monthly)
        ['2024-01', '2024-02']
    """

    def __init__(self, timezone_name: str = "UTC", anchor: datetime | None = None):
        self._tz = resolve_timezone(timezone_name)
        self.timezone_name = timezone_name
        self.offset: timezone = capture_offset(self._tz, anchor)

    def trade_frame(self, trades: Sequence[RoundTurnTrade]) -> pl.DataFrame:
        """One row per trade with its local close date."""
        return pl.DataFrame(
            {
                "close_date": [local_date(t.close_time, self._tz) for t in trades],
                "gross_proceeds": [float(t.gross_proceeds) for t in trades],
                "commissions": [float(t.commissions) for t in trades],
                "net_proceeds": [float(t.net_proceeds) for t in trades],
                "outcome": [t.outcome for t in trades],
            },
            schema=_SCHEMA,
        )

    def daily_frame(self, trades: Sequence[RoundTurnTrade]) -> pl.DataFrame:
        """Daily totals, one row per day that has trades."""
        return (
            self.trade_frame(trades)
            .group_by("close_date")
            .agg(
                pl.len().alias("trade_count"),
                (pl.col("outcome") == "win").sum().alias("win_count"),
                (pl.col("outcome") == "loss").sum().alias("loss_count"),
                (pl.col("outcome") == "scratch").sum().alias("scratch_count"),
                pl.col("gross_proceeds").sum(),
                pl.col("commissions").sum(),
                pl.col("net_proceeds").sum(),
            )
            .sort("close_date")
        )

    def period_frame(self, trades: Sequence[RoundTurnTrade], granularity: str = "day") -> pl.DataFrame:
        """Re-sum daily buckets into periods and add the cumulative column."""
        if granularity not in GRANULARITIES:
            raise ValueError(
                f"granularity must be one of {GRANULARITIES}, got: {granularity!r}"
            )

        return (
            self.daily_frame(trades)
            .with_columns(pl.col("close_date").dt.truncate(_TRUNCATE[granularity]).alias("start"))
            .group_by("start")
            .agg(
                pl.col("trade_count").sum(),
                pl.col("win_count").sum(),
                pl.col("loss_count").sum(),
                pl.col("scratch_count").sum(),
                pl.col("gross_proceeds").sum(),
                pl.col("commissions").sum(),
                pl.col("net_proceeds").sum(),
            )
            .sort("start")
            .with_columns(pl.col("net_proceeds").cum_sum().alias("cumulative_net_proceeds"))
        )

    def by_period(
        self,
        trades: Sequence[RoundTurnTrade],
        granularity: str = "day",
    ) -> Mapping[str, AggregateBucket]:
        """Ordered, read-only mapping of period key to bucket.

        An empty trade set yields an empty mapping, not zero buckets.
        """
        if granularity not in GRANULARITIES:
            raise ValueError(
                f"granularity must be one of {GRANULARITIES}, got: {granularity!r}"
            )
        if not trades:
            return MappingProxyType({})

        buckets: dict[str, AggregateBucket] = {}
        for row in self.period_frame(trades, granularity).iter_rows(named=True):
            key = period_key(row["start"], granularity)
            buckets[key] = AggregateBucket(
                period=key,
                period_start=period_start(row["start"], self.offset),
                trade_count=int(row["trade_count"]),
                win_count=int(row["win_count"]),
                loss_count=int(row["loss_count"]),
                scratch_count=int(row["scratch_count"]),
                gross_proceeds=row["gross_proceeds"],
                commissions=row["commissions"],
                net_proceeds=row["net_proceeds"],
                cumulative_net_proceeds=row["cumulative_net_proceeds"],
            )

        logger.debug("Aggregated %d trades into %d %s buckets", len(trades), len(buckets), granularity)
        return MappingProxyType(buckets)

    def daily(self, trades: Sequence[RoundTurnTrade]) -> Mapping[str, AggregateBucket]:
        return self.by_period(trades, "day")

    def totals(self, trades: Sequence[RoundTurnTrade]) -> TradeSummary:
        """Single summary over the full set."""
        return summarize(trades)
