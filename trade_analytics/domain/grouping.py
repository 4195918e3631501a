"""Grouping Engine: Partition trades along analytical dimensions.

Dimensions:
- symbol       trade.symbol (1:1)
- strategy     trade.strategy, or "(none)" (1:1)
- tag          every tag on the trade (fan-out), or "(untagged)"
- duration     fixed holding-time bins (1:1)
- time_of_day  fixed windows over local entry time (1:1)

Each group carries a TradeSummary, so win rate, average win/loss and
profit factor come with the same "undefined is None" convention.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Sequence

from trade_analytics.domain.metrics.summary import TradeSummary, summarize
from trade_analytics.domain.models import RoundTurnTrade
from trade_analytics.domain.timezones import resolve_timezone

logger = logging.getLogger(__name__)

UNTAGGED = "(untagged)"
NO_STRATEGY = "(none)"

# (upper bound in seconds, label); the last bin is open-ended
DEFAULT_DURATION_BINS: tuple[tuple[float, str], ...] = (
    (60, "<1m"),
    (300, "1-5m"),
    (1800, "5-30m"),
    (7200, "30m-2h"),
    (float("inf"), ">2h"),
)

DIMENSIONS: tuple[str, ...] = ("symbol", "strategy", "tag", "duration", "time_of_day")
FAN_OUT_DIMENSIONS = frozenset({"tag"})

KeyExtractor = Callable[[RoundTurnTrade], Iterable[str]]


@dataclass(frozen=True, slots=True)
class Group:
    """One group of trades along a dimension.

    ``summary`` is a TradeSummary rather than an AggregateBucket: groups
    have no time order, so there is no cumulative_net_proceeds and no
    period_start. Counts, gross, commissions and net carry the same
    meaning as on a bucket, and win rate, average win/loss and profit
    factor are added.
    """
    dimension: str
    key: str
    trades: tuple[RoundTurnTrade, ...]
    summary: TradeSummary

    def to_dict(self) -> dict:
        return {"dimension": self.dimension, "key": self.key, **self.summary.to_dict()}


def duration_label(
    duration: timedelta,
    bins: Sequence[tuple[float, str]] = DEFAULT_DURATION_BINS,
) -> str:
    """Label of the first bin whose upper bound exceeds ``duration``."""
    seconds = duration.total_seconds()
    for upper, label in bins:
        if seconds < upper:
            return label
    return bins[-1][1]


def time_of_day_label(minute_of_day: int, window_minutes: int = 60) -> str:
    """Start of the fixed window containing ``minute_of_day`` as HH:MM."""
    start = (minute_of_day // window_minutes) * window_minutes
    return f"{start // 60:02d}:{start % 60:02d}"


class GroupingEngine:
    """Partitions trades into per-group summaries.

    Args:
        timezone_name: Reporting zone for time-of-day windows
        duration_bins: Fixed (upper_seconds, label) bins
        time_of_day_minutes: Window width for time-of-day groups

    Example:
        >>> engine = GroupingEngine("America/New_York")
        >>> groups = engine.group(trades, ("symbol", "tag"))
        >>> groups["symbol"]["AAPL"].summary.win_rate
        0.6
    """

    def __init__(
        self,
        timezone_name: str = "UTC",
        duration_bins: Sequence[tuple[float, str]] = DEFAULT_DURATION_BINS,
        time_of_day_minutes: int = 60,
    ):
        if not duration_bins:
            raise ValueError("duration_bins cannot be empty")
        if time_of_day_minutes <= 0 or 1440 % time_of_day_minutes:
            raise ValueError(
                f"time_of_day_minutes must divide a day, got: {time_of_day_minutes}"
            )
        self._tz = resolve_timezone(timezone_name)
        self._duration_bins = tuple(duration_bins)
        self._window = time_of_day_minutes
        self._extractors: dict[str, KeyExtractor] = {
            "symbol": lambda t: (t.symbol,),
            "strategy": lambda t: (t.strategy or NO_STRATEGY,),
            "tag": lambda t: sorted(t.tags) or (UNTAGGED,),
            "duration": lambda t: (duration_label(t.duration, self._duration_bins),),
            "time_of_day": self._time_of_day_key,
        }

    def _time_of_day_key(self, trade: RoundTurnTrade) -> tuple[str]:
        local = trade.open_time.astimezone(self._tz)
        return (time_of_day_label(local.hour * 60 + local.minute, self._window),)

    def _key_order(self, dimension: str, keys: Iterable[str]) -> list[str]:
        if dimension == "duration":
            rank = {label: i for i, (_, label) in enumerate(self._duration_bins)}
            return sorted(keys, key=lambda k: rank.get(k, len(rank)))
        return sorted(keys)

    def partition(
        self,
        trades: Sequence[RoundTurnTrade],
        dimension: str,
    ) -> Mapping[str, Group]:
        """Group trades along one dimension.

        Raises:
            ValueError: If the dimension is unknown
        """
        extractor = self._extractors.get(dimension)
        if extractor is None:
            raise ValueError(f"dimension must be one of {DIMENSIONS}, got: {dimension!r}")

        members: dict[str, list[RoundTurnTrade]] = {}
        for trade in trades:
            for key in extractor(trade):
                members.setdefault(key, []).append(trade)

        groups = {
            key: Group(dimension, key, tuple(members[key]), summarize(members[key]))
            for key in self._key_order(dimension, members)
        }
        return MappingProxyType(groups)

    def group(
        self,
        trades: Sequence[RoundTurnTrade],
        dimensions: Iterable[str] = DIMENSIONS,
    ) -> Mapping[str, Mapping[str, Group]]:
        """Group trades along every requested dimension."""
        result = {dimension: self.partition(trades, dimension) for dimension in dimensions}
        logger.debug(
            "Grouped %d trades: %s",
            len(trades), {d: len(g) for d, g in result.items()},
        )
        return MappingProxyType(result)
