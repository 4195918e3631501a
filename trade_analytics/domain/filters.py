"""Filter Engine: Select trades matching user criteria.

A trade passes iff all of:
- its close date (in the reporting zone) lies in [start, end)
- accounts is empty, or the trade's account is in it
- tags is empty, or the trade has a matching tag
  (any tag by default; every tag with match_all_tags=True)
- sides is empty, or the trade's side is in it

Filtering is pure, order preserving and idempotent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from trade_analytics.domain.models import SIDES, RoundTurnTrade
from trade_analytics.domain.timezones import local_date, resolve_timezone


def _frozen(values: Iterable[str] | None) -> frozenset[str]:
    if values is None:
        return frozenset()
    if isinstance(values, str):
        return frozenset({values})
    return frozenset(values)


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    """User trade-selection criteria.

    Attributes:
        start: First included close date (None = unbounded)
        end: First excluded close date (None = unbounded)
        accounts: Accounts to include (empty = all)
        tags: Tags to match (empty = all)
        sides: Subset of {"long", "short"} (empty = both)
        timezone: IANA reporting zone for calendar dates
        match_all_tags: Require every tag instead of any tag

    Raises:
        ValueError: On start > end, an unknown side or an unknown zone

    Example:
        >>> criteria = FilterCriteria(start=date(2024, 1, 1), end=date(2024, 2, 1),
        ...                           tags={"breakout"}, timezone="America/New_York")
    """

    start: date | None = None
    end: date | None = None
    accounts: frozenset[str] = field(default_factory=frozenset)
    tags: frozenset[str] = field(default_factory=frozenset)
    sides: frozenset[str] = field(default_factory=frozenset)
    timezone: str = "UTC"
    match_all_tags: bool = False

    def __post_init__(self) -> None:
        """Normalize collections and check the caller contract."""
        for name in ("accounts", "tags", "sides"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError(f"start ({self.start}) must not be after end ({self.end})")
        unknown = self.sides - SIDES
        if unknown:
            raise ValueError(f"sides must be 'long' or 'short', got: {sorted(unknown)}")
        resolve_timezone(self.timezone)

    def matches(self, trade: RoundTurnTrade) -> bool:
        """Check a single trade against every criterion."""
        if self.start is not None or self.end is not None:
            closed_on = local_date(trade.close_time, resolve_timezone(self.timezone))
            if self.start is not None and closed_on < self.start:
                return False
            if self.end is not None and closed_on >= self.end:
                return False

        if self.accounts and trade.account not in self.accounts:
            return False

        if self.tags:
            if self.match_all_tags:
                if not self.tags <= trade.tags:
                    return False
            elif not self.tags & trade.tags:
                return False

        if self.sides and trade.side not in self.sides:
            return False

        return True


def filter_trades(
    criteria: FilterCriteria,
    trades: Iterable[RoundTurnTrade],
) -> tuple[RoundTurnTrade, ...]:
    """Return the trades matching ``criteria``, in input order."""
    return tuple(t for t in trades if criteria.matches(t))
