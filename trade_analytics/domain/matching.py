"""Round-Turn Matcher: Pair offsetting fills into closed positions.

Matching Logic:
- Each (account, symbol) pair is an independent running position
- Fills in the direction of the position (or from flat) are entries
- Opposing fills are exits; landing exactly on zero closes the trade
- A fill that overshoots zero is a reversal: it closes the current
  trade at zero and opens a new one with the remainder, entered at the
  reversal fill's price
- Whatever is still unbalanced at the end is an open position

Quantities are tracked as Decimal so "lands exactly on zero" means
exactly, including fractional (crypto, FX) sizes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from trade_analytics.domain.models import (
    ClosedPosition,
    Execution,
    Fill,
    OpenPosition,
    Side,
    exact,
    weighted_price,
)
from trade_analytics.domain.store import ExecutionStore

logger = logging.getLogger(__name__)


def _as_number(value: Decimal) -> float | int:
    """Plain number for a fill quantity; integral sizes stay int."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# =============================================================================
# Running Position
# =============================================================================

@dataclass
class PositionAccount:
    """Tracks the running position for one (account, symbol) pair."""

    account: str
    symbol: str
    position: Decimal = Decimal(0)
    fills: list[Fill] = field(default_factory=list)
    closed: list[ClosedPosition] = field(default_factory=list)
    instrument_type: str = "stock"
    currency: str = "USD"

    @property
    def side(self) -> Side | None:
        if self.position > 0:
            return "long"
        if self.position < 0:
            return "short"
        return None

    def process(self, execution: Execution) -> None:
        """Apply one execution to the running position."""
        self.instrument_type = execution.instrument_type
        self.currency = execution.currency
        qty = exact(execution.quantity)

        # Flat or adding to the position: pure entry
        if self.position == 0 or (qty > 0) == (self.position > 0):
            self._add(execution, qty, execution.commission, "entry")
            return

        # Reducing: exit up to the open size
        closing = min(abs(qty), abs(self.position))
        remainder = abs(qty) - closing
        closing_signed = closing if qty > 0 else -closing

        if remainder == 0:
            self._add(execution, closing_signed, execution.commission, "exit")
            if self.position == 0:
                self._close()
            return

        # Reversal: split commission pro rata by quantity
        share = float(closing / abs(qty))
        closing_commission = execution.commission * share
        self._add(execution, closing_signed, closing_commission, "exit")
        self._close()
        self._add(
            execution,
            qty - closing_signed,
            execution.commission - closing_commission,
            "entry",
        )
        logger.debug(
            "Reversal on %s:%s at %s, %s carried into new trade",
            self.account, self.symbol, execution.execution_id, remainder,
        )

    def _add(self, execution: Execution, qty: Decimal, commission: float, role: str) -> None:
        self.fills.append(Fill(
            execution_id=execution.execution_id,
            quantity=_as_number(qty),
            price=execution.price,
            commission=commission,
            timestamp=execution.timestamp,
            role=role,
        ))
        self.position += qty

    def _close(self) -> None:
        entry = self.fills[0]
        self.closed.append(ClosedPosition(
            account=self.account,
            symbol=self.symbol,
            side="long" if entry.quantity > 0 else "short",
            ordinal=len(self.closed) + 1,
            fills=tuple(self.fills),
            instrument_type=self.instrument_type,
            currency=self.currency,
        ))
        self.fills = []

    def open_position(self) -> OpenPosition | None:
        """Current unbalanced sequence, or None when flat."""
        side = self.side
        if side is None:
            return None
        fills = tuple(self.fills)
        return OpenPosition(
            account=self.account,
            symbol=self.symbol,
            side=side,
            quantity=_as_number(abs(self.position)),
            entry_price=_open_entry_price(fills),
            open_time=fills[0].timestamp,
            fills=fills,
        )


def _open_entry_price(fills: tuple[Fill, ...]) -> float:
    """Weighted entry price of an open position.

    Partial exits do not change the average cost of what remains.
    """
    return weighted_price(fills, "entry")


# =============================================================================
# Matching
# =============================================================================

@dataclass(frozen=True, slots=True)
class MatchResult:
    """Matcher output.

    Attributes:
        closed: Closed positions in (account, symbol, close order)
        open_positions: Still-unbalanced sequences, one per partition at most
    """
    closed: tuple[ClosedPosition, ...]
    open_positions: tuple[OpenPosition, ...]


def match_partition(account: str, symbol: str, executions: list[Execution]) -> PositionAccount:
    """Run the matcher over one time-ordered partition."""
    book = PositionAccount(account=account, symbol=symbol)
    for execution in executions:
        book.process(execution)
    return book


def match_executions(store: ExecutionStore) -> MatchResult:
    """Convert a store snapshot into closed positions and open positions.

    Args:
        store: Validated execution snapshot

    Returns:
        MatchResult with closed and open sequences

    Example:
        >>> result = match_executions(store)
        >>> len(result.closed), len(result.open_positions)
        (1, 0)
    """
    closed: list[ClosedPosition] = []
    open_positions: list[OpenPosition] = []

    for (account, symbol), executions in store.partitions():
        book = match_partition(account, symbol, executions)
        closed.extend(book.closed)
        position = book.open_position()
        if position is not None:
            open_positions.append(position)

    logger.debug(
        "Matched %d executions into %d closed and %d open positions",
        len(store), len(closed), len(open_positions),
    )
    return MatchResult(tuple(closed), tuple(open_positions))
