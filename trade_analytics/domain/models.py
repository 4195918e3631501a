"""Domain Models: Core value types for trade analytics.

These models represent the fundamental business entities:
- Execution: One fill of an order, the atomic unit of raw data
- Fill: One leg of a round turn (entry or exit)
- OpenPosition: An unbalanced sequence of fills, still in progress
- RoundTurnTrade: A closed position lifecycle with realized P&L
- TradeAnnotation / InstrumentMeta: Collaborator-supplied metadata
- Diagnostic: A data-quality issue absorbed during a pass

Design Principles:
- Immutable (frozen dataclass)
- Validation in __post_init__
- Computed properties for derived values
- Undefined ratios are None, never NaN or Infinity
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Literal

# Type aliases
Side = Literal["long", "short"]
Outcome = Literal["win", "loss", "scratch"]
FillRole = Literal["entry", "exit"]
DiagnosticKind = Literal["malformed_execution", "missing_instrument_metadata"]

SIDES: frozenset[str] = frozenset({"long", "short"})


def _validate_finite(value: float, field_name: str) -> None:
    """Validate that value is a finite number."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValueError(f"{field_name} must be a number, got: {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{field_name} must be finite, got: {value}")


def _validate_non_negative(value: float, field_name: str) -> None:
    """Validate that value is non-negative."""
    if value < 0:
        raise ValueError(f"{field_name} must be non-negative, got: {value}")


def _validate_aware(value: datetime, field_name: str) -> None:
    """Validate that value is a timezone-aware datetime."""
    if not isinstance(value, datetime):
        raise ValueError(f"{field_name} must be a datetime, got: {value!r}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"{field_name} must be timezone-aware, got: {value}")


def exact(quantity: float) -> Decimal:
    """Exact decimal form of a quantity, as written (0.1 stays 0.1)."""
    return Decimal(str(quantity))


def side_sign(side: Side) -> int:
    """+1 for long, -1 for short."""
    return 1 if side == "long" else -1


# =============================================================================
# Raw Input
# =============================================================================

@dataclass(frozen=True, slots=True)
class Execution:
    """One fill of an order.

    Attributes:
        execution_id: Unique identifier from the source
        account: Account identifier
        symbol: Instrument symbol (e.g., "AAPL", "ESZ4")
        quantity: Signed quantity; positive buys, negative sells
        price: Fill price per unit
        timestamp: Timezone-aware fill time
        commission: Commissions and fees, signed, never positive
        instrument_type: "stock", "future", "option", ...
        currency: ISO currency code

    Example:
        >>> e = Execution("e1", "U1", "AAPL", 100, 10.0,
        ...               datetime(2024, 1, 2, 15, 0, tzinfo=timezone.utc),
        ...               commission=-1.0)
        >>> e.is_buy
        True
    """

    execution_id: str
    account: str
    symbol: str
    quantity: float
    price: float
    timestamp: datetime
    commission: float = 0.0
    instrument_type: str = "stock"
    currency: str = "USD"

    def __post_init__(self) -> None:
        """Validate all fields after initialization."""
        if not self.execution_id:
            raise ValueError("execution_id cannot be empty")
        if not self.account:
            raise ValueError("account cannot be empty")
        if not self.symbol:
            raise ValueError("symbol cannot be empty")
        _validate_finite(self.quantity, "quantity")
        if self.quantity == 0:
            raise ValueError("quantity must be non-zero")
        _validate_finite(self.price, "price")
        _validate_non_negative(self.price, "price")
        _validate_finite(self.commission, "commission")
        if self.commission > 0:
            raise ValueError(f"commission must be non-positive, got: {self.commission}")
        _validate_aware(self.timestamp, "timestamp")

    @property
    def is_buy(self) -> bool:
        return self.quantity > 0


# =============================================================================
# Matcher Output
# =============================================================================

@dataclass(frozen=True, slots=True)
class Fill:
    """One leg of a round turn.

    A reversal execution is split into two fills: the exit that flattens
    the old position and the entry that opens the new one. Commission is
    split between them pro rata by quantity.
    """

    execution_id: str
    quantity: float
    price: float
    commission: float
    timestamp: datetime
    role: FillRole

    def __post_init__(self) -> None:
        if self.quantity == 0:
            raise ValueError("fill quantity must be non-zero")
        if self.role not in ("entry", "exit"):
            raise ValueError(f"role must be 'entry' or 'exit', got: {self.role}")

    @property
    def size(self) -> float:
        """Unsigned quantity."""
        return abs(self.quantity)

    @property
    def notional(self) -> float:
        """Unsigned quantity times price."""
        return abs(self.quantity) * self.price


def weighted_price(fills: tuple[Fill, ...], role: FillRole) -> float:
    """Quantity-weighted average price of the fills with the given role."""
    legs = [f for f in fills if f.role == role]
    size = sum(f.size for f in legs)
    if size == 0:
        return 0.0
    return sum(f.notional for f in legs) / size


@dataclass(frozen=True, slots=True)
class ClosedPosition:
    """A fill sequence whose signed quantities sum to zero."""

    account: str
    symbol: str
    side: Side
    ordinal: int
    fills: tuple[Fill, ...]
    instrument_type: str = "stock"
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not self.fills:
            raise ValueError("closed position needs at least one fill")
        if sum((exact(f.quantity) for f in self.fills), Decimal(0)) != 0:
            raise ValueError(
                f"fills of {self.account}:{self.symbol}:{self.ordinal} do not net to zero"
            )

    @property
    def trade_id(self) -> str:
        return f"{self.account}:{self.symbol}:{self.ordinal}"


@dataclass(frozen=True, slots=True)
class OpenPosition:
    """An in-progress fill sequence. Never part of trade aggregates.

    Attributes:
        quantity: Unsigned size still open
        entry_price: Quantity-weighted average entry price
    """

    account: str
    symbol: str
    side: Side
    quantity: float
    entry_price: float
    open_time: datetime
    fills: tuple[Fill, ...]

    @property
    def signed_quantity(self) -> float:
        return self.quantity * side_sign(self.side)


# =============================================================================
# Collaborator Metadata
# =============================================================================

@dataclass(frozen=True, slots=True)
class InstrumentMeta:
    """Contract metadata for a symbol.

    Example:
        >>> InstrumentMeta("ES", multiplier=50.0, tick_size=0.25).multiplier
        50.0
    """

    symbol: str
    multiplier: float = 1.0
    tick_size: float | None = None

    def __post_init__(self) -> None:
        if not self.symbol:
            raise ValueError("symbol cannot be empty")
        _validate_finite(self.multiplier, "multiplier")
        if self.multiplier <= 0:
            raise ValueError(f"multiplier must be positive, got: {self.multiplier}")
        if self.tick_size is not None and self.tick_size <= 0:
            raise ValueError(f"tick_size must be positive, got: {self.tick_size}")


@dataclass(frozen=True, slots=True)
class TradeAnnotation:
    """Per-trade metadata supplied by a journal or risk collaborator.

    Attributes:
        tags: Free-form labels; a trade may carry many
        strategy: Strategy label
        risk: Risk unit (1R) in account currency
        mfe: Maximum favorable excursion in account currency
    """

    tags: frozenset[str] = field(default_factory=frozenset)
    strategy: str | None = None
    risk: float | None = None
    mfe: float | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.tags, frozenset):
            object.__setattr__(self, "tags", frozenset(self.tags))
        if self.risk is not None:
            _validate_finite(self.risk, "risk")
        if self.mfe is not None:
            _validate_finite(self.mfe, "mfe")


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A data-quality issue that was absorbed rather than raised."""

    kind: DiagnosticKind
    message: str
    reference: str | None = None

    def __str__(self) -> str:
        ref = f" [{self.reference}]" if self.reference else ""
        return f"{self.kind}{ref}: {self.message}"


# =============================================================================
# Round-Turn Trade
# =============================================================================

@dataclass(frozen=True, slots=True)
class RoundTurnTrade:
    """A completed (closed) trade with realized P&L.

    Built by the P&L calculator from a ClosedPosition. Proceeds are in
    account currency after applying the instrument multiplier.

    Attributes:
        trade_id: "{account}:{symbol}:{ordinal}", stable per snapshot
        side: "long" or "short"
        fills: Constituent legs; signed quantities net to zero
        entry_price: Quantity-weighted average entry price
        exit_price: Quantity-weighted average exit price
        quantity: Total (unsigned) quantity entered
        gross_proceeds: P&L before commissions
        commissions: Sum of fill commissions (<= 0)
        net_proceeds: gross_proceeds + commissions
        multiplier: Instrument multiplier applied
        approximate: True when instrument metadata was missing
    """

    trade_id: str
    account: str
    symbol: str
    side: Side
    fills: tuple[Fill, ...]
    entry_price: float
    exit_price: float
    quantity: float
    gross_proceeds: float
    commissions: float
    net_proceeds: float
    multiplier: float = 1.0
    approximate: bool = False
    instrument_type: str = "stock"
    currency: str = "USD"
    tags: frozenset[str] = field(default_factory=frozenset)
    strategy: str | None = None
    risk: float | None = None
    mfe: float | None = None

    def __post_init__(self) -> None:
        """Validate all fields after initialization."""
        if not self.symbol:
            raise ValueError("symbol cannot be empty")
        if not self.account:
            raise ValueError("account cannot be empty")
        if self.side not in SIDES:
            raise ValueError(f"side must be 'long' or 'short', got: {self.side}")
        if not self.fills:
            raise ValueError("trade needs at least one fill")
        if self.net_quantity != 0:
            raise ValueError(f"fills of {self.trade_id} do not net to zero")
        if self.commissions > 0:
            raise ValueError(f"commissions must be non-positive, got: {self.commissions}")
        if not math.isclose(
            self.net_proceeds, self.gross_proceeds + self.commissions, abs_tol=1e-9
        ):
            raise ValueError("net_proceeds must equal gross_proceeds + commissions")

    @property
    def net_quantity(self) -> Decimal:
        """Exact sum of signed fill quantities. Always zero."""
        return sum((exact(f.quantity) for f in self.fills), Decimal(0))

    @property
    def open_time(self) -> datetime:
        return self.fills[0].timestamp

    @property
    def close_time(self) -> datetime:
        return self.fills[-1].timestamp

    @property
    def duration(self) -> timedelta:
        return self.close_time - self.open_time

    @property
    def outcome(self) -> Outcome:
        """win if net > 0, loss if net < 0, otherwise scratch."""
        if self.net_proceeds > 0:
            return "win"
        if self.net_proceeds < 0:
            return "loss"
        return "scratch"

    @property
    def is_win(self) -> bool:
        return self.outcome == "win"

    @property
    def is_loss(self) -> bool:
        return self.outcome == "loss"
