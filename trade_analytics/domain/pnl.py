"""P&L Calculator: Realized proceeds for closed positions.

Formula:
    gross = Σ_exit (exit_price - avg_entry_price) × qty_closed × side_sign × multiplier
    net   = gross + Σ commissions          (commissions are <= 0)

Because exits always total the entered quantity, this equals the signed
difference between exit and entry notional, which is what is summed:

    gross = Σ_fills (-qty × price) × multiplier

Proceeds and commissions are summed in Decimal from the values as
written, so a break-even trade nets to exactly zero and is a scratch.

Classification:
- net > 0: win
- net < 0: loss
- net == 0: scratch (excluded from win-rate denominators)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping

from trade_analytics.domain.models import (
    ClosedPosition,
    Diagnostic,
    InstrumentMeta,
    RoundTurnTrade,
    TradeAnnotation,
    exact,
    weighted_price,
)

logger = logging.getLogger(__name__)

EMPTY_ANNOTATION = TradeAnnotation()


@dataclass(frozen=True, slots=True)
class PnlResult:
    """Calculator output: trades plus any metadata diagnostics."""
    trades: tuple[RoundTurnTrade, ...]
    diagnostics: tuple[Diagnostic, ...]


def _gross(position: ClosedPosition, multiplier: float) -> Decimal:
    cash = sum((-exact(f.quantity) * exact(f.price) for f in position.fills), Decimal(0))
    return cash * exact(multiplier)


def gross_proceeds(position: ClosedPosition, multiplier: float = 1.0) -> float:
    """Gross P&L of a closed position before commissions."""
    return float(_gross(position, multiplier))


def calculate_trade(
    position: ClosedPosition,
    instrument: InstrumentMeta | None = None,
    annotation: TradeAnnotation | None = None,
) -> RoundTurnTrade:
    """Compute proceeds for a single closed position.

    Args:
        position: Closed fill sequence from the matcher
        instrument: Contract metadata; None means multiplier 1, approximate
        annotation: Optional tags, strategy, risk unit and MFE

    Returns:
        RoundTurnTrade with gross, commissions and net populated
    """
    multiplier = instrument.multiplier if instrument is not None else 1.0
    annotation = annotation or EMPTY_ANNOTATION

    gross = _gross(position, multiplier)
    commissions = sum((exact(f.commission) for f in position.fills), Decimal(0))

    return RoundTurnTrade(
        trade_id=position.trade_id,
        account=position.account,
        symbol=position.symbol,
        side=position.side,
        fills=position.fills,
        entry_price=weighted_price(position.fills, "entry"),
        exit_price=weighted_price(position.fills, "exit"),
        quantity=sum(f.size for f in position.fills if f.role == "entry"),
        gross_proceeds=float(gross),
        commissions=float(commissions),
        net_proceeds=float(gross + commissions),
        multiplier=multiplier,
        approximate=instrument is None,
        instrument_type=position.instrument_type,
        currency=position.currency,
        tags=annotation.tags,
        strategy=annotation.strategy,
        risk=annotation.risk,
        mfe=annotation.mfe,
    )


def calculate_trades(
    positions: Iterable[ClosedPosition],
    instruments: Mapping[str, InstrumentMeta] | None = None,
    annotations: Mapping[str, TradeAnnotation] | None = None,
) -> PnlResult:
    """Compute proceeds for every closed position.

    Symbols missing from ``instruments`` fall back to multiplier 1 and are
    flagged approximate. One diagnostic is reported per missing symbol.
    """
    instruments = instruments or {}
    annotations = annotations or {}

    trades: list[RoundTurnTrade] = []
    missing: dict[str, None] = {}

    for position in positions:
        instrument = instruments.get(position.symbol)
        if instrument is None:
            missing.setdefault(position.symbol)
        trades.append(
            calculate_trade(position, instrument, annotations.get(position.trade_id))
        )

    diagnostics = []
    for symbol in missing:
        logger.warning("No instrument metadata for %s; using multiplier 1", symbol)
        diagnostics.append(Diagnostic(
            "missing_instrument_metadata",
            "multiplier defaulted to 1, proceeds are approximate",
            symbol,
        ))

    return PnlResult(tuple(trades), tuple(diagnostics))
