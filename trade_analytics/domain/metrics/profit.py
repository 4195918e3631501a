"""Profit Analysis: Expectancy, R-multiples and excursion efficiency.

Formulas:
    expectancy  = win_rate × avg_win - loss_rate × avg_loss
    R-multiple  = net_proceeds / risk_unit
    efficiency  = net_proceeds / MFE

Rules:
- A trade without a (positive) risk unit has no R-multiple; it is
  excluded from the distribution, never counted as 0R
- A trade without a (positive) MFE has no efficiency
- Efficiency is not clamped: values outside [-1, 1] are real (a
  re-entry can extend past the recorded MFE)

Histograms use fixed-width bins aligned to multiples of the width and
spanning the data, ready for external rendering.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence

import numpy as np

from trade_analytics.domain.metrics.summary import summarize
from trade_analytics.domain.models import RoundTurnTrade


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True, slots=True)
class Histogram:
    """Binned distribution.

    Attributes:
        edges: Bin edges, len(counts) + 1 values (empty if no data)
        counts: Observations per bin; the last bin includes its right edge
    """
    edges: tuple[float, ...] = ()
    counts: tuple[int, ...] = ()

    @property
    def total(self) -> int:
        return sum(self.counts)

    def to_dict(self) -> dict:
        return {"edges": list(self.edges), "counts": list(self.counts)}


@dataclass(frozen=True, slots=True)
class ProfitAnalysisResult:
    """Derived profit metrics for a filtered trade set.

    Attributes:
        expectancy: Expected net per decisive trade (None if none)
        r_multiples: trade_id -> R-multiple, for trades with a risk unit
        r_histogram: Distribution of R-multiples
        efficiencies: trade_id -> net / MFE, for trades with an MFE
        efficiency_histogram: Distribution of efficiencies
        missing_risk: Trades excluded from the R distribution
        missing_mfe: Trades excluded from the efficiency distribution
    """
    expectancy: float | None
    r_multiples: Mapping[str, float]
    r_histogram: Histogram
    efficiencies: Mapping[str, float]
    efficiency_histogram: Histogram
    missing_risk: int
    missing_mfe: int

    @property
    def average_r(self) -> float | None:
        if not self.r_multiples:
            return None
        return sum(self.r_multiples.values()) / len(self.r_multiples)

    @property
    def average_efficiency(self) -> float | None:
        if not self.efficiencies:
            return None
        return sum(self.efficiencies.values()) / len(self.efficiencies)


# =============================================================================
# Calculations
# =============================================================================

DEFAULT_MAX_BINS = 200


def _span(data: np.ndarray, width: float) -> tuple[int, int]:
    """First and one-past-last bin index covering ``data`` at ``width``."""
    lo = math.floor(data.min() / width)
    hi = math.floor(data.max() / width) + 1
    # float division can land one bin short of the extremes
    if lo * width > data.min():
        lo -= 1
    if hi * width < data.max():
        hi += 1
    return lo, hi


def histogram(
    values: Sequence[float],
    bin_width: float,
    max_bins: int = DEFAULT_MAX_BINS,
) -> Histogram:
    """Fixed-width histogram spanning ``values``.

    Edges are multiples of the width; a single bin is used when all
    values fall on one edge. When the data would need more than
    ``max_bins`` bins, the width is widened to a whole multiple of
    ``bin_width`` until it fits.

    Example:
        >>> histogram([-0.5, 0.2, 1.4], 1.0).edges
        (-1.0, 0.0, 1.0, 2.0)
    """
    if bin_width <= 0:
        raise ValueError(f"bin_width must be positive, got: {bin_width}")
    if max_bins < 2:
        raise ValueError(f"max_bins must be at least 2, got: {max_bins}")
    if len(values) == 0:
        return Histogram()

    data = np.asarray(values, dtype=float)
    width = bin_width
    lo, hi = _span(data, width)
    while hi - lo > max_bins:
        width *= math.ceil((hi - lo) / max_bins)
        lo, hi = _span(data, width)

    edges = np.arange(lo, hi + 1) * width
    counts, _ = np.histogram(data, bins=edges)
    return Histogram(
        edges=tuple(float(e) for e in edges),
        counts=tuple(int(c) for c in counts),
    )


def expectancy(trades: Sequence[RoundTurnTrade]) -> float | None:
    """win_rate × avg_win - loss_rate × avg_loss, None without decisive trades."""
    summary = summarize(trades)
    if summary.decisive_count == 0:
        return None
    win_part = summary.win_rate * summary.avg_win if summary.win_count else 0.0
    loss_part = summary.loss_rate * summary.avg_loss if summary.loss_count else 0.0
    return win_part - loss_part


def r_multiple(trade: RoundTurnTrade) -> float | None:
    """net / risk unit, or None when the risk unit is absent or non-positive."""
    if trade.risk is None or trade.risk <= 0:
        return None
    return trade.net_proceeds / trade.risk


def efficiency(trade: RoundTurnTrade) -> float | None:
    """net / MFE, or None when MFE is absent or non-positive. Not clamped."""
    if trade.mfe is None or trade.mfe <= 0:
        return None
    return trade.net_proceeds / trade.mfe


def analyze_profit(
    trades: Sequence[RoundTurnTrade],
    r_bin_width: float = 0.5,
    efficiency_bin_width: float = 0.1,
    max_bins: int = DEFAULT_MAX_BINS,
) -> ProfitAnalysisResult:
    """Compute expectancy and the R and efficiency distributions.

    Args:
        trades: Filtered trades, optionally annotated with risk and MFE
        r_bin_width: Histogram bin width in R
        efficiency_bin_width: Histogram bin width for efficiency
        max_bins: Upper bound on bins per histogram

    Returns:
        ProfitAnalysisResult
    """
    r_values: dict[str, float] = {}
    eff_values: dict[str, float] = {}

    for trade in trades:
        r = r_multiple(trade)
        if r is not None:
            r_values[trade.trade_id] = r
        e = efficiency(trade)
        if e is not None:
            eff_values[trade.trade_id] = e

    return ProfitAnalysisResult(
        expectancy=expectancy(trades),
        r_multiples=MappingProxyType(r_values),
        r_histogram=histogram(list(r_values.values()), r_bin_width, max_bins),
        efficiencies=MappingProxyType(eff_values),
        efficiency_histogram=histogram(
            list(eff_values.values()), efficiency_bin_width, max_bins
        ),
        missing_risk=len(trades) - len(r_values),
        missing_mfe=len(trades) - len(eff_values),
    )
