"""Analytics Engine: Full recompute of every derived result.

Orchestrates the pipeline over one explicit snapshot:
1. Match executions into closed and open positions
2. Compute P&L and attach annotations
3. Filter by the criteria
4. Aggregate by period, group by dimension, analyze profit

Nothing is patched incrementally. Each call returns a new, frozen
AnalyticsResult; AnalyticsSession swaps its current result in one
assignment, so a reader never sees a half-built result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping

from trade_analytics.domain.aggregation import GRANULARITIES, AggregateBucket, Aggregator
from trade_analytics.domain.filters import FilterCriteria, filter_trades
from trade_analytics.domain.grouping import DIMENSIONS, Group, GroupingEngine
from trade_analytics.domain.matching import match_executions
from trade_analytics.domain.metrics import ProfitAnalysisResult, TradeSummary, analyze_profit
from trade_analytics.domain.models import (
    Diagnostic,
    InstrumentMeta,
    OpenPosition,
    RoundTurnTrade,
    TradeAnnotation,
)
from trade_analytics.domain.pnl import calculate_trades
from trade_analytics.domain.store import ExecutionStore
from trade_analytics.infrastructure.config import AnalysisConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)


# =============================================================================
# Inputs and Outputs
# =============================================================================

@dataclass(frozen=True)
class Snapshot:
    """Everything one pass needs, captured at call time.

    Attributes:
        store: Execution snapshot
        criteria: Trade selection
        instruments: Symbol -> contract metadata
        annotations: Trade id -> tags, strategy, risk, MFE
        granularity: Period size for totals_by_period
        dimensions: Grouping dimensions to compute
    """
    store: ExecutionStore
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    instruments: Mapping[str, InstrumentMeta] = field(default_factory=dict)
    annotations: Mapping[str, TradeAnnotation] = field(default_factory=dict)
    granularity: str = "day"
    dimensions: tuple[str, ...] = DIMENSIONS

    def __post_init__(self) -> None:
        if self.granularity not in GRANULARITIES:
            raise ValueError(
                f"granularity must be one of {GRANULARITIES}, got: {self.granularity!r}"
            )
        unknown = [d for d in self.dimensions if d not in DIMENSIONS]
        if unknown:
            raise ValueError(f"dimension must be one of {DIMENSIONS}, got: {unknown}")


@dataclass(frozen=True)
class AnalyticsResult:
    """Result bundle of one pass. Never mutated after construction.

    Attributes:
        trades: Every closed round-turn trade, before filtering
        open_positions: Unbalanced sequences (excluded from aggregates)
        filtered_trades: Trades passing the criteria, ordered by close time
        totals: Summary over filtered_trades
        totals_by_period: Period key -> bucket, ordered by period start
        groups: Dimension -> group key -> Group
        profit: Expectancy and distributions
        diagnostics: Data-quality issues absorbed during the pass
        generation: Sequence number assigned by the session (0 standalone)
    """
    trades: tuple[RoundTurnTrade, ...]
    open_positions: tuple[OpenPosition, ...]
    filtered_trades: tuple[RoundTurnTrade, ...]
    totals: TradeSummary
    totals_by_period: Mapping[str, AggregateBucket]
    groups: Mapping[str, Mapping[str, Group]]
    profit: ProfitAnalysisResult
    diagnostics: tuple[Diagnostic, ...]
    granularity: str = "day"
    generation: int = 0

    @property
    def is_approximate(self) -> bool:
        """True if any filtered trade lacked instrument metadata."""
        return any(t.approximate for t in self.filtered_trades)


# =============================================================================
# Engine
# =============================================================================

class AnalyticsEngine:
    """Stateless pipeline runner.

    Example:
        >>> engine = AnalyticsEngine()
        >>> result = engine.recompute(Snapshot(store, criteria))
        >>> result.totals.net_proceeds
        148.0
    """

    def __init__(self, config: AnalysisConfig = DEFAULT_CONFIG):
        self._config = config

    def recompute(self, snapshot: Snapshot) -> AnalyticsResult:
        """Rederive every result from the snapshot."""
        config = self._config
        criteria = snapshot.criteria

        matched = match_executions(snapshot.store)
        pnl = calculate_trades(matched.closed, snapshot.instruments, snapshot.annotations)

        trades = tuple(sorted(pnl.trades, key=lambda t: t.close_time))
        filtered = filter_trades(criteria, trades)

        anchor = filtered[0].close_time if filtered else None
        aggregator = Aggregator(criteria.timezone, anchor=anchor)
        grouping = GroupingEngine(
            criteria.timezone,
            duration_bins=config.duration_bins,
            time_of_day_minutes=config.time_of_day_minutes,
        )

        diagnostics = snapshot.store.diagnostics + pnl.diagnostics
        result = AnalyticsResult(
            trades=trades,
            open_positions=matched.open_positions,
            filtered_trades=filtered,
            totals=aggregator.totals(filtered),
            totals_by_period=aggregator.by_period(filtered, snapshot.granularity),
            groups=grouping.group(filtered, snapshot.dimensions),
            profit=analyze_profit(
                filtered,
                r_bin_width=config.r_bin_width,
                efficiency_bin_width=config.efficiency_bin_width,
                max_bins=config.histogram_max_bins,
            ),
            diagnostics=diagnostics,
            granularity=snapshot.granularity,
        )

        logger.info(
            "Recomputed: %d trades (%d filtered), %d open, %d diagnostics",
            len(trades), len(filtered), len(matched.open_positions), len(diagnostics),
        )
        return result


# =============================================================================
# Session
# =============================================================================

class AnalyticsSession:
    """Explicit top-level context owning the current inputs and result.

    Callers mutate inputs through the setters, then invoke recompute().
    The published result is replaced whole; nothing else is shared.

    Example:
        >>> session = AnalyticsSession(store)
        >>> session.set_criteria(FilterCriteria(tags={"breakout"}))
        >>> session.recompute().totals.trade_count
        12
    """

    def __init__(
        self,
        store: ExecutionStore | None = None,
        criteria: FilterCriteria | None = None,
        instruments: Mapping[str, InstrumentMeta] | None = None,
        annotations: Mapping[str, TradeAnnotation] | None = None,
        config: AnalysisConfig = DEFAULT_CONFIG,
    ):
        self._engine = AnalyticsEngine(config)
        self._store = store or ExecutionStore()
        self._criteria = criteria or FilterCriteria(timezone=config.reporting_timezone)
        self._instruments = dict(instruments or {})
        self._annotations = dict(annotations or {})
        self._granularity = config.granularity
        self._dimensions = config.dimensions
        self._generation = 0
        self._result: AnalyticsResult | None = None

    # --- Inputs ---

    @property
    def store(self) -> ExecutionStore:
        return self._store

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    def set_store(self, store: ExecutionStore) -> None:
        self._store = store

    def set_criteria(self, criteria: FilterCriteria) -> None:
        self._criteria = criteria

    def set_instruments(self, instruments: Mapping[str, InstrumentMeta]) -> None:
        self._instruments = dict(instruments)

    def set_annotations(self, annotations: Mapping[str, TradeAnnotation]) -> None:
        self._annotations = dict(annotations)

    def set_granularity(self, granularity: str) -> None:
        if granularity not in GRANULARITIES:
            raise ValueError(
                f"granularity must be one of {GRANULARITIES}, got: {granularity!r}"
            )
        self._granularity = granularity

    # --- Command ---

    def snapshot(self) -> Snapshot:
        """Freeze the current inputs."""
        return Snapshot(
            store=self._store,
            criteria=self._criteria,
            instruments=MappingProxyType(dict(self._instruments)),
            annotations=MappingProxyType(dict(self._annotations)),
            granularity=self._granularity,
            dimensions=self._dimensions,
        )

    def recompute(self) -> AnalyticsResult:
        """Run a full pass over a snapshot and publish it."""
        self._generation += 1
        generation = self._generation
        result = replace(self._engine.recompute(self.snapshot()), generation=generation)
        # a pass started earlier never overwrites a newer published result
        if self._result is None or self._result.generation < generation:
            self._result = result
        return result

    @property
    def result(self) -> AnalyticsResult | None:
        """Latest published result, or None before the first recompute."""
        return self._result
