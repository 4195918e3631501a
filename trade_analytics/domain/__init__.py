"""Domain Layer: Core business logic and entities.

This layer contains:
- models.py: Value types (Execution, Fill, RoundTurnTrade, ...)
- store.py: Immutable execution snapshot
- matching.py: Round-turn matcher
- pnl.py: P&L calculator
- filters.py: Filter engine
- aggregation.py: Period buckets
- grouping.py: Dimension groups
- metrics/: Summary and profit analysis
"""

from trade_analytics.domain.models import (
    ClosedPosition,
    Diagnostic,
    Execution,
    Fill,
    InstrumentMeta,
    OpenPosition,
    RoundTurnTrade,
    Side,
    TradeAnnotation,
)
from trade_analytics.domain.store import ExecutionStore
from trade_analytics.domain.matching import MatchResult, match_executions
from trade_analytics.domain.pnl import PnlResult, calculate_trade, calculate_trades
from trade_analytics.domain.filters import FilterCriteria, filter_trades
from trade_analytics.domain.aggregation import (
    GRANULARITIES,
    AggregateBucket,
    Aggregator,
)
from trade_analytics.domain.grouping import DIMENSIONS, Group, GroupingEngine
from trade_analytics.domain.metrics import (
    Histogram,
    ProfitAnalysisResult,
    TradeSummary,
    analyze_profit,
    summarize,
)

__all__ = [
    # Models
    "ClosedPosition",
    "Diagnostic",
    "Execution",
    "Fill",
    "InstrumentMeta",
    "OpenPosition",
    "RoundTurnTrade",
    "Side",
    "TradeAnnotation",
    # Store
    "ExecutionStore",
    # Matching
    "MatchResult",
    "match_executions",
    # P&L
    "PnlResult",
    "calculate_trade",
    "calculate_trades",
    # Filters
    "FilterCriteria",
    "filter_trades",
    # Aggregation
    "GRANULARITIES",
    "AggregateBucket",
    "Aggregator",
    # Grouping
    "DIMENSIONS",
    "Group",
    "GroupingEngine",
    # Metrics
    "Histogram",
    "ProfitAnalysisResult",
    "TradeSummary",
    "analyze_profit",
    "summarize",
]
