"""Trade Analytics: Personal trading-performance analytics engine.

Turns a trader's raw execution history into round-turn trades and
derives P&L, period totals, dimension groups and profit analysis.

Architecture:
- domain/: Core business logic (models, matching, P&L, metrics)
- infrastructure/: Configuration and snapshot repositories
- application/: Engine and session orchestration
- interfaces/: CLI
"""

__version__ = "0.1.0"

from trade_analytics.domain import (
    Execution,
    ExecutionStore,
    FilterCriteria,
    RoundTurnTrade,
    TradeAnnotation,
    InstrumentMeta,
)
from trade_analytics.infrastructure import (
    DataPaths,
    AnalysisConfig,
    DEFAULT_PATHS,
    RepositoryError,
)
from trade_analytics.application import (
    AnalyticsEngine,
    AnalyticsResult,
    AnalyticsSession,
    Snapshot,
)

__all__ = [
    # Version
    "__version__",
    # Domain models
    "Execution",
    "ExecutionStore",
    "FilterCriteria",
    "RoundTurnTrade",
    "TradeAnnotation",
    "InstrumentMeta",
    # Infrastructure
    "DataPaths",
    "AnalysisConfig",
    "DEFAULT_PATHS",
    "RepositoryError",
    # Application
    "AnalyticsEngine",
    "AnalyticsResult",
    "AnalyticsSession",
    "Snapshot",
]
