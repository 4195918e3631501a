"""Trading metrics for trade performance analysis.

This package provides metrics over sets of round-turn trades:

- Summary: Win/loss counts, averages, win rate, profit factor
- Profit: Expectancy, R-multiple and excursion-efficiency distributions

Usage:
    from trade_analytics.domain.metrics import (
        summarize,
        analyze_profit,
    )
"""

# Summary
from trade_analytics.domain.metrics.summary import (
    TradeSummary,
    summarize,
)

# Profit
from trade_analytics.domain.metrics.profit import (
    Histogram,
    ProfitAnalysisResult,
    analyze_profit,
    efficiency,
    expectancy,
    histogram,
    r_multiple,
)

__all__ = [
    # Summary
    "TradeSummary",
    "summarize",
    # Profit
    "Histogram",
    "ProfitAnalysisResult",
    "analyze_profit",
    "efficiency",
    "expectancy",
    "histogram",
    "r_multiple",
]
