"""Entry point for running trade_analytics as a module.

Usage:
    python -m trade_analytics [command] [options]

Commands:
    summary     Totals over the filtered trades
    periods     Totals by day, week or month
    groups      Per-group summaries along a dimension
    profit      Expectancy and distributions
    positions   Open positions
    verify      Verify snapshot data

Examples:
    python -m trade_analytics summary --data-dir data --tz America/New_York
    python -m trade_analytics periods -g month --start 2024-01-01
    python -m trade_analytics groups symbol --side long
    python -m trade_analytics verify
"""

import sys

from trade_analytics.interfaces.cli import main

if __name__ == "__main__":
    sys.exit(main())
