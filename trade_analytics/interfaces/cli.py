"""Command Line Interface for trade analytics.

Provides CLI access to analytics results:
- summary: Totals over the filtered trades
- periods: Totals by day, week or month with cumulative net
- groups: Per-group summaries along one dimension
- profit: Expectancy, R-multiple and efficiency distributions
- positions: Open (unmatched) positions
- verify: Check snapshot files and report diagnostics

Usage:
    python -m trade_analytics summary --start 2024-01-01 --end 2024-04-01
    python -m trade_analytics periods --granularity week --tz America/New_York
    python -m trade_analytics groups tag --tag breakout --tag orb --all-tags
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from trade_analytics import __version__
from trade_analytics.application import AnalyticsEngine, AnalyticsResult, load_snapshot
from trade_analytics.domain.aggregation import GRANULARITIES
from trade_analytics.domain.filters import FilterCriteria
from trade_analytics.domain.grouping import DIMENSIONS
from trade_analytics.domain.metrics import Histogram
from trade_analytics.infrastructure import DataPaths, DEFAULT_CONFIG, RepositoryError

EXIT_OK = 0
EXIT_DATA = 1
EXIT_USAGE = 2


# =============================================================================
# Formatting
# =============================================================================

def _fmt_money(value: float | None) -> str:
    return "undefined" if value is None else f"{value:+,.2f}"


def _fmt_ratio(value: float | None, pct: bool = False) -> str:
    if value is None:
        return "undefined"
    return f"{value * 100:.1f}%" if pct else f"{value:.2f}"


def _print_histogram(title: str, hist: Histogram) -> None:
    print(f"【{title}】")
    if not hist.counts:
        print("  (no data)")
        return
    peak = max(hist.counts) or 1
    for i, count in enumerate(hist.counts):
        bar = "#" * max(1 if count else 0, round(count * 30 / peak))
        print(f"  [{hist.edges[i]:+7.2f}, {hist.edges[i + 1]:+7.2f})  {count:>5}  {bar}")


# =============================================================================
# Pipeline
# =============================================================================

def _criteria(args: argparse.Namespace) -> FilterCriteria:
    return FilterCriteria(
        start=args.start,
        end=args.end,
        accounts=frozenset(args.account or ()),
        tags=frozenset(args.tag or ()),
        sides=frozenset(args.side or ()),
        timezone=args.tz,
        match_all_tags=args.all_tags,
    )


def _run(args: argparse.Namespace) -> AnalyticsResult:
    snapshot = load_snapshot(
        criteria=_criteria(args),
        paths=DataPaths(root=Path(args.data_dir)),
        config=DEFAULT_CONFIG,
        granularity=getattr(args, "granularity", None),
    )
    return AnalyticsEngine(DEFAULT_CONFIG).recompute(snapshot)


# =============================================================================
# Commands
# =============================================================================

def cmd_summary(args: argparse.Namespace) -> int:
    """Show totals over the filtered trades."""
    result = _run(args)
    totals = result.totals

    print(f"Trade Analytics v{__version__}")
    print("=" * 50)
    print(f"  Trades:         {totals.trade_count:,} "
          f"({totals.win_count} W / {totals.loss_count} L / {totals.scratch_count} S)")
    print(f"  Gross:          {_fmt_money(totals.gross_proceeds)}")
    print(f"  Commissions:    {_fmt_money(totals.commissions)}")
    print(f"  Net:            {_fmt_money(totals.net_proceeds)}")
    print(f"  Win rate:       {_fmt_ratio(totals.win_rate, pct=True)}")
    print(f"  Avg win:        {_fmt_money(totals.avg_win)}")
    print(f"  Avg loss:       {_fmt_money(totals.avg_loss)}")
    print(f"  Profit factor:  {_fmt_ratio(totals.profit_factor)}")
    print(f"  Open positions: {len(result.open_positions)}")
    if result.is_approximate:
        print("  ⚠ Some trades lack instrument metadata; proceeds are approximate")
    if result.diagnostics:
        print(f"  ⚠ {len(result.diagnostics)} diagnostics (run 'verify' for details)")
    return EXIT_OK


def cmd_periods(args: argparse.Namespace) -> int:
    """Show totals by period."""
    result = _run(args)
    buckets = result.totals_by_period

    print(f"【Totals by {result.granularity}】")
    if not buckets:
        print("  (no trades in range)")
        return EXIT_OK

    print(f"{'Period':<12} {'Trades':>6} {'W':>4} {'L':>4} {'Net':>14} {'Cumulative':>14}")
    print("-" * 58)
    for bucket in buckets.values():
        print(f"{bucket.period:<12} {bucket.trade_count:>6} {bucket.win_count:>4} "
              f"{bucket.loss_count:>4} {bucket.net_proceeds:>+14,.2f} "
              f"{bucket.cumulative_net_proceeds:>+14,.2f}")
    return EXIT_OK


def cmd_groups(args: argparse.Namespace) -> int:
    """Show per-group summaries along one dimension."""
    result = _run(args)
    groups = result.groups.get(args.dimension, {})

    print(f"【Groups by {args.dimension}】")
    if not groups:
        print("  (no trades in range)")
        return EXIT_OK

    print(f"{'Key':<16} {'Trades':>6} {'Win%':>7} {'Net':>14} {'PF':>10}")
    print("-" * 57)
    for group in groups.values():
        s = group.summary
        print(f"{group.key[:16]:<16} {s.trade_count:>6} "
              f"{_fmt_ratio(s.win_rate, pct=True):>7} {s.net_proceeds:>+14,.2f} "
              f"{_fmt_ratio(s.profit_factor):>10}")
    return EXIT_OK


def cmd_profit(args: argparse.Namespace) -> int:
    """Show expectancy and distributions."""
    profit = _run(args).profit

    print("【Profit analysis】")
    print(f"  Expectancy:          {_fmt_money(profit.expectancy)}")
    print(f"  Average R:           {_fmt_ratio(profit.average_r)}")
    print(f"  Average efficiency:  {_fmt_ratio(profit.average_efficiency)}")
    print(f"  Trades without risk: {profit.missing_risk}")
    print(f"  Trades without MFE:  {profit.missing_mfe}")
    print()
    _print_histogram("R-multiple distribution", profit.r_histogram)
    print()
    _print_histogram("Efficiency distribution", profit.efficiency_histogram)
    return EXIT_OK


def cmd_positions(args: argparse.Namespace) -> int:
    """Show open positions."""
    positions = _run(args).open_positions

    print("【Open positions】")
    if not positions:
        print("  (flat)")
        return EXIT_OK
    for p in positions:
        print(f"  {p.account:<10} {p.symbol:<10} {p.side:<5} "
              f"{p.quantity:>10,} @ {p.entry_price:,.4f}  since {p.open_time.isoformat()}")
    return EXIT_OK


def cmd_verify(args: argparse.Namespace) -> int:
    """Check snapshot files and report diagnostics."""
    paths = DataPaths(root=Path(args.data_dir))

    print("【Data verification】")
    print("=" * 50)

    missing = paths.validate()
    if missing:
        for m in missing:
            print(f"  ✗ Missing: {m}")
        return EXIT_DATA
    print(f"  ✓ Executions: {paths.executions}")

    result = _run(args)
    print(f"  Trades: {len(result.trades):,}  Open positions: {len(result.open_positions)}")

    if not result.diagnostics:
        print("✅ No diagnostics")
        return EXIT_OK

    print(f"⚠ {len(result.diagnostics)} diagnostics")
    for d in result.diagnostics:
        print(f"  - {d}")
    return EXIT_OK


# =============================================================================
# Entry Point
# =============================================================================

def _common_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--data-dir", default="data", help="Snapshot directory")
    common.add_argument("--start", type=date.fromisoformat, help="First close date (YYYY-MM-DD)")
    common.add_argument("--end", type=date.fromisoformat, help="Exclusive end date (YYYY-MM-DD)")
    common.add_argument("--account", action="append", help="Account filter (repeatable)")
    common.add_argument("--tag", action="append", help="Tag filter (repeatable)")
    common.add_argument(
        "--all-tags",
        action="store_true",
        help="Require every --tag instead of any",
    )
    common.add_argument("--side", action="append", choices=("long", "short"))
    common.add_argument(
        "--tz",
        default=DEFAULT_CONFIG.reporting_timezone,
        help="Reporting timezone (IANA name)",
    )
    return common


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        prog="trade_analytics",
        description="Trade Analytics - Trading Performance Analysis",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    common = _common_parser()
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("summary", parents=[common], help="Show totals")

    periods_parser = subparsers.add_parser("periods", parents=[common], help="Totals by period")
    periods_parser.add_argument(
        "-g", "--granularity",
        choices=GRANULARITIES,
        default=DEFAULT_CONFIG.granularity,
    )

    groups_parser = subparsers.add_parser("groups", parents=[common], help="Group summaries")
    groups_parser.add_argument("dimension", choices=DIMENSIONS)

    subparsers.add_parser("profit", parents=[common], help="Profit analysis")
    subparsers.add_parser("positions", parents=[common], help="Open positions")
    subparsers.add_parser("verify", parents=[common], help="Verify snapshot data")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    commands = {
        "summary": cmd_summary,
        "periods": cmd_periods,
        "groups": cmd_groups,
        "profit": cmd_profit,
        "positions": cmd_positions,
        "verify": cmd_verify,
    }

    try:
        return commands[args.command](args)
    except RepositoryError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DATA
    except ValueError as e:
        print(f"Invalid arguments: {e}", file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
