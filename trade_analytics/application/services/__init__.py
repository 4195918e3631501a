"""Application Services for trade analytics.

Services orchestrate domain logic over explicit snapshots.

Available services:
- AnalyticsEngine: Stateless full recompute of a Snapshot
- AnalyticsSession: Top-level context owning inputs and the latest result
- load_snapshot: Build a Snapshot from the repositories
"""

from trade_analytics.application.services.engine import (
    AnalyticsEngine,
    AnalyticsResult,
    AnalyticsSession,
    Snapshot,
)
from trade_analytics.application.services.loader import load_session, load_snapshot

__all__ = [
    "AnalyticsEngine",
    "AnalyticsResult",
    "AnalyticsSession",
    "Snapshot",
    "load_session",
    "load_snapshot",
]
