"""Application Layer: Use cases and service orchestration.

This layer contains:
- services/: Pipeline orchestration
  - engine.py: Full recompute and session context
  - loader.py: Snapshot assembly from repositories
"""

from trade_analytics.application.services import (
    AnalyticsEngine,
    AnalyticsResult,
    AnalyticsSession,
    Snapshot,
    load_session,
    load_snapshot,
)

__all__ = [
    "AnalyticsEngine",
    "AnalyticsResult",
    "AnalyticsSession",
    "Snapshot",
    "load_session",
    "load_snapshot",
]
