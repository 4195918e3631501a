"""Data repositories for trade analytics.

Provides abstracted snapshot access through the Repository pattern:
- ExecutionRepository: Normalized executions -> ExecutionStore
- InstrumentRepository: Contract multipliers and tick sizes
- AnnotationRepository: Per-trade tags, strategy, risk and MFE
"""

from trade_analytics.infrastructure.repositories.base import Repository, RepositoryError
from trade_analytics.infrastructure.repositories.execution_repo import ExecutionRepository
from trade_analytics.infrastructure.repositories.instrument_repo import InstrumentRepository
from trade_analytics.infrastructure.repositories.annotation_repo import AnnotationRepository

__all__ = [
    "Repository",
    "RepositoryError",
    "ExecutionRepository",
    "InstrumentRepository",
    "AnnotationRepository",
]
