"""Infrastructure layer for trade analytics.

Contains:
- config: Data paths and analysis configuration
- repositories: Snapshot access abstractions
"""

from trade_analytics.infrastructure.config import (
    DataPaths,
    AnalysisConfig,
    DEFAULT_PATHS,
    DEFAULT_CONFIG,
)
from trade_analytics.infrastructure.repositories import (
    Repository,
    RepositoryError,
    ExecutionRepository,
    InstrumentRepository,
    AnnotationRepository,
)

__all__ = [
    # Config
    "DataPaths",
    "AnalysisConfig",
    "DEFAULT_PATHS",
    "DEFAULT_CONFIG",
    # Repositories
    "Repository",
    "RepositoryError",
    "ExecutionRepository",
    "InstrumentRepository",
    "AnnotationRepository",
]
