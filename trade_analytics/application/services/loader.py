"""Snapshot Loader: Assemble engine inputs from the repositories."""

from trade_analytics.application.services.engine import AnalyticsSession, Snapshot
from trade_analytics.domain.filters import FilterCriteria
from trade_analytics.infrastructure.config import (
    DataPaths,
    DEFAULT_PATHS,
    AnalysisConfig,
    DEFAULT_CONFIG,
)
from trade_analytics.infrastructure.repositories import (
    AnnotationRepository,
    ExecutionRepository,
    InstrumentRepository,
)


def load_snapshot(
    criteria: FilterCriteria | None = None,
    paths: DataPaths = DEFAULT_PATHS,
    config: AnalysisConfig = DEFAULT_CONFIG,
    granularity: str | None = None,
) -> Snapshot:
    """Load executions, instruments and annotations into a Snapshot.

    Raises:
        RepositoryError: If the executions file is missing or unreadable
    """
    return Snapshot(
        store=ExecutionRepository(paths, config).get_all(),
        criteria=criteria or FilterCriteria(timezone=config.reporting_timezone),
        instruments=InstrumentRepository(paths).get_all(),
        annotations=AnnotationRepository(paths).get_all(),
        granularity=granularity or config.granularity,
        dimensions=config.dimensions,
    )


def load_session(
    paths: DataPaths = DEFAULT_PATHS,
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> AnalyticsSession:
    """Session pre-populated from the repositories, not yet computed."""
    snapshot = load_snapshot(paths=paths, config=config)
    return AnalyticsSession(
        store=snapshot.store,
        criteria=snapshot.criteria,
        instruments=snapshot.instruments,
        annotations=snapshot.annotations,
        config=config,
    )
