"""Execution Repository: Access to the normalized executions file.

Reads executions.parquet (preferred) or executions.csv with polars and
builds an ExecutionStore. Malformed rows become diagnostics on the
store; only a missing file or missing columns raise.

Columns:
    execution_id, account, symbol, quantity, price, timestamp  (required)
    commission, instrument_type, currency                      (optional)
"""

from pathlib import Path

import polars as pl

from trade_analytics.domain.store import REQUIRED_FIELDS, ExecutionStore
from trade_analytics.infrastructure.config import (
    DataPaths,
    DEFAULT_PATHS,
    AnalysisConfig,
    DEFAULT_CONFIG,
)
from trade_analytics.infrastructure.repositories.base import Repository, RepositoryError


class ExecutionRepository(Repository[ExecutionStore]):
    """Repository for the execution snapshot.

    Example:
        >>> repo = ExecutionRepository(DataPaths(root=Path("data")))
        >>> store = repo.get_all()
        >>> len(store), len(store.diagnostics)
        (1200, 3)
    """

    def __init__(
        self,
        paths: DataPaths = DEFAULT_PATHS,
        config: AnalysisConfig = DEFAULT_CONFIG,
    ):
        super().__init__(paths)
        self._config = config

    @property
    def path(self) -> Path:
        return self._paths.executions

    def get_frame(self) -> pl.DataFrame:
        """Load the raw executions table."""
        path = self.path
        if not path.exists():
            raise RepositoryError("Execution data not found", str(path))
        try:
            if path.suffix == ".parquet":
                df = pl.read_parquet(path)
            else:
                # all text, so ids such as "007" survive; numbers parse per row
                df = pl.read_csv(path, infer_schema=False)
        except Exception as e:
            raise RepositoryError(f"Failed to read execution data: {e}", str(path)) from e

        missing = [c for c in REQUIRED_FIELDS if c not in df.columns]
        if missing:
            raise RepositoryError(f"Missing columns: {', '.join(missing)}", str(path))
        return df

    def _load(self, path: Path) -> ExecutionStore:
        df = self.get_frame()
        return ExecutionStore.from_records(
            df.iter_rows(named=True),
            assume_timezone=self._config.assume_timezone,
        )
