"""Configuration: Centralized paths and settings.

This module provides:
- DataPaths: File paths for the normalized snapshot files
- AnalysisConfig: Parameters for the analytics pipeline

Directory Structure:
    data/
    ├── executions.parquet   # or executions.csv
    ├── instruments.json     # {symbol: {"multiplier": 50, "tick_size": 0.25}}
    └── annotations.json     # {trade_id: {"tags": [...], "risk": 100, ...}}
"""

from dataclasses import dataclass
from pathlib import Path

from trade_analytics.domain.grouping import DEFAULT_DURATION_BINS, DIMENSIONS


@dataclass(frozen=True)
class DataPaths:
    """File paths for snapshot data.

    Attributes:
        root: Directory holding the snapshot files
    """

    root: Path = Path("data")

    # --- Files ---

    @property
    def executions_parquet(self) -> Path:
        """Normalized executions (Parquet)."""
        return self.root / "executions.parquet"

    @property
    def executions_csv(self) -> Path:
        """Normalized executions (CSV)."""
        return self.root / "executions.csv"

    @property
    def executions(self) -> Path:
        """Executions file to load; Parquet wins when both exist."""
        if self.executions_parquet.exists():
            return self.executions_parquet
        return self.executions_csv

    @property
    def instruments(self) -> Path:
        """Instrument metadata (JSON)."""
        return self.root / "instruments.json"

    @property
    def annotations(self) -> Path:
        """Per-trade annotations (JSON)."""
        return self.root / "annotations.json"

    # --- Helper Methods ---

    def validate(self) -> list[str]:
        """Check which required paths are missing.

        Instrument metadata and annotations are optional.

        Returns:
            List of missing paths (empty if all exist)
        """
        missing = []

        if not self.root.exists():
            missing.append(str(self.root))
        if not self.executions.exists():
            missing.append(str(self.executions))

        return missing


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for the analytics pipeline.

    Attributes:
        reporting_timezone: Default IANA zone for dates and clock times
        assume_timezone: Zone applied to naive execution timestamps
        granularity: Default period size ("day", "week", "month")
        dimensions: Grouping dimensions computed by default
        duration_bins: (upper_seconds, label) holding-time bins
        time_of_day_minutes: Width of time-of-day windows
        r_bin_width: Histogram bin width for R-multiples
        efficiency_bin_width: Histogram bin width for efficiency
        histogram_max_bins: Cap on bins per histogram; wider data widens the bins
    """

    reporting_timezone: str = "UTC"
    assume_timezone: str = "UTC"
    granularity: str = "day"
    dimensions: tuple[str, ...] = DIMENSIONS
    duration_bins: tuple[tuple[float, str], ...] = DEFAULT_DURATION_BINS
    time_of_day_minutes: int = 60
    r_bin_width: float = 0.5
    efficiency_bin_width: float = 0.1
    histogram_max_bins: int = 200


# Default instances
DEFAULT_PATHS = DataPaths()
DEFAULT_CONFIG = AnalysisConfig()
