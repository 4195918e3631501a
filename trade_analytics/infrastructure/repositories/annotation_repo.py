"""Annotation Repository: Per-trade tags, strategy, risk and MFE.

Provides read access to annotations.json, keyed by trade id
("{account}:{symbol}:{ordinal}"):

    {"U1:AAPL:1": {"tags": ["breakout"], "strategy": "orb",
                   "risk": 100.0, "mfe": 250.0}}

The file is optional.
"""

from pathlib import Path

from trade_analytics.domain.models import TradeAnnotation
from trade_analytics.infrastructure.repositories.base import (
    Repository,
    RepositoryError,
    read_json_object,
)


def _optional_float(value) -> float | None:
    return float(value) if value is not None else None


class AnnotationRepository(Repository[dict[str, TradeAnnotation]]):
    """Repository for trade annotations."""

    optional = True

    @property
    def path(self) -> Path:
        return self._paths.annotations

    def _empty(self) -> dict[str, TradeAnnotation]:
        return {}

    def _load(self, path: Path) -> dict[str, TradeAnnotation]:
        annotations: dict[str, TradeAnnotation] = {}
        for trade_id, entry in read_json_object(path).items():
            if not isinstance(entry, dict):
                raise RepositoryError(f"Entry for {trade_id} must be an object", str(path))
            tags = entry.get("tags") or []
            if isinstance(tags, str):
                tags = [tags]
            try:
                annotations[trade_id] = TradeAnnotation(
                    tags=frozenset(str(t) for t in tags),
                    strategy=entry.get("strategy"),
                    risk=_optional_float(entry.get("risk")),
                    mfe=_optional_float(entry.get("mfe")),
                )
            except (TypeError, ValueError) as e:
                raise RepositoryError(f"Invalid annotation for {trade_id}: {e}", str(path)) from e
        return annotations

    def get_tags(self) -> list[str]:
        """All distinct tags in use."""
        return sorted({t for a in self.get_all().values() for t in a.tags})
