"""Instrument Repository: Contract metadata per symbol.

Provides read access to instruments.json:

    {"ES": {"multiplier": 50, "tick_size": 0.25},
     "AAPL": {"multiplier": 1}}

The file is optional; symbols without an entry fall back to multiplier 1
downstream and are flagged approximate.
"""

from pathlib import Path

from trade_analytics.domain.models import InstrumentMeta
from trade_analytics.infrastructure.repositories.base import (
    Repository,
    RepositoryError,
    read_json_object,
)


class InstrumentRepository(Repository[dict[str, InstrumentMeta]]):
    """Repository for instrument metadata.

    Example:
        >>> repo = InstrumentRepository()
        >>> repo.get_multiplier("ES")
        50.0
    """

    optional = True

    @property
    def path(self) -> Path:
        return self._paths.instruments

    def _empty(self) -> dict[str, InstrumentMeta]:
        return {}

    def _load(self, path: Path) -> dict[str, InstrumentMeta]:
        instruments: dict[str, InstrumentMeta] = {}
        for symbol, entry in read_json_object(path).items():
            if not isinstance(entry, dict):
                raise RepositoryError(f"Entry for {symbol} must be an object", str(path))
            try:
                instruments[symbol] = InstrumentMeta(
                    symbol=symbol,
                    multiplier=float(entry.get("multiplier", 1.0)),
                    tick_size=(
                        float(entry["tick_size"]) if entry.get("tick_size") is not None else None
                    ),
                )
            except ValueError as e:
                raise RepositoryError(f"Invalid metadata for {symbol}: {e}", str(path)) from e
        return instruments

    def get_multiplier(self, symbol: str) -> float | None:
        """Multiplier for a symbol, or None when unknown."""
        meta = self.get_all().get(symbol)
        return meta.multiplier if meta else None
