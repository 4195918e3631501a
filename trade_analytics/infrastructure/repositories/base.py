"""Base Repository: Cached, file-backed snapshot access.

Each repository loads one snapshot file, caches the parsed value and
reports every I/O or decoding failure as RepositoryError carrying the
offending path. Optional files resolve to an empty default instead.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Generic, TypeVar

from trade_analytics.infrastructure.config import DataPaths, DEFAULT_PATHS

T = TypeVar("T")

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Exception raised when repository operations fail."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(f"{message}" + (f" (path: {path})" if path else ""))


class Repository(ABC, Generic[T]):
    """Abstract base class for snapshot repositories.

    Subclasses name their file via ``path`` and parse it in ``_load``.
    When ``optional`` is set, a missing file yields ``_empty()``.
    """

    optional: bool = False

    def __init__(self, paths: DataPaths = DEFAULT_PATHS):
        self._paths = paths
        self._cache: T | None = None

    @property
    @abstractmethod
    def path(self) -> Path:
        """File backing this repository."""

    @abstractmethod
    def _load(self, path: Path) -> T:
        """Parse the file; may raise any exception."""

    def _empty(self) -> T:
        raise RepositoryError("File not found", str(self.path))

    def get_all(self) -> T:
        """Load (once) and return the parsed snapshot.

        Raises:
            RepositoryError: If the file is missing or cannot be parsed
        """
        if self._cache is not None:
            return self._cache

        path = self.path
        if not path.exists():
            if self.optional:
                logger.debug("Optional file %s not found, using empty default", path)
                self._cache = self._empty()
                return self._cache
            raise RepositoryError("File not found", str(path))

        try:
            self._cache = self._load(path)
        except RepositoryError:
            raise
        except Exception as e:
            raise RepositoryError(f"Failed to read {path.name}: {e}", str(path)) from e
        return self._cache

    def clear_cache(self) -> None:
        """Clear cached data."""
        self._cache = None


def read_json_object(path: Path) -> dict[str, Any]:
    """Read a JSON file whose top level must be an object."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise RepositoryError("Expected a JSON object at top level", str(path))
    return data
