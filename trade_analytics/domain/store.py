"""Execution Store: Immutable snapshot of ingested executions.

The store is the single raw input of every analytics pass. It is built
once from raw records; records that fail validation never enter the
store and are reported as diagnostics instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from itertools import groupby
from typing import Any, Iterable, Iterator, Mapping
from zoneinfo import ZoneInfo

from trade_analytics.domain.models import Diagnostic, Execution

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("execution_id", "account", "symbol", "quantity", "price", "timestamp")


def _parse_timestamp(value: Any, assume_tz: ZoneInfo | timezone) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if isinstance(value, datetime) and value.tzinfo is None:
        value = value.replace(tzinfo=assume_tz)
    return value


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_number(value: Any, field_name: str) -> Any:
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            raise ValueError(f"{field_name} is not a number: {value!r}") from None
    return value


def execution_from_record(
    record: Mapping[str, Any],
    assume_tz: ZoneInfo | timezone = timezone.utc,
) -> Execution:
    """Build a validated Execution from a loosely-typed record.

    Args:
        record: Mapping with at least REQUIRED_FIELDS
        assume_tz: Zone applied to naive timestamps

    Raises:
        ValueError: If a field is missing or invalid
    """
    missing = [k for k in REQUIRED_FIELDS if _is_blank(record.get(k))]
    if missing:
        raise ValueError(f"missing fields: {', '.join(missing)}")

    commission = record.get("commission")
    return Execution(
        execution_id=str(record["execution_id"]),
        account=str(record["account"]),
        symbol=str(record["symbol"]).strip(),
        quantity=_parse_number(record["quantity"], "quantity"),
        price=_parse_number(record["price"], "price"),
        timestamp=_parse_timestamp(record["timestamp"], assume_tz),
        commission=0.0 if _is_blank(commission) else _parse_number(commission, "commission"),
        instrument_type=str(record.get("instrument_type") or "stock"),
        currency=str(record.get("currency") or "USD"),
    )


@dataclass(frozen=True, slots=True)
class ExecutionStore:
    """Immutable, ingestion-ordered collection of executions.

    Attributes:
        executions: Valid executions in ingestion order
        diagnostics: Records rejected during ingestion

    Example:
        >>> store = ExecutionStore.from_records(rows)
        >>> for (account, symbol), execs in store.partitions():
        ...     print(account, symbol, len(execs))
    """

    executions: tuple[Execution, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.executions, tuple):
            object.__setattr__(self, "executions", tuple(self.executions))
        if not isinstance(self.diagnostics, tuple):
            object.__setattr__(self, "diagnostics", tuple(self.diagnostics))

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        assume_timezone: str = "UTC",
    ) -> ExecutionStore:
        """Validate raw records into a store.

        Malformed records (zero quantity, bad price, bad timestamp, ...)
        are excluded and reported; they never abort ingestion.
        """
        assume_tz = ZoneInfo(assume_timezone)
        executions: list[Execution] = []
        diagnostics: list[Diagnostic] = []

        for index, record in enumerate(records):
            ref = str(record.get("execution_id") or f"row {index}")
            try:
                executions.append(execution_from_record(record, assume_tz))
            except (ValueError, TypeError) as e:
                logger.warning("Skipping malformed execution %s: %s", ref, e)
                diagnostics.append(Diagnostic("malformed_execution", str(e), ref))

        if diagnostics:
            logger.info(
                "Ingested %d executions, rejected %d", len(executions), len(diagnostics)
            )
        return cls(tuple(executions), tuple(diagnostics))

    def __len__(self) -> int:
        return len(self.executions)

    def partitions(self) -> Iterator[tuple[tuple[str, str], list[Execution]]]:
        """Yield ((account, symbol), executions) ordered by timestamp.

        Sorting is stable, so executions sharing a timestamp keep their
        ingestion order.
        """
        def key(e: Execution) -> tuple[str, str]:
            return (e.account, e.symbol)

        for part_key, group in groupby(sorted(self.executions, key=key), key=key):
            yield part_key, sorted(group, key=lambda e: e.timestamp)

    def accounts(self) -> list[str]:
        return sorted({e.account for e in self.executions})

    def symbols(self) -> list[str]:
        return sorted({e.symbol for e in self.executions})
