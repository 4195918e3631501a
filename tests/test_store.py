"""Unit tests for domain/store.py.

Tests verify:
1. Loosely-typed records are parsed and validated
2. Malformed records become diagnostics without aborting ingestion
3. Partitions are time ordered with stable tie-breaking
"""

from datetime import datetime, timedelta

import pytest

from trade_analytics.domain.store import ExecutionStore, execution_from_record

from factories import BASE, UTC, ex


def _record(**overrides) -> dict:
    record = {
        "execution_id": "e1",
        "account": "U1",
        "symbol": "AAPL",
        "quantity": "100",
        "price": "10.5",
        "commission": "-1.0",
        "timestamp": "2024-03-04T14:30:00Z",
    }
    record.update(overrides)
    return record


# =============================================================================
# execution_from_record Tests
# =============================================================================

class TestExecutionFromRecord:
    """Tests for execution_from_record function."""

    def test_parses_strings(self):
        """String fields are parsed into numbers and an aware timestamp."""
        e = execution_from_record(_record())
        assert e.quantity == 100.0
        assert e.price == 10.5
        assert e.commission == -1.0
        assert e.timestamp == datetime(2024, 3, 4, 14, 30, tzinfo=UTC)

    def test_naive_timestamp_gets_assumed_zone(self):
        """Naive timestamps take the assumed zone."""
        e = execution_from_record(_record(timestamp="2024-03-04T09:30:00"))
        assert e.timestamp.utcoffset() == timedelta(0)

    def test_missing_commission_defaults_to_zero(self):
        """Commission is optional."""
        e = execution_from_record(_record(commission=None))
        assert e.commission == 0.0

    def test_missing_required_field(self):
        """Required fields must be present."""
        with pytest.raises(ValueError, match="missing fields: price"):
            execution_from_record(_record(price=None))

    def test_blank_required_field(self):
        """Whitespace-only values count as missing, not as zero."""
        with pytest.raises(ValueError, match="missing fields: price"):
            execution_from_record(_record(price="  "))

    def test_blank_commission_defaults_to_zero(self):
        """A blank commission cell means no commission."""
        assert execution_from_record(_record(commission=" ")).commission == 0.0

    def test_bad_number(self):
        """Unparseable numbers raise ValueError."""
        with pytest.raises(ValueError, match="quantity is not a number"):
            execution_from_record(_record(quantity="ten"))


# =============================================================================
# ExecutionStore Tests
# =============================================================================

class TestExecutionStore:
    """Tests for ExecutionStore."""

    def test_from_records_excludes_malformed(self):
        """Zero quantity and bad timestamps are reported, not fatal."""
        store = ExecutionStore.from_records([
            _record(execution_id="ok1"),
            _record(execution_id="zero", quantity="0"),
            _record(execution_id="badts", timestamp="yesterday"),
            _record(execution_id="blank", price=" "),
            _record(execution_id="ok2", quantity="-100"),
        ])
        assert [e.execution_id for e in store.executions] == ["ok1", "ok2"]
        assert [d.reference for d in store.diagnostics] == ["zero", "badts", "blank"]
        assert all(d.kind == "malformed_execution" for d in store.diagnostics)

    def test_empty_store(self):
        """An empty store has no partitions."""
        store = ExecutionStore()
        assert len(store) == 0
        assert list(store.partitions()) == []

    def test_partitions_by_account_and_symbol(self):
        """Executions are partitioned by (account, symbol)."""
        store = ExecutionStore((
            ex(1, 1.0, symbol="B", account="U1"),
            ex(1, 1.0, symbol="A", account="U2"),
            ex(1, 1.0, symbol="A", account="U1"),
        ))
        keys = [key for key, _ in store.partitions()]
        assert keys == [("U1", "A"), ("U1", "B"), ("U2", "A")]

    def test_partition_time_order_is_stable(self):
        """Ties on timestamp keep ingestion order."""
        later = ex(1, 1.0, 5, execution_id="later")
        tie_a = ex(1, 1.0, 0, execution_id="tie-a")
        tie_b = ex(-1, 1.0, 0, execution_id="tie-b")
        store = ExecutionStore((later, tie_a, tie_b))
        (_, executions), = store.partitions()
        assert [e.execution_id for e in executions] == ["tie-a", "tie-b", "later"]

    def test_accounts_and_symbols(self):
        """Distinct accounts and symbols are sorted."""
        store = ExecutionStore((
            ex(1, 1.0, symbol="B", account="U2"),
            ex(1, 1.0, symbol="A", account="U1"),
        ))
        assert store.accounts() == ["U1", "U2"]
        assert store.symbols() == ["A", "B"]

    def test_frozen(self):
        """ExecutionStore should be immutable."""
        store = ExecutionStore((ex(1, 1.0, at=BASE),))
        with pytest.raises(AttributeError):
            store.executions = ()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
