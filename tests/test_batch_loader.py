import math

import pytest

from fakes import FakeTableStore, make_docs, reject_rows
from migration.batch_loader import BatchLoader, create_batches
from migration.errors import ConfigurationError, GenericInsertError
from migration.transformer import normalize_documents

SCHEMA = [{"name": "_id", "type": "STRING"}]


@pytest.mark.parametrize("n, size", [(0, 1), (1, 1), (5, 2), (10, 5), (250, 100), (7, 100)])
def test_batches_partition_rows(n, size):
    rows = list(range(n))
    batches = create_batches(rows, size)
    assert [r for b in batches for r in b] == rows
    assert len(batches) == math.ceil(n / size)
    assert all(0 < len(b) <= size for b in batches)


@pytest.mark.parametrize("size", [0, -1, 2.5, "10", True, None])
def test_invalid_batch_size_is_configuration_error(size):
    with pytest.raises(ConfigurationError):
        create_batches([1, 2, 3], size)


def test_load_inserts_batches_in_order():
    rows = normalize_documents(make_docs(5))
    store = FakeTableStore()
    outcome = BatchLoader(store, "ds", "t").load(rows, SCHEMA, batch_size=2)
    assert outcome.succeeded
    assert outcome.rows_loaded == 5
    assert outcome.batches_loaded == 3
    assert [len(b) for b in store.batches] == [2, 2, 1]
    assert [r["id"] for b in store.batches for r in b] == [r["id"] for r in rows]


def test_partial_failure_reports_rejected_row_and_stops():
    rows = normalize_documents(make_docs(6))
    first_batch = rows[:3]
    store = FakeTableStore(insert_errors={0: reject_rows(first_batch, {1: "duplicate key"})})
    outcome = BatchLoader(store, "ds", "t").load(rows, SCHEMA, batch_size=3)

    assert outcome.status == "FAILED"
    assert outcome.error_type == "PartialInsertError"
    assert len(outcome.failed_rows) == 1
    assert outcome.failed_rows[0].row_id == rows[1]["id"]
    assert outcome.failed_rows[0].errors == [{"reason": "duplicate key"}]
    # the second batch is never sent
    assert len(store.batches) == 1


def test_generic_failure_aborts_without_retry():
    rows = normalize_documents(make_docs(5))
    store = FakeTableStore(insert_errors={1: GenericInsertError("quota exceeded")})
    outcome = BatchLoader(store, "ds", "t").load(rows, SCHEMA, batch_size=2)

    assert outcome.status == "FAILED"
    assert outcome.error_type == "GenericInsertError"
    assert "quota exceeded" in outcome.message
    assert outcome.failed_rows == []
    assert outcome.rows_loaded == 2
    assert outcome.batches_loaded == 1
    assert len(store.batches) == 2


def test_empty_rows_succeed_without_inserts():
    store = FakeTableStore()
    outcome = BatchLoader(store, "ds", "t").load([], SCHEMA)
    assert outcome.succeeded
    assert store.batches == []
