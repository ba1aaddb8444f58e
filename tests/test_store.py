"""
Tests for store.py - parameter binding and error wrapping.
"""

import pytest

from jobly.errors import ErrorKind, StoreFailure
from jobly.store import bind_params


class TestBindParams:

    def test_positional_to_named(self):
        assert bind_params(["a", None, 3]) == {"p1": "a", "p2": None, "p3": 3}

    def test_empty(self):
        assert bind_params([]) == {}


class TestQuery:

    def test_returns_rows_as_dicts(self, seeded_store):
        rows = seeded_store.query("SELECT handle FROM companies WHERE num_employees >= :p1 ORDER BY handle", [2])
        assert rows == [{"handle": "c2"}, {"handle": "c3"}]

    def test_statement_without_rows(self, seeded_store):
        assert seeded_store.query("UPDATE companies SET name = :p1 WHERE handle = :p2", ["X", "c1"]) == []

    def test_counts_statements(self, store, test_logger):
        store.query("SELECT 1 AS one")
        assert test_logger.metrics["statements_executed"] == 1

    def test_constraint_violation_flagged(self, seeded_store, test_logger):
        with pytest.raises(StoreFailure) as exc:
            seeded_store.query(
                "INSERT INTO companies (handle, name, description) VALUES (:p1, :p2, :p3)",
                ["c1", "Dup", "d"],
            )
        assert exc.value.constraint_violation
        assert exc.value.kind is ErrorKind.STORE_FAILURE
        assert test_logger.metrics["statements_failed"] == 1

    def test_other_errors_not_flagged(self, store):
        with pytest.raises(StoreFailure) as exc:
            store.query("SELECT * FROM no_such_table")
        assert not exc.value.constraint_violation
        assert exc.value.status == 500

    def test_failed_statement_leaves_no_row(self, seeded_store):
        with pytest.raises(StoreFailure):
            seeded_store.query(
                "INSERT INTO jobs (title, salary, equity, company_handle) VALUES (:p1, :p2, :p3, :p4)",
                ["Ghost", 1, "0", "missing"],
            )
        assert seeded_store.query("SELECT id FROM jobs WHERE title = 'Ghost'") == []
