"""
Unit tests for the report generator.
"""

from decimal import Decimal

import pytest

from transaction_processor.core.errors import StoreUnavailable
from transaction_processor.reports import ReportGenerator
from transaction_processor.store import SnapshotStore


class UnavailableStore(SnapshotStore):
    """Store whose every operation fails as if the database were down"""

    def replace(self, records):
        raise StoreUnavailable("replace", "connection refused")

    def current(self):
        raise StoreUnavailable("current", "connection refused")

    def clear(self):
        raise StoreUnavailable("clear", "connection refused")


def row(account, amount, card="c"):
    record = {"Account Name": account, "Transaction Amount": amount}
    if card is not None:
        record["Card Number"] = card
    return record


class TestReportGenerator:
    """Tests for ReportGenerator"""

    def test_empty_snapshot_gives_empty_views(self, memory_store):
        reports = ReportGenerator(memory_store)

        assert reports.account_report() == {}
        assert reports.malformed_report() == []
        assert reports.collections_report() == []

    def test_account_report_excludes_malformed(self, memory_store):
        memory_store.replace([row("Alice", "10"), row("", "50"), row("Bob", "abc")])

        assert ReportGenerator(memory_store).account_report() == {"Alice": {"c": Decimal("10")}}

    def test_malformed_report_returns_rows_verbatim_in_order(self, memory_store):
        bad_1 = {"Account Name": "", "Transaction Amount": "50"}
        bad_2 = {"Account Name": "Bob", "Transaction Amount": "abc", "Extra": "x"}
        memory_store.replace([bad_1, row("Alice", "1"), bad_2])

        assert ReportGenerator(memory_store).malformed_report() == [bad_1, bad_2]

    def test_collections_flags_any_negative_transaction(self, memory_store):
        memory_store.replace([
            row("Alice", "100"),
            row("Alice", "-1"),
            row("Bob", "5"),
        ])

        # Alice's aggregate is positive but one transaction is negative
        assert ReportGenerator(memory_store).collections_report() == ["Alice"]

    def test_collections_deduplicates_in_first_seen_order(self, memory_store):
        memory_store.replace([
            row("Zed", "-1", card="1"),
            row("Amy", "-2"),
            row("Zed", "-3", card="2"),
        ])

        assert ReportGenerator(memory_store).collections_report() == ["Zed", "Amy"]

    def test_collections_ignores_malformed_negative_rows(self, memory_store):
        memory_store.replace([row("", "-10"), row("Bob", "-abc")])

        assert ReportGenerator(memory_store).collections_report() == []

    def test_zero_amount_is_not_negative(self, memory_store):
        memory_store.replace([row("Alice", "-0.00"), row("Bob", "0")])

        assert ReportGenerator(memory_store).collections_report() == []

    def test_reports_recompute_after_replace(self, memory_store):
        reports = ReportGenerator(memory_store)
        memory_store.replace([row("Alice", "1")])
        assert reports.account_report() == {"Alice": {"c": Decimal("1")}}

        memory_store.replace([row("Bob", "-2")])

        assert reports.account_report() == {"Bob": {"c": Decimal("-2")}}
        assert reports.collections_report() == ["Bob"]

    def test_store_unavailable_propagates(self):
        reports = ReportGenerator(UnavailableStore())

        with pytest.raises(StoreUnavailable):
            reports.account_report()
        with pytest.raises(StoreUnavailable):
            reports.malformed_report()
        with pytest.raises(StoreUnavailable):
            reports.collections_report()
