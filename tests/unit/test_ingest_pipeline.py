"""
Unit tests for the ingest pipeline.
"""

import io

import pytest

from transaction_processor.batch import IngestPipeline
from transaction_processor.core.errors import MalformedInput, StoreUnavailable
from transaction_processor.observability.metrics import REGISTRY
from transaction_processor.store import InMemorySnapshotStore


class FailingStore(InMemorySnapshotStore):
    """Store that cannot be written"""

    def replace(self, records):
        raise StoreUnavailable("replace", "connection refused")


class RecordingStore(InMemorySnapshotStore):
    """Store remembering how many times it was written"""

    def __init__(self):
        super().__init__()
        self.replace_calls = 0

    def replace(self, records):
        self.replace_calls += 1
        super().replace(records)


def sample(name, labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestIngestPipeline:
    """Tests for IngestPipeline"""

    def test_ingest_stores_raw_rows_and_counts(self, csv_stream):
        store = InMemorySnapshotStore()
        rows = [["Alice", "1111", "100"], ["", "2222", "5"], ["Bob", "3333", "abc"]]

        result = IngestPipeline(store).ingest(csv_stream(rows))

        assert result.total_records == 3
        assert result.valid_records == 1
        assert result.malformed_records == 2
        assert result.duration_seconds >= 0
        assert store.current() == [
            {"Account Name": "Alice", "Card Number": "1111", "Transaction Amount": "100"},
            {"Account Name": "", "Card Number": "2222", "Transaction Amount": "5"},
            {"Account Name": "Bob", "Card Number": "3333", "Transaction Amount": "abc"},
        ]

    def test_store_written_once_per_ingest(self, csv_stream):
        store = RecordingStore()

        IngestPipeline(store).ingest(csv_stream([["Alice", "1", "1"]] * 10))

        assert store.replace_calls == 1

    def test_header_only_upload_replaces_with_empty_snapshot(self, csv_stream):
        store = InMemorySnapshotStore()
        store.replace([{"Account Name": "Old"}])

        result = IngestPipeline(store).ingest(csv_stream([]))

        assert result.total_records == 0
        assert store.current() == []

    def test_malformed_input_leaves_snapshot_untouched(self, csv_stream):
        store = RecordingStore()
        pipeline = IngestPipeline(store)
        pipeline.ingest(csv_stream([["Alice", "1", "1"]]))
        before = store.current()

        with pytest.raises(MalformedInput):
            pipeline.ingest(io.BytesIO(b""))

        assert store.current() == before
        assert store.replace_calls == 1

    def test_undecodable_upload_leaves_snapshot_untouched(self, csv_stream):
        store = InMemorySnapshotStore()
        pipeline = IngestPipeline(store)
        pipeline.ingest(csv_stream([["Alice", "1", "1"]]))
        before = store.current()

        with pytest.raises(MalformedInput):
            pipeline.ingest(io.BytesIO(b"Account Name\nAlice\n\xff\n"))

        assert store.current() == before

    def test_store_unavailable_propagates(self, csv_stream):
        with pytest.raises(StoreUnavailable):
            IngestPipeline(FailingStore()).ingest(csv_stream([["Alice", "1", "1"]]))

    def test_metrics_recorded(self, csv_stream):
        success_before = sample("ledger_ingests_total", {"status": "success"})
        failed_before = sample("ledger_ingests_total", {"status": "malformed_input"})
        malformed_before = sample("ledger_records_ingested_total", {"classification": "malformed"})

        pipeline = IngestPipeline(InMemorySnapshotStore())
        pipeline.ingest(csv_stream([["Alice", "1", "1"], ["", "1", "1"]]))
        with pytest.raises(MalformedInput):
            pipeline.ingest(io.BytesIO(b""))

        assert sample("ledger_ingests_total", {"status": "success"}) == success_before + 1
        assert sample("ledger_ingests_total", {"status": "malformed_input"}) == failed_before + 1
        assert sample("ledger_records_ingested_total", {"classification": "malformed"}) == malformed_before + 1

    def test_ingest_file(self, test_data_dir):
        store = InMemorySnapshotStore()

        result = IngestPipeline(store).ingest_file(f"{test_data_dir}/transactions.csv")

        assert result.total_records == 8
        assert result.valid_records == 5
        assert result.malformed_records == 3

    def test_ingest_missing_file_raises_malformed_input(self, tmp_path):
        with pytest.raises(MalformedInput, match="Cannot open"):
            IngestPipeline(InMemorySnapshotStore()).ingest_file(tmp_path / "absent.csv")
