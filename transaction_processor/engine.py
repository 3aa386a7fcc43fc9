"""
Engine facade exposing ingest, the three reports and reset.

Transport shells (CLI, HTTP) talk only to TransactionEngine; the snapshot
store is handed in explicitly so tests can use the in-memory store and
deployments the PostgreSQL one.
"""

from typing import BinaryIO

from transaction_processor.batch.pipeline import IngestPipeline
from transaction_processor.batch.readers import CSVReader
from transaction_processor.config import Settings
from transaction_processor.core.models import AccountBalanceView, IngestResult, RawRecord
from transaction_processor.core.rules import FieldMapConfigLoader, TransactionClassifier
from transaction_processor.observability.logger import get_logger, set_log_level
from transaction_processor.observability.metrics import snapshot_records
from transaction_processor.reports import ReportGenerator
from transaction_processor.store import SnapshotStore, create_store

logger = get_logger(__name__)


class TransactionEngine:
    """
    Ties the ingest pipeline and report generator to one snapshot store.
    """

    def __init__(
        self,
        store: SnapshotStore,
        reader: CSVReader | None = None,
        classifier: TransactionClassifier | None = None,
    ):
        self.store = store
        self.classifier = classifier or TransactionClassifier()
        self.pipeline = IngestPipeline(store, reader=reader, classifier=self.classifier)
        self.reports = ReportGenerator(store, classifier=self.classifier)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TransactionEngine":
        """
        Build an engine (store, reader, classifier) from settings and apply
        the configured log level.

        Raises:
            ConfigurationError: If the store settings are incomplete
            StoreUnavailable: If the PostgreSQL store cannot be reached
        """
        set_log_level(settings.log_level)

        field_map = None
        if settings.field_map_path is not None:
            field_map = FieldMapConfigLoader(settings.field_map_path).load()

        return cls(
            store=create_store(settings),
            reader=CSVReader(delimiter=settings.csv_delimiter, encoding=settings.csv_encoding),
            classifier=TransactionClassifier(field_map),
        )

    def ingest(self, stream: BinaryIO, source: str = "upload") -> IngestResult:
        return self.pipeline.ingest(stream, source=source)

    def account_report(self) -> AccountBalanceView:
        return self.reports.account_report()

    def malformed_report(self) -> list[RawRecord]:
        return self.reports.malformed_report()

    def collections_report(self) -> list[str]:
        return self.reports.collections_report()

    def reset(self) -> None:
        """Clear the snapshot. Safe to call repeatedly."""
        self.store.clear()
        snapshot_records.set(0)
        logger.info("Snapshot reset")

    def close(self) -> None:
        self.store.close()
