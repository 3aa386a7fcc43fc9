"""
Ingest pipeline orchestration.

Coordinates the flow: read → classify → replace snapshot
"""

from pathlib import Path
from typing import BinaryIO

from transaction_processor.batch.readers import CSVReader
from transaction_processor.core.errors import MalformedInput, StoreUnavailable
from transaction_processor.core.models import IngestResult, Transaction
from transaction_processor.core.rules import TransactionClassifier
from transaction_processor.observability.logger import get_logger, log_operation
from transaction_processor.observability.metrics import record_ingest, record_ingest_failure
from transaction_processor.store import SnapshotStore

logger = get_logger(__name__)


class IngestPipeline:
    """
    Replaces the current snapshot with the rows of one upload.

    Flow:
    1. Read every row from the stream (no store access while parsing)
    2. Classify rows to count valid and malformed records
    3. Replace the snapshot with the raw rows in one store write

    Ingest is all-or-nothing: a stream that fails to parse never reaches
    the store, leaving the previous snapshot untouched.
    """

    def __init__(
        self,
        store: SnapshotStore,
        reader: CSVReader | None = None,
        classifier: TransactionClassifier | None = None,
    ):
        """
        Initialize ingest pipeline.

        Args:
            store: Snapshot store receiving the rows
            reader: Stream reader (defaults to comma-separated UTF-8)
            classifier: Classifier used for ingest statistics
        """
        self.store = store
        self.reader = reader or CSVReader()
        self.classifier = classifier or TransactionClassifier()

    def ingest(self, stream: BinaryIO, source: str = "upload") -> IngestResult:
        """
        Ingest one upload.

        Args:
            stream: Binary stream with a header row followed by data rows
            source: Label for logs (file name or upload name)

        Returns:
            IngestResult with row counts

        Raises:
            MalformedInput: If the stream cannot be parsed; snapshot unchanged
            StoreUnavailable: If the store cannot be written; snapshot unchanged
        """
        try:
            with log_operation("Ingest upload", logger=logger, source=source) as op:
                records = self.reader.read_all(stream)
                classified = self.classifier.classify_all(records)
                valid = sum(1 for record in classified if isinstance(record, Transaction))

                self.store.replace(records)
        except MalformedInput:
            record_ingest_failure("malformed_input")
            raise
        except StoreUnavailable:
            record_ingest_failure("store_unavailable")
            raise

        result = IngestResult(
            total_records=len(records),
            valid_records=valid,
            malformed_records=len(records) - valid,
            duration_seconds=round(op.duration, 6),
        )
        record_ingest(result.valid_records, result.malformed_records, result.duration_seconds)

        logger.info(
            f"Ingested {result.total_records} records "
            f"({result.valid_records} valid, {result.malformed_records} malformed)",
            extra={"source": source, **result.model_dump()},
        )
        return result

    def ingest_file(self, file_path: str | Path) -> IngestResult:
        """
        Ingest a file from disk.

        Raises:
            MalformedInput: If the file cannot be opened or parsed
        """
        path = Path(file_path)
        try:
            stream = open(path, "rb")
        except OSError as e:
            record_ingest_failure("malformed_input")
            raise MalformedInput(f"Cannot open {path}: {e}") from e

        with stream:
            return self.ingest(stream, source=path.name)
