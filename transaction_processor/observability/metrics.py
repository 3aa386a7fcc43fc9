"""
Prometheus metrics for the transaction processor

Counters and histograms live on a private registry so that several engines
(or test runs) in one process do not collide with the default registry.
"""
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()


# =======================
# INGEST METRICS
# =======================

ingests_total = Counter(
    name="ledger_ingests_total",
    documentation="Total number of upload ingests",
    labelnames=["status"],  # status: success, malformed_input, store_unavailable
    registry=REGISTRY,
)

records_ingested_total = Counter(
    name="ledger_records_ingested_total",
    documentation="Total number of rows ingested",
    labelnames=["classification"],  # classification: valid, malformed
    registry=REGISTRY,
)

ingest_duration_seconds = Histogram(
    name="ledger_ingest_duration_seconds",
    documentation="Time spent parsing, classifying and storing an upload",
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0],
    registry=REGISTRY,
)

snapshot_records = Gauge(
    name="ledger_snapshot_records",
    documentation="Number of rows in the current snapshot",
    registry=REGISTRY,
)

# =======================
# REPORT AND STORE METRICS
# =======================

report_requests_total = Counter(
    name="ledger_report_requests_total",
    documentation="Total number of report computations",
    labelnames=["report"],  # report: accounts, malformed, collections
    registry=REGISTRY,
)

store_errors_total = Counter(
    name="ledger_store_errors_total",
    documentation="Total number of snapshot store failures",
    labelnames=["operation"],  # operation: replace, current, clear
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    """Content type of the exposition format."""
    return CONTENT_TYPE_LATEST


def record_ingest(valid_records: int, malformed_records: int, duration_seconds: float) -> None:
    """
    Record a successful ingest.

    Args:
        valid_records: Rows classified as transactions
        malformed_records: Rows classified as malformed
        duration_seconds: Ingest duration in seconds
    """
    ingests_total.labels(status="success").inc()
    records_ingested_total.labels(classification="valid").inc(valid_records)
    records_ingested_total.labels(classification="malformed").inc(malformed_records)
    ingest_duration_seconds.observe(duration_seconds)
    snapshot_records.set(valid_records + malformed_records)


def record_ingest_failure(status: str) -> None:
    """Record a failed ingest by failure kind."""
    ingests_total.labels(status=status).inc()


def record_report(report: str) -> None:
    report_requests_total.labels(report=report).inc()


def record_store_error(operation: str) -> None:
    store_errors_total.labels(operation=operation).inc()
