"""Prometheus metrics for monitoring report ingestion and API latency"""

from prometheus_client import Counter, Histogram

# Ingestion metrics
ingestion_counter = Counter(
    "creditsea_reports_ingested_total",
    "Credit report uploads by outcome",
    ["outcome"],  # stored | rejected | parse_error | store_error | error
)

extracted_accounts_histogram = Histogram(
    "creditsea_extracted_accounts",
    "Tradelines extracted per stored report",
    buckets=[0, 1, 2, 5, 10, 25, 50, 100],
)

deletion_counter = Counter(
    "creditsea_reports_deleted_total",
    "Credit reports deleted",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_ingestion(outcome: str, account_count: int = 0) -> None:
    """Record upload outcome; account distribution only for stored reports"""
    ingestion_counter.labels(outcome=outcome).inc()
    if outcome == "stored":
        extracted_accounts_histogram.observe(account_count)
