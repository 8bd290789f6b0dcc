"""Prometheus metrics for aggregations, writes, slips, and logins"""

from prometheus_client import Counter, Histogram

# Aggregation metrics
aggregation_counter = Counter(
    "jodjod_aggregation_total",
    "Summary and balance calculations served",
    ["kind", "outcome"],  # summary | balance, ok | empty
)

# Write metrics
transaction_write_counter = Counter(
    "jodjod_transaction_writes_total",
    "Transaction writes by operation",
    ["operation"],  # manual | slip | update | delete
)

slip_read_failures_counter = Counter(
    "jodjod_slip_read_failures_total",
    "Failed slip uploads or text extractions",
)

login_counter = Counter(
    "jodjod_login_total",
    "Login attempts",
    ["outcome"],  # success | failure
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_aggregation(kind: str, empty: bool) -> None:
    aggregation_counter.labels(kind=kind, outcome="empty" if empty else "ok").inc()
