"""Prometheus metrics for bill activity, validation failures and request latency"""

from prometheus_client import Counter, Histogram

# Engine operation metrics
operation_counter = Counter(
    "friends_trip_operation_total",
    "Settlement engine operations",
    ["operation", "outcome"],  # success | invalid | not_found | conflict | storage_error | error
)

validation_failure_counter = Counter(
    "friends_trip_validation_failures_total",
    "Rejected inputs by field",
    ["field"],
)

expense_amount_histogram = Histogram(
    "friends_trip_expense_amount_cents",
    "Amounts of recorded expenses",
    buckets=[1_000, 5_000, 10_000, 50_000, 100_000, 500_000, 1_000_000],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_operation(operation: str, outcome: str = "success") -> None:
    """Count one engine operation by result"""
    operation_counter.labels(operation=operation, outcome=outcome).inc()


def record_validation_failure(field: str) -> None:
    validation_failure_counter.labels(field=field).inc()


def record_expense_amount(amount_cents: int) -> None:
    expense_amount_histogram.observe(amount_cents)
