"""Business metrics for Prometheus monitoring."""
from prometheus_client import Counter

# Capability metrics
capability_requests_total = Counter(
    "capability_requests_total",
    "Total capability requests by outcome",
    labelnames=["capability", "channel", "outcome"],  # outcome: allowed, not_entitled, capacity_exceeded, rate_limited, unavailable
)

# Ledger metrics
usage_records_written_total = Counter(
    "usage_records_written_total",
    "Total usage increments persisted",
    labelnames=["capability"],
)

usage_record_failures_total = Counter(
    "usage_record_failures_total",
    "Total usage increments that failed to persist",
    labelnames=["capability"],
)
