"""Prometheus metrics for commands, migration, persistence and advisory calls"""

from prometheus_client import Counter, Histogram

# Command metrics
command_counter = Counter(
    "debt_tracker_commands_total",
    "Commands handled",
    ["command", "outcome"],  # outcome: ok | rejected | not_found | cancelled
)

# Startup migration
migration_counter = Counter(
    "debt_tracker_migrations_total",
    "Store loads by migration outcome",
    ["outcome"],  # current | migrated | empty | failed | corrupt
)

# Persistence
persistence_failures_counter = Counter(
    "debt_tracker_persistence_failures_total",
    "Failed blob store writes",
)

# Advisory metrics
advisory_counter = Counter(
    "debt_tracker_advisory_requests_total",
    "Advisory requests by outcome",
    ["outcome"],  # applied | stale | fallback | unconfigured
)

advisory_latency_histogram = Histogram(
    "debt_tracker_advisory_latency_seconds",
    "Advisory service response time",
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_command(command: str, outcome: str = "ok") -> None:
    """Count one handled command"""
    command_counter.labels(command=command, outcome=outcome).inc()
