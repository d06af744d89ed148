import os
from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, write_to_textfile

# One registry per process; a run exports it once at exit.
REGISTRY: CollectorRegistry = CollectorRegistry()

# Check metrics
messages_collected_total = Counter(
    "messages_collected_total",
    "Messages collected from trigger events",
    labelnames=("event",),
    registry=REGISTRY,
)
commits_excluded_total = Counter(
    "commits_excluded_total",
    "Commits dropped from checking by policy",
    labelnames=("reason",),
    registry=REGISTRY,
)
messages_checked_total = Counter(
    "messages_checked_total",
    "Messages checked against the pattern",
    labelnames=("result",),
    registry=REGISTRY,
)
checks_total = Counter(
    "checks_total",
    "Aggregate check outcomes",
    labelnames=("result",),
    registry=REGISTRY,
)

# GitHub API metrics
github_api_requests_total = Counter(
    "github_api_requests_total",
    "Outbound GitHub API requests",
    labelnames=("endpoint", "status"),
    registry=REGISTRY,
)
github_api_latency_seconds = Histogram(
    "github_api_latency_seconds",
    "Latency of GitHub API requests",
    labelnames=("endpoint",),
    registry=REGISTRY,
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)

# Build info (set from environment)
service_info = Gauge(
    "service_info",
    "Service build/version info labeled on 1",
    labelnames=("version",),
    registry=REGISTRY,
)
service_info.labels(version=os.getenv("SERVICE_VERSION", "dev")).set(1)


def write_metrics(path: str) -> None:
    """Dump the registry for a node_exporter textfile collector."""
    write_to_textfile(path, REGISTRY)
