"""Monitoring configuration for the word drill backend."""
from prometheus_client import Counter, Histogram, start_http_server

# Request metrics
requests_total = Counter(
    "wordrill_requests_total",
    "Total number of handled requests",
    ["method", "status"],
)

request_duration = Histogram(
    "wordrill_request_duration_seconds",
    "Duration of handled requests in seconds",
    ["method"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)

# Drill metrics
words_served = Counter(
    "wordrill_words_served_total",
    "Total number of words served to users",
    ["source"],
)

outcomes_recorded = Counter(
    "wordrill_outcomes_recorded_total",
    "Total number of word outcomes recorded",
    ["correct"],
)

# Store metrics
store_errors = Counter(
    "wordrill_store_errors_total",
    "Total number of document store errors",
    ["operation"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
