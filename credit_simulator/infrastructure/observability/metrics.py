"""Prometheus metrics for simulations, catalog health, and notification delivery"""

from prometheus_client import Counter, Histogram

# Simulation metrics
simulation_counter = Counter(
    "credit_simulation_total",
    "Total credit simulations run",
    ["product_type"],  # mortgage | personal | collateralized
)

qualified_products_histogram = Histogram(
    "credit_simulation_qualified_products",
    "Products an applicant qualified for per simulation",
    buckets=[0, 1, 2, 5, 10, 20, 50],
)

saved_simulation_counter = Counter(
    "credit_simulation_saved_total",
    "Simulations persisted with a reference number",
)

# Notification metrics
notification_latency_histogram = Histogram(
    "notification_latency_seconds",
    "Mail webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

notification_failure_counter = Counter(
    "notification_failures_total",
    "Failed notification deliveries",
)

# Catalog metrics
catalog_fetch_failures_counter = Counter(
    "catalog_fetch_failures_total",
    "Failed product catalog calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_simulation(product_type: str, qualified_count: int) -> None:
    """Record simulation volume per family and how many products qualified"""
    simulation_counter.labels(product_type=product_type).inc()
    qualified_products_histogram.observe(qualified_count)
