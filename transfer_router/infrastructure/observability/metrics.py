"""Prometheus metrics for routing outcomes, path cache and transfer data fetches"""

from prometheus_client import Counter, Histogram

# Routing metrics
routing_counter = Counter(
    "transfer_routing_total",
    "Total route calculations",
    ["outcome"],  # routed | past_deadline | insufficient_funds | no_path | invalid_input
)

risky_routing_counter = Counter(
    "transfer_routing_all_risky_total",
    "Calculations where every selected route scored above the high-risk threshold",
)

route_fee_histogram = Histogram(
    "transfer_route_fees_cents",
    "Total fees of the selected cheapest route",
    buckets=[0, 100, 300, 500, 1000, 2500, 5000],
)

# Path cache
path_cache_invalidations_counter = Counter(
    "path_cache_invalidations_total",
    "Explicit path cache resets",
)

# Transfer data service
transfer_data_fetch_failures_counter = Counter(
    "transfer_data_fetch_failures_total",
    "Failed transfer data snapshot fetches",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_routing_outcome(outcome: str, all_routes_risky: bool = False, cheapest_fees_cents: int | None = None) -> None:
    """Record a calculation outcome and, for routed results, its risk flag and cheapest fees"""
    routing_counter.labels(outcome=outcome).inc()

    if all_routes_risky:
        risky_routing_counter.inc()

    if cheapest_fees_cents is not None:
        route_fee_histogram.observe(cheapest_fees_cents)
