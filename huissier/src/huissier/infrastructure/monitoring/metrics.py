"""
Prometheus metrics collection.
"""

from prometheus_client import Counter, Gauge, Histogram

# ============================================================
# HTTP Metrics
# ============================================================

http_requests_total = Counter(
    "huissier_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "huissier_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

http_errors_total = Counter(
    "huissier_http_errors_total",
    "Total HTTP errors",
    ["method", "endpoint", "error_type"],
)

# ============================================================
# Verification Metrics
# ============================================================

verifications_total = Counter(
    "huissier_verifications_total",
    "Verification attempts by final outcome",
    ["outcome"],
)

verification_duration_seconds = Histogram(
    "huissier_verification_duration_seconds",
    "End-to-end verification duration in seconds",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

nonces_issued_total = Counter(
    "huissier_nonces_issued_total",
    "Total nonces issued",
)

nonce_consumptions_total = Counter(
    "huissier_nonce_consumptions_total",
    "Nonce consumption results",
    ["result"],
)

# ============================================================
# Upstream Metrics (Solana RPC, Telegram Bot API)
# ============================================================

upstream_requests_total = Counter(
    "huissier_upstream_requests_total",
    "Total upstream requests",
    ["service", "operation", "status"],
)

upstream_request_duration_seconds = Histogram(
    "huissier_upstream_request_duration_seconds",
    "Upstream request duration in seconds",
    ["service", "operation"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

circuit_breaker_state = Gauge(
    "huissier_circuit_breaker_state",
    "Circuit breaker state (0=closed, 1=open, 2=half_open)",
    ["service"],
)

# ============================================================
# Reconciler Metrics
# ============================================================

join_events_total = Counter(
    "huissier_join_events_total",
    "Join events processed by reconciliation outcome",
    ["outcome"],
)

join_feed_errors_total = Counter(
    "huissier_join_feed_errors_total",
    "Join feed transport failures",
)
