"""
Prometheus metrics for the license service.

Custom metrics for business logic and performance monitoring.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Verification metrics
license_verifications_total = Counter(
    "license_verifications_total",
    "Total license verifications by decision",
    ["decision"],
)

license_commit_conflicts_total = Counter(
    "license_commit_conflicts_total",
    "Conditional writes lost to a concurrent writer",
)

license_lockouts_total = Counter(
    "license_lockouts_total",
    "Committed IP-mismatch lockouts",
)

lockout_notifications_failed_total = Counter(
    "lockout_notifications_failed_total",
    "Lockout notifications that could not be dispatched",
)

# Issuance metrics
licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total licenses issued",
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
