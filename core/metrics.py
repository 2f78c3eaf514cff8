"""
Prometheus metrics for the license gate service.

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

# License metrics
licenses_issued_total = Counter(
    "licenses_issued_total",
    "Total licenses issued",
)

licenses_activated_total = Counter(
    "licenses_activated_total",
    "Total licenses bound to a machine",
)

license_issue_rejections_total = Counter(
    "license_issue_rejections_total",
    "Issue requests declined",
    ["reason"],
)

license_activation_rejections_total = Counter(
    "license_activation_rejections_total",
    "Activation requests declined",
    ["reason"],
)

# Content scanning
content_scans_total = Counter(
    "content_scans_total",
    "Content classification requests",
    ["verdict"],
)

# Cache metrics
cache_hits_total = Counter(
    "cache_hits_total",
    "Total cache hits",
    ["cache_key"],
)

cache_misses_total = Counter(
    "cache_misses_total",
    "Total cache misses",
    ["cache_key"],
)

# Error metrics
errors_total = Counter(
    "errors_total",
    "Total errors",
    ["error_type", "endpoint"],
)
