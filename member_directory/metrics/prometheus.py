# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics — single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "directory_requests_total",
    "Total HTTP requests to the member directory",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "directory_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "directory_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
MEMBERS_CREATED = Counter(
    "directory_members_created_total",
    "Total members created",
)
ROLES_CREATED = Counter(
    "directory_roles_created_total",
    "Total roles created",
)
OPERATION_FAILURES = Counter(
    "directory_operation_failures_total",
    "Directory operations rejected or failed, by error kind",
    ["kind"],
)
MEMBERS_TOTAL = Gauge(
    "directory_members",
    "Number of members in the directory",
)
ACTIVE_MEMBERS = Gauge(
    "directory_active_members",
    "Number of active members in the directory",
)
ROLES_TOTAL = Gauge(
    "directory_roles",
    "Number of roles in the directory",
)
