"""
Prometheus metrics for the CMS gateway
"""

from prometheus_client import Counter, Gauge, Histogram, generate_latest, CONTENT_TYPE_LATEST

from .config import API_VERSION

BUILD_INFO = Gauge(
    'cms_gateway_build_info',
    'Build information',
    ['version']
)

REQUESTS_TOTAL = Counter(
    'cms_gateway_requests_total',
    'Gateway requests by routed resource, action and outcome',
    ['resource', 'action', 'outcome']
)

AUTH_FAILURES_TOTAL = Counter(
    'cms_gateway_auth_failures_total',
    'Credential validation failures',
    ['reason']
)

REQUEST_LATENCY = Histogram(
    'cms_gateway_request_latency_seconds',
    'Gateway request latency in seconds',
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

BUILD_INFO.labels(version=API_VERSION).set(1)

_KNOWN_RESOURCES = {"pages", "products", "blog", "forms", "submissions"}
_KNOWN_ACTIONS = {"list", "get", "create", "update", "submit"}


def record_request(resource, action, outcome: str, latency_s: float) -> None:
    # unbounded caller input must not become label values
    resource = resource if resource in _KNOWN_RESOURCES else "other"
    action = action if action in _KNOWN_ACTIONS else "other"
    REQUESTS_TOTAL.labels(resource=resource, action=action, outcome=outcome).inc()
    REQUEST_LATENCY.observe(latency_s)


def record_auth_failure(reason: str) -> None:
    AUTH_FAILURES_TOTAL.labels(reason=reason).inc()


def get_metrics() -> bytes:
    return generate_latest()


def get_content_type() -> str:
    return CONTENT_TYPE_LATEST
