"""Prometheus metrics: request count/latency, existence checks, signed URLs, short-circuits."""
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total requests",
    ["method", "path", "status_class"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "Request latency",
    ["method", "path"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)
EXISTENCE_CHECK_TOTAL = Counter(
    "storage_existence_checks_total",
    "Object existence probes",
    ["outcome"],  # present | not_found | forbidden | moved | malformed | unknown
)
SIGNED_URL_TOTAL = Counter(
    "storage_signed_urls_total",
    "Signed URL requests",
    ["result"],  # success | failure
)
SHORT_CIRCUIT_TOTAL = Counter(
    "batch_short_circuits_total",
    "Batches aborted on a fatal reason",
    ["reason"],
)
BATCH_SIZE = Histogram(
    "batch_size",
    "Keys per resolved batch",
    buckets=(1, 2, 5, 10, 25, 50, 100, 250),
)


def _status_class(status: int) -> str:
    if status < 200:
        return "1xx"
    if status < 300:
        return "2xx"
    if status < 400:
        return "3xx"
    if status < 500:
        return "4xx"
    return "5xx"


def _normalize_path(path: str) -> str:
    # Bucket and key are unbounded; collapse to route templates
    parts = path.strip("/").split("/", 1)
    if not parts[0]:
        return "/"
    if len(parts) == 1:
        return "/{bucket}"
    return "/{bucket}/{key}"


def record_request(method: str, path: str, status_code: int, latency_seconds: float) -> None:
    path = _normalize_path(path or "/")
    sc = _status_class(status_code)
    REQUEST_COUNT.labels(method=method, path=path, status_class=sc).inc()
    REQUEST_LATENCY.labels(method=method, path=path).observe(latency_seconds)


def record_existence_check(outcome: str) -> None:
    EXISTENCE_CHECK_TOTAL.labels(outcome=outcome).inc()


def record_signed_url(success: bool) -> None:
    SIGNED_URL_TOTAL.labels(result="success" if success else "failure").inc()


def record_short_circuit(reason: str) -> None:
    SHORT_CIRCUIT_TOTAL.labels(reason=reason).inc()


def record_batch_size(size: int) -> None:
    BATCH_SIZE.observe(size)


def get_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
