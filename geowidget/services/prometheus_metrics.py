"""
Prometheus metrics for geowidget
"""

from prometheus_client import Counter, Gauge, Histogram, generate_latest, CONTENT_TYPE_LATEST

from ..config import API_VERSION

# Build info
BUILD_INFO = Gauge(
    'geowidget_build_info',
    'Build information',
    ['version']
)

# Request counters
REQUESTS_TOTAL = Counter(
    'geowidget_requests_total',
    'Total number of requests',
    ['status_class', 'path_group']
)

REQUEST_LATENCY = Histogram(
    'geowidget_request_latency_seconds',
    'Request latency in seconds',
    ['path_group'],
    buckets=[0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

# Lookup outcomes
LOOKUPS_TOTAL = Counter(
    'geowidget_lookups_total',
    'Total number of address resolutions by outcome',
    ['outcome']
)

DATASET_LOOKUPS_TOTAL = Counter(
    'geowidget_dataset_lookups_total',
    'Per-dataset lookup results',
    ['dataset', 'result']
)

# Dataset availability
DATASET_LOADED = Gauge(
    'geowidget_dataset_loaded',
    'Dataset load status (1=loaded, 0=unavailable)',
    ['dataset']
)


class PrometheusMetrics:
    """Prometheus metrics manager"""

    def __init__(self):
        BUILD_INFO.labels(version=API_VERSION).set(1)

    def increment_requests(self, status_code: int, path: str = ""):
        """Increment request counter by status class"""
        REQUESTS_TOTAL.labels(
            status_class=self._status_class(status_code),
            path_group=self._path_group(path),
        ).inc()

    def observe_request_latency(self, path: str, seconds: float):
        REQUEST_LATENCY.labels(path_group=self._path_group(path)).observe(seconds)

    def increment_lookups(self, outcome: str):
        LOOKUPS_TOTAL.labels(outcome=outcome).inc()

    def increment_dataset_lookups(self, dataset: str, result: str):
        DATASET_LOOKUPS_TOTAL.labels(dataset=dataset, result=result).inc()

    def set_dataset_loaded(self, dataset: str, loaded: bool):
        DATASET_LOADED.labels(dataset=dataset).set(1 if loaded else 0)

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format"""
        return generate_latest()

    def get_content_type(self) -> str:
        """Get content type for Prometheus metrics"""
        return CONTENT_TYPE_LATEST

    @staticmethod
    def _status_class(status_code: int) -> str:
        if 200 <= status_code < 300:
            return "2xx"
        elif 400 <= status_code < 500:
            return "4xx"
        elif 500 <= status_code < 600:
            return "5xx"
        return "other"

    @staticmethod
    def _path_group(path: str) -> str:
        # explicit addresses are unbounded, group them under one label
        if path.startswith("/address/") and path != "/address/":
            return "/address/{address}"
        if path in ("/address/", "/address", "/health", "/ping", "/metrics/prometheus"):
            return path
        return "other"


# Global metrics instance
prometheus_metrics = PrometheusMetrics()
