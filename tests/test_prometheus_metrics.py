"""
Tests for Prometheus metrics functionality
"""

import pytest
from geowidget.services.prometheus_metrics import prometheus_metrics, PrometheusMetrics


class TestPrometheusMetrics:
    """Test the PrometheusMetrics class."""

    def test_prometheus_metrics_initialization(self):
        """Test Prometheus metrics initializes correctly."""
        metrics = PrometheusMetrics()
        assert metrics is not None

    def test_increment_requests(self):
        """Test request counter increments."""
        metrics = PrometheusMetrics()
        metrics.increment_requests(200, "/address/8.8.8.8")
        metrics.increment_requests(400, "/address/nope")
        metrics.increment_requests(503, "/health")
        metrics.increment_requests(100)

    def test_lookup_counters(self):
        metrics = PrometheusMetrics()
        metrics.increment_lookups("resolved")
        metrics.increment_dataset_lookups("asn", "hit")
        metrics.set_dataset_loaded("city", False)

        text = metrics.get_metrics().decode("utf-8")
        assert 'geowidget_lookups_total{outcome="resolved"}' in text
        assert 'geowidget_dataset_lookups_total{dataset="asn",result="hit"}' in text
        assert 'geowidget_dataset_loaded{dataset="city"} 0.0' in text

    def test_get_metrics(self):
        """Test metrics retrieval."""
        metrics_data = prometheus_metrics.get_metrics()
        assert isinstance(metrics_data, bytes)
        text = metrics_data.decode('utf-8')
        assert '# HELP' in text
        assert '# TYPE' in text

    def test_get_content_type(self):
        """Test content type retrieval."""
        assert prometheus_metrics.get_content_type().startswith("text/plain")


@pytest.mark.parametrize("path,group", [
    ("/address/8.8.8.8", "/address/{address}"),
    ("/address/2001:db8::1", "/address/{address}"),
    ("/address/", "/address/"),
    ("/health", "/health"),
    ("/docs", "other"),
])
def test_path_group(path, group):
    assert PrometheusMetrics._path_group(path) == group
