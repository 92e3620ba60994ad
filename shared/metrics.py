"""
Shared metrics configuration for the Recipe Access Layer.

Metrics are declared per service in ``METRIC_DEFINITIONS`` and exported from
each service's own ``/metrics`` endpoint.
"""

import time
from contextlib import contextmanager
from typing import Any, Dict, Optional, Tuple

from prometheus_client import CollectorRegistry, Counter, Histogram, Info

# name -> (type, description, label names)
MetricDefinition = Tuple[type, str, Tuple[str, ...]]

COMMON_METRICS: Dict[str, MetricDefinition] = {
    "http_requests_total": (Counter, "Total HTTP requests", ("method", "endpoint", "status_code")),
    "http_request_duration_seconds": (Histogram, "HTTP request duration in seconds", ("method", "endpoint")),
    "health_check_total": (Counter, "Total health check requests", ("status",)),
    "errors_total": (Counter, "Total errors by error code", ("error_type", "service")),
    "business_events_total": (Counter, "Total business events", ("event_type", "service")),
}

METRIC_DEFINITIONS: Dict[str, Dict[str, MetricDefinition]] = {
    "auth": {
        "registrations_total": (Counter, "Registration attempts by outcome", ("outcome",)),
        "logins_total": (Counter, "Login attempts by outcome", ("outcome",)),
        "tokens_issued_total": (Counter, "Credentials issued", ()),
        "password_hash_duration_seconds": (
            Histogram, "Password hashing and verification duration in seconds", ("operation",)
        ),
    },
    "resource": {
        "token_verifications_total": (Counter, "Bearer credential checks by outcome", ("outcome",)),
    },
}


class MetricsCollector:
    """Centralized metrics collector for services.

    Each collector owns its registry, so two services (or two test instances
    of one service) in the same process export independent values.
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry or CollectorRegistry()
        self._metrics: Dict[str, Any] = {}

        info = Info("service", "Service information", registry=self.registry)
        info.info({"service": service_name, "version": "1.0.0"})

        definitions = dict(COMMON_METRICS)
        definitions.update(METRIC_DEFINITIONS.get(service_name, {}))
        for name, (metric_type, description, labels) in definitions.items():
            self._metrics[name] = metric_type(name, description, labels, registry=self.registry)

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def record_http_request(self, method: str, endpoint: str, status_code: int, duration: float):
        self._labelled("http_requests_total", method=method, endpoint=endpoint,
                       status_code=str(status_code)).inc()
        self._labelled("http_request_duration_seconds", method=method, endpoint=endpoint).observe(duration)

    def record_health_check(self, status: str):
        self._labelled("health_check_total", status=status).inc()

    def record_error(self, error_type: str):
        self._labelled("errors_total", error_type=error_type, service=self.service_name).inc()

    def record_business_event(self, event_type: str):
        self._labelled("business_events_total", event_type=event_type, service=self.service_name).inc()

    @contextmanager
    def time_operation(self, metric_name: str, **labels):
        """Observe the duration of the enclosed block on a histogram."""
        start_time = time.perf_counter()
        try:
            yield
        finally:
            if metric_name in self._metrics:
                self._labelled(metric_name, **labels).observe(time.perf_counter() - start_time)

    def increment_counter(self, metric_name: str, **labels):
        """Increment a counter; unknown names are ignored."""
        if metric_name in self._metrics:
            self._labelled(metric_name, **labels).inc()

    def _labelled(self, metric_name: str, **labels):
        metric = self._metrics[metric_name]
        return metric.labels(**labels) if labels else metric


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
