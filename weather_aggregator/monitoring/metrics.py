from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest
from prometheus_client import CONTENT_TYPE_LATEST

__all__ = ['AggregatorMetrics', 'CONTENT_TYPE_LATEST']


class AggregatorMetrics:
    """Prometheus collectors for one aggregator instance.

    Each instance owns its registry so several aggregators (tests, reloads)
    never collide on metric names.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        self.cache_hits = Counter(
            'weather_cache_hits', 'Forecast cache hits', registry=self.registry
        )
        self.cache_misses = Counter(
            'weather_cache_misses', 'Forecast cache misses', registry=self.registry
        )
        self.provider_calls = Counter(
            'weather_provider_calls', 'Weather provider invocations',
            ['service', 'outcome'], registry=self.registry
        )
        self.rejections = Counter(
            'weather_aggregator_rejections', 'Requests refused by the aggregator',
            ['reason'], registry=self.registry
        )
        self.request_duration = Histogram(
            'http_request_duration_seconds', 'HTTP request latency',
            ['method', 'route', 'status'], registry=self.registry
        )
        self.requests_in_flight = Gauge(
            'http_requests_in_flight', 'HTTP requests currently being served', registry=self.registry
        )

    def record_cache_hit(self):
        self.cache_hits.inc()

    def record_cache_miss(self):
        self.cache_misses.inc()

    def record_provider_call(self, service: str, success: bool):
        self.provider_calls.labels(service=service, outcome='success' if success else 'error').inc()

    def record_rejection(self, reason: str):
        self.rejections.labels(reason=reason).inc()

    def record_request(self, method: str, route: str, status: int, duration: float):
        self.request_duration.labels(method=method, route=route, status=str(status)).observe(duration)

    def _value(self, name: str, **labels) -> float:
        return self.registry.get_sample_value(name, labels or None) or 0.0

    def snapshot(self) -> dict:
        return {
            'cache_hits': int(self._value('weather_cache_hits_total')),
            'cache_misses': int(self._value('weather_cache_misses_total')),
            'queue_full': int(self._value('weather_aggregator_rejections_total', reason='queue_full')),
            'timeouts': int(self._value('weather_aggregator_rejections_total', reason='timeout')),
        }

    def provider_calls_for(self, service: str, success: bool = True) -> int:
        outcome = 'success' if success else 'error'
        return int(self._value('weather_provider_calls_total', service=service, outcome=outcome))

    def render(self) -> bytes:
        return generate_latest(self.registry)
