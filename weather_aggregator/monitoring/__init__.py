from .metrics import AggregatorMetrics, CONTENT_TYPE_LATEST
from .system_monitor import SystemMonitor

__all__ = ['AggregatorMetrics', 'CONTENT_TYPE_LATEST', 'SystemMonitor']
