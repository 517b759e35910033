from .aggregator import WeatherAggregator, DEFAULT_SHUTDOWN_TIMEOUT
from .cache import ForecastCache
from .coalescing import CoalescingTable
from .errors import (
    AggregatorError,
    AggregatorStateError,
    AggregationError,
    HandlerTimeoutError,
    NoProvidersError,
    NotRunningError,
    QueueFullError,
)
from .keys import coordinate_key
from .models import AggregatorState, FetchTask, ForecastBundle, TaskResult
from .task_queue import TaskQueue

__all__ = [
    'WeatherAggregator',
    'DEFAULT_SHUTDOWN_TIMEOUT',
    'ForecastCache',
    'CoalescingTable',
    'TaskQueue',
    'AggregatorError',
    'AggregatorStateError',
    'AggregationError',
    'HandlerTimeoutError',
    'NoProvidersError',
    'NotRunningError',
    'QueueFullError',
    'coordinate_key',
    'AggregatorState',
    'FetchTask',
    'ForecastBundle',
    'TaskResult'
]
