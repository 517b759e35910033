from typing import Optional

TIMEOUT_EXISTING_TASK = "existing_task"
TIMEOUT_QUEUE_SUBMIT = "queue_submit"
TIMEOUT_TASK_EXECUTION = "task_execution"

NO_WEATHER_DATA = "no weather data available"


class AggregatorError(Exception):
    pass


class AggregatorStateError(AggregatorError):
    """Raised for lifecycle calls that are illegal in the current state."""


class NotRunningError(AggregatorError):
    def __init__(self, message: str = "not running"):
        super().__init__(message)


class QueueFullError(AggregatorError):
    def __init__(self, queue_size: int):
        self.queue_size = queue_size
        super().__init__(f"task queue is full (capacity {queue_size})")


class HandlerTimeoutError(AggregatorError):
    def __init__(self, reason: str, timeout: float):
        self.reason = reason
        self.timeout = timeout
        super().__init__(f"request timed out after {timeout:g}s ({reason})")


class NoProvidersError(AggregatorError):
    def __init__(self, message: str = NO_WEATHER_DATA):
        super().__init__(message)


class AggregationError(AggregatorError):
    """Unexpected worker failure, surfaced to every waiter of the task."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)
