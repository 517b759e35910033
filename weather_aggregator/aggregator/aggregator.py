import asyncio
import threading
import time
from typing import Callable, List, Optional, Sequence

from loguru import logger

from weather_aggregator.config.settings import WeatherSettings
from weather_aggregator.context import get_request_id
from weather_aggregator.monitoring.metrics import AggregatorMetrics
from weather_aggregator.weather.base import WeatherProvider
from weather_aggregator.weather.registry import build_providers
from .cache import ForecastCache
from .coalescing import CoalescingTable
from .errors import (
    AggregationError, AggregatorError, AggregatorStateError, HandlerTimeoutError,
    NotRunningError, QueueFullError,
    TIMEOUT_EXISTING_TASK, TIMEOUT_QUEUE_SUBMIT, TIMEOUT_TASK_EXECUTION,
)
from .fanout import fetch_forecasts
from .keys import coordinate_key
from .models import AggregatorState, FetchTask, ForecastBundle, TaskResult
from .task_queue import TaskQueue
from .worker import AggregatorWorker

DEFAULT_SHUTDOWN_TIMEOUT = 30.0


class WeatherAggregator:
    """Cached, request-coalescing, bounded fan-out over the weather providers.

    ``get_weather`` serves from the TTL cache when it can. On a miss it
    attaches the caller to the in-flight fetch for the same coordinates, or
    creates one and offers it to the task queue without blocking. A full
    queue is reported as ``QueueFullError``; a caller whose handler timeout
    elapses gets ``HandlerTimeoutError`` while the fetch keeps going and
    still fills the cache.
    """

    def __init__(self, settings: WeatherSettings, providers: Optional[Sequence[WeatherProvider]] = None,
                 metrics: Optional[AggregatorMetrics] = None, clock: Callable[[], float] = time.monotonic):
        if settings.handler_timeout <= 0:
            raise ValueError("handler_timeout must be greater than zero")

        self.settings = settings
        self.worker_count = settings.workers
        self.queue_size = settings.queue_size
        self.handler_timeout = float(settings.handler_timeout)

        self.cache = ForecastCache(settings.cache_ttl, clock=clock)
        self.coalescing = CoalescingTable()
        self.metrics = metrics or AggregatorMetrics()
        self.task_queue: Optional[TaskQueue] = None
        self.workers: List[AggregatorWorker] = []

        self._providers: List[WeatherProvider] = list(providers) if providers is not None else build_providers(settings)
        self._providers_lock = threading.Lock()
        self._worker_tasks: List[asyncio.Task] = []
        self._state = AggregatorState.IDLE
        self._started_at: Optional[float] = None
        self.log = logger.bind(component="aggregator")

    @property
    def state(self) -> AggregatorState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is AggregatorState.RUNNING

    @property
    def providers(self) -> List[WeatherProvider]:
        with self._providers_lock:
            return list(self._providers)

    async def start(self):
        if self._state is not AggregatorState.IDLE:
            raise AggregatorStateError(f"cannot start aggregator in state '{self._state.value}'")

        self.task_queue = TaskQueue(self.queue_size)
        for i in range(self.worker_count):
            worker = AggregatorWorker(self, i)
            self.workers.append(worker)
            self._worker_tasks.append(asyncio.create_task(worker.run(), name=f"weather-worker-{i}"))

        self._state = AggregatorState.RUNNING
        self._started_at = time.time()
        self.log.info(
            "Aggregator started with {} workers, queue capacity {}, providers: {}",
            self.worker_count, self.queue_size, ", ".join(p.name for p in self.providers) or "none"
        )

    async def stop(self, timeout: float = DEFAULT_SHUTDOWN_TIMEOUT) -> bool:
        """Stop admitting work and let the workers drain the queue.

        Returns False when ``timeout`` elapsed before every worker exited;
        those workers keep finishing their current tasks in the background.
        """
        if self._state in (AggregatorState.STOPPING, AggregatorState.STOPPED):
            return True
        if self._state is AggregatorState.IDLE:
            raise AggregatorStateError("cannot stop an aggregator that was never started")

        self._state = AggregatorState.STOPPING
        self.log.info("Stopping aggregator, {} tasks queued", self.task_queue.qsize())
        self.task_queue.close()

        drained = True
        if self._worker_tasks:
            _, pending = await asyncio.wait(self._worker_tasks, timeout=timeout)
            if pending:
                drained = False
                self.log.warning("Shutdown timed out after {:g}s, {} workers still finishing", timeout, len(pending))

        self._state = AggregatorState.STOPPED
        if drained:
            self.log.info("Aggregator stopped")
        return drained

    def reload(self, settings: WeatherSettings, providers: Optional[Sequence[WeatherProvider]] = None):
        if settings.handler_timeout <= 0:
            raise ValueError("handler_timeout must be greater than zero")

        new_providers = list(providers) if providers is not None else build_providers(settings)
        with self._providers_lock:
            self._providers = new_providers

        self.cache.ttl = settings.cache_ttl
        self.handler_timeout = float(settings.handler_timeout)
        self.settings = settings

        if settings.workers != self.worker_count or settings.queue_size != self.queue_size:
            self.log.warning(
                "Worker count and queue size changes take effect on restart (running {}/{}, requested {}/{})",
                self.worker_count, self.queue_size, settings.workers, settings.queue_size
            )
        self.log.info("Aggregator configuration reloaded, providers: {}", ", ".join(p.name for p in new_providers) or "none")

    async def get_weather(self, lat: float, lon: float) -> ForecastBundle:
        key = coordinate_key(lat, lon)

        cached = self.cache.get(key)
        if cached is not None:
            self.metrics.record_cache_hit()
            return cached
        self.metrics.record_cache_miss()

        if self._state is not AggregatorState.RUNNING:
            raise NotRunningError()

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.handler_timeout

        waiter, created = self.coalescing.join_or_create(key)
        if not created:
            self.log.debug("Joined in-flight task for {}", key)
            return await self._await_result(waiter, deadline, TIMEOUT_EXISTING_TASK)

        task = FetchTask(key=key, lat=lat, lon=lon, request_id=get_request_id())
        self._submit(task, deadline)
        return await self._await_result(waiter, deadline, TIMEOUT_TASK_EXECUTION)

    def _submit(self, task: FetchTask, deadline: float):
        error: Optional[AggregatorError] = None

        if asyncio.get_running_loop().time() >= deadline:
            error = HandlerTimeoutError(TIMEOUT_QUEUE_SUBMIT, self.handler_timeout)
            self.metrics.record_rejection("timeout")
        elif not self.task_queue.put_nowait(task):
            error = QueueFullError(self.queue_size)
            self.metrics.record_rejection("queue_full")

        if error is not None:
            # never reached a worker, so the entry is ours to clear
            self.coalescing.notify(task.key, TaskResult(error=error))
            self.log.bind(request_id=task.request_id).warning("Task {} not admitted: {}", task.key, error)
            raise error

    async def _await_result(self, waiter: asyncio.Future, deadline: float, reason: str) -> ForecastBundle:
        remaining = max(deadline - asyncio.get_running_loop().time(), 0.0)
        try:
            result: TaskResult = await asyncio.wait_for(asyncio.shield(waiter), timeout=remaining)
        except asyncio.TimeoutError:
            self.metrics.record_rejection("timeout")
            raise HandlerTimeoutError(reason, self.handler_timeout) from None

        if result.error is not None:
            if isinstance(result.error, AggregatorError):
                raise result.error
            raise AggregationError(str(result.error), cause=result.error)
        return result.bundle

    async def fetch_weather_data(self, lat: float, lon: float, request_id: Optional[str] = None) -> ForecastBundle:
        return await fetch_forecasts(self.providers, lat, lon, metrics=self.metrics, request_id=request_id)

    def get_cache_stats(self) -> dict:
        return self.cache.get_stats()

    def get_stats(self) -> dict:
        stats = {
            'state': self._state.value,
            'workers': self.worker_count,
            'handler_timeout_seconds': self.handler_timeout,
            'providers': [p.name for p in self.providers],
            'in_flight_keys': len(self.coalescing),
            'uptime_seconds': int(time.time() - self._started_at) if self._started_at else 0,
            'cache': self.cache.get_stats(),
            'worker_stats': [w.get_stats() for w in self.workers],
        }
        if self.task_queue is not None:
            stats['queue'] = self.task_queue.get_stats()
        else:
            stats['queue'] = {'queue_depth': 0, 'queue_capacity': self.queue_size}
        return stats
