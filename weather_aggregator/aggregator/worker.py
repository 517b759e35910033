import asyncio

from loguru import logger

from .errors import AggregationError, AggregatorError, NotRunningError
from .models import FetchTask, TaskResult


class AggregatorWorker:
    def __init__(self, aggregator, worker_id: int):
        self.aggregator = aggregator
        self.worker_id = worker_id
        self.processed = 0
        self.failed = 0
        self.log = logger.bind(component="worker", worker_id=worker_id)

    async def run(self):
        queue = self.aggregator.task_queue
        self.log.info("Worker started")

        while True:
            task = await queue.get()
            if task is None:
                self.log.info("Task queue closed, worker stopping")
                return

            try:
                await self.process_task(task)
            except Exception as e:
                self.log.exception("Worker error on task {}: {}", task.id, e)
            finally:
                queue.task_done()

    async def process_task(self, task: FetchTask):
        log = self.log.bind(task_id=task.id, request_id=task.request_id)
        log.debug("Processing task {} (queued {:.0f}ms)", task.key, task.age() * 1000)

        try:
            bundle = await self.aggregator.fetch_weather_data(task.lat, task.lon, request_id=task.request_id)
            result = TaskResult(bundle=bundle)
        except asyncio.CancelledError:
            self.aggregator.coalescing.notify(task.key, TaskResult(error=NotRunningError("aggregator stopped")))
            raise
        except AggregatorError as e:
            result = TaskResult(error=e)
        except Exception as e:
            log.exception("Unexpected failure while fetching {}", task.key)
            result = TaskResult(error=AggregationError(f"weather fetch failed: {e}", cause=e))

        if result.ok:
            self.aggregator.cache.set(task.key, result.bundle)
            self.processed += 1
            log.debug("Task completed successfully ({} services)", len(result.bundle.services))
        else:
            self.failed += 1
            log.error("Task failed: {}", result.error)

        delivered = self.aggregator.coalescing.notify(task.key, result)
        log.debug("Notified {} waiters for {}", delivered, task.key)

    def get_stats(self) -> dict:
        return {
            'worker_id': self.worker_id,
            'processed': self.processed,
            'failed': self.failed
        }
