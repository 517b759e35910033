import asyncio
from typing import Optional

from .models import FetchTask


class TaskQueue:
    """Bounded multi-producer/multi-consumer queue of fetch tasks.

    Producers never block: ``put_nowait`` either accepts the task or reports
    the queue as full. After ``close`` no task is accepted, and ``get`` keeps
    handing out what is already queued before returning ``None``.
    """

    def __init__(self, maxsize: int):
        self.maxsize = maxsize
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._closed = asyncio.Event()
        self.stats = {
            'enqueued': 0,
            'rejected': 0,
            'dequeued': 0
        }

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def put_nowait(self, task: FetchTask) -> bool:
        if self.closed:
            self.stats['rejected'] += 1
            return False

        try:
            self._queue.put_nowait(task)
        except asyncio.QueueFull:
            self.stats['rejected'] += 1
            return False

        self.stats['enqueued'] += 1
        return True

    async def get(self) -> Optional[FetchTask]:
        while True:
            try:
                task = self._queue.get_nowait()
                self.stats['dequeued'] += 1
                return task
            except asyncio.QueueEmpty:
                if self.closed:
                    return None

            getter = asyncio.ensure_future(self._queue.get())
            closer = asyncio.ensure_future(self._closed.wait())
            try:
                await asyncio.wait({getter, closer}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                closer.cancel()
                if not getter.done():
                    getter.cancel()

            if getter.done() and not getter.cancelled():
                self.stats['dequeued'] += 1
                return getter.result()

    def task_done(self):
        self._queue.task_done()

    def close(self):
        self._closed.set()

    def qsize(self) -> int:
        return self._queue.qsize()

    def get_pressure(self) -> float:
        return self._queue.qsize() / self.maxsize

    def get_stats(self) -> dict:
        return {
            'queue_depth': self._queue.qsize(),
            'queue_capacity': self.maxsize,
            'queue_pressure': f"{self.get_pressure():.2f}",
            'closed': self.closed,
            **self.stats
        }
