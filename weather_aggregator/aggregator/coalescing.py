import asyncio
import threading
from typing import Dict, List, Tuple

from .models import TaskResult


class CoalescingTable:
    """Tracks callers waiting on the single in-flight fetch for each key.

    Each waiter is a one-shot future. The worker resolves every waiter of a
    key with the same result and drops the key in the same critical section;
    waiters that already gave up are skipped. A task the queue refused is
    cleared through ``notify`` as well, so joiners see the admission error.
    """

    def __init__(self):
        self._pending: Dict[str, List[asyncio.Future]] = {}
        self._lock = threading.Lock()

    def join_or_create(self, key: str) -> Tuple[asyncio.Future, bool]:
        waiter = asyncio.get_running_loop().create_future()
        with self._lock:
            waiters = self._pending.get(key)
            if waiters is not None:
                waiters.append(waiter)
                return waiter, False

            self._pending[key] = [waiter]
            return waiter, True

    def notify(self, key: str, result: TaskResult) -> int:
        delivered = 0
        with self._lock:
            waiters = self._pending.pop(key, [])
            for waiter in waiters:
                if waiter.done():
                    continue
                waiter.set_result(result)
                delivered += 1
        return delivered

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._pending

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)
