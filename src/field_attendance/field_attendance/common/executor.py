from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class BoundedExecutor:
    """Thread pool with a hard cap on running + queued tasks.

    Submissions beyond ``max_workers + queue_capacity`` are dropped and logged.
    """

    def __init__(self, *, max_workers: int = 5, queue_capacity: int = 100, name: str = "worker"):
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=name)
        self._slots = threading.BoundedSemaphore(max_workers + queue_capacity)
        self._name = name

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Optional[Future]:
        if not self._slots.acquire(blocking=False):
            logger.warning("%s pool saturated, dropping task %s", self._name, getattr(fn, "__name__", fn))
            return None
        try:
            future = self._pool.submit(fn, *args, **kwargs)
        except RuntimeError:
            self._slots.release()
            logger.warning("%s pool is shut down, dropping task", self._name)
            return None
        future.add_done_callback(lambda _f: self._slots.release())
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)
