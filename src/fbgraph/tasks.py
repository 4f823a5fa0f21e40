"""Thread-backed asynchronous wrappers for blocking Graph operations.

The Graph operations themselves are synchronous. The ``*_async`` variants
hand them to a shared worker pool and report back through a
``concurrent.futures.Future``; an optional callback receives that future
once it is done. Use ``asyncio.wrap_future`` to await one from a coroutine.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

from .errors import OperationCancelled

logger = logging.getLogger(__name__)

MAX_WORKERS = 4

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


class Cancellable:
    """Thread-safe cancellation flag shared between a caller and a worker."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled()


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=MAX_WORKERS, thread_name_prefix="fbgraph"
            )
        return _executor


def run_in_thread(
    func: Callable[..., Any],
    *args: Any,
    callback: Optional[Callable[[Future], None]] = None,
    cancellable: Optional[Cancellable] = None,
    **kwargs: Any,
) -> Future:
    """Run ``func(*args, **kwargs)`` on a worker thread.

    Args:
        func: Blocking callable to run.
        callback: Called with the finished future (result or error).
        cancellable: If cancelled before the worker finishes, the future
            fails with OperationCancelled and any result is dropped.
            In-flight HTTP requests are not interrupted.

    Returns:
        Future resolving to the callable's return value.
    """
    future: Future = Future()
    if callback is not None:
        future.add_done_callback(callback)

    def worker() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            if cancellable is not None:
                cancellable.raise_if_cancelled()
            result = func(*args, **kwargs)
            if cancellable is not None:
                cancellable.raise_if_cancelled()
        except Exception as e:
            logger.debug(f"Async {getattr(func, '__name__', func)} failed: {e}")
            future.set_exception(e)
        else:
            future.set_result(result)

    _get_executor().submit(worker)
    return future


__all__ = ["Cancellable", "run_in_thread"]
