"""
Fan-out / fan-in helper for the I/O bound stages.

Every submitted item ends up in exactly one of the result buckets, so a
stage can report the full set of problems at once instead of stopping on
the first exception.
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional, Tuple

from . import config

_SKIPPED = object()


@dataclass
class TaskResults:
    # Results of successful calls, in the order the items were given
    succeeded: List[Any] = field(default_factory=list)
    failed: List[Tuple[Any, BaseException]] = field(default_factory=list)
    skipped: List[Any] = field(default_factory=list)

    @property
    def cancelled(self) -> bool:
        return bool(self.skipped)


def run_tasks(items: Iterable[Any],
              fn: Callable[[Any], Any],
              max_workers: int = config.DEFAULT_MAX_WORKERS,
              cancel_event: Optional[threading.Event] = None) -> TaskResults:
    """
    Runs fn(item) for every item on a thread pool and waits for all of them.

    Once cancel_event is set, items that have not started yet are not run
    and land in `skipped`; calls already running are allowed to finish.
    Ctrl-C while waiting sets cancel_event instead of propagating.
    """
    items = list(items)
    cancel_event = cancel_event or threading.Event()
    results = TaskResults()
    if not items:
        return results

    def guarded(item):
        if cancel_event.is_set():
            return _SKIPPED
        return fn(item)

    executor = ThreadPoolExecutor(max_workers=max(1, max_workers))
    futures = [executor.submit(guarded, item) for item in items]
    try:
        for future in as_completed(futures):
            if future.exception() is not None:
                logging.debug(f"Task failed: {future.exception()}")
    except KeyboardInterrupt:
        # Queued tasks see the event and return without doing anything
        logging.warning("Interrupted, waiting for running tasks to finish...")
        cancel_event.set()
    finally:
        executor.shutdown(wait=True)

    for item, future in zip(items, futures):
        try:
            value = future.result()
        except Exception as e:
            results.failed.append((item, e))
            continue
        if value is _SKIPPED:
            results.skipped.append(item)
        else:
            results.succeeded.append(value)

    if results.skipped:
        logging.warning(f"Cancelled: {len(results.skipped)} of {len(items)} tasks were not started.")
    return results
