"""Bounded per-filesystem fan-out.

Runs one independent engine call per target on a thread pool capped at
``max_workers`` so a large filesystem set can't flood the engine.
"""

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskResult:
    """Outcome of one fan-out call: either a value or the exception raised."""

    target: str
    value: Any = None
    error: Exception | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def describe_error(error: BaseException) -> str:
    """Return the message of an exception, falling back to its type name."""
    return str(error) or type(error).__name__


def fan_out(
    func: Callable[[str], Any],
    targets: Sequence[str],
    *,
    max_workers: int,
    name: str = "fanout",
) -> list[TaskResult]:
    """Call ``func(target)`` for every target on a bounded thread pool.

    One failing call never prevents the others from running. If collection
    itself is interrupted, queued calls are cancelled; calls already running
    finish in the background and their results are dropped.

    Args:
        func: Callable invoked once per target.
        targets: Targets to process. Duplicates are processed once each.
        max_workers: Upper bound on concurrently running calls.
        name: Thread name prefix, for log correlation.

    Returns:
        One TaskResult per target, in the same order as ``targets``.
    """
    if not targets:
        return []

    workers = max(1, min(max_workers, len(targets)))
    results: list[TaskResult | None] = [None] * len(targets)
    pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix=name)
    try:
        futures = {pool.submit(func, target): index for index, target in enumerate(targets)}
        for future in as_completed(futures):
            index = futures[future]
            try:
                results[index] = TaskResult(target=targets[index], value=future.result())
            except Exception as exc:
                results[index] = TaskResult(target=targets[index], error=exc)
    except BaseException:
        pool.shutdown(wait=False, cancel_futures=True)
        raise
    pool.shutdown(wait=True)

    logger.debug(
        "Fan-out complete",
        extra={"pool": name, "targets": len(targets), "workers": workers},
    )
    return [result for result in results if result is not None]
