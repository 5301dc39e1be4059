"""
Work distribution strategies.

A mapper is any callable ``mapper(fn, items) -> list`` that applies fn to
every item and returns the results in input order. Analysis code takes a
mapper argument and defaults to sequential_map, so concurrency is always
optional.

Process-based mapping requires fn and items to be picklable (module-level
functions, functools.partial of them, lists of ints/floats).
"""

import logging
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import Callable, Iterable, List, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

Mapper = Callable[[Callable[[T], R], Iterable[T]], List[R]]

BACKENDS = ("sequential", "thread", "process")


def sequential_map(fn: Callable[[T], R], items: Iterable[T]) -> List[R]:
    """Apply fn to each item in the calling thread."""
    return [fn(item) for item in items]


class _ExecutorMapper:
    """Mapper backed by a concurrent.futures executor (one pool per call)."""

    executor_class = Executor

    def __init__(self, max_workers: int = 4):
        if max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {max_workers}")
        self.max_workers = max_workers

    def __call__(self, fn: Callable[[T], R], items: Iterable[T]) -> List[R]:
        items = list(items)
        if len(items) <= 1:
            return sequential_map(fn, items)

        workers = min(self.max_workers, len(items))
        logger.debug(f"{type(self).__name__}: {len(items)} items on {workers} worker(s)")

        with self.executor_class(max_workers=workers) as executor:
            # Executor.map yields results in submission order
            return list(executor.map(fn, items))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(max_workers={self.max_workers})"


class ThreadPoolMapper(_ExecutorMapper):
    executor_class = ThreadPoolExecutor


class ProcessPoolMapper(_ExecutorMapper):
    executor_class = ProcessPoolExecutor


def get_mapper(backend: str = "sequential", max_workers: int = 4) -> Mapper:
    """
    Resolve a backend name to a mapper.

    Args:
        backend: "sequential", "thread" or "process"
        max_workers: Pool size for thread/process backends

    Returns:
        Mapper callable

    Raises:
        ValueError: Unknown backend name
    """
    if backend == "sequential":
        return sequential_map
    if backend == "thread":
        return ThreadPoolMapper(max_workers)
    if backend == "process":
        return ProcessPoolMapper(max_workers)

    raise ValueError(f"Unknown parallel backend {backend!r}; expected one of {BACKENDS}")
