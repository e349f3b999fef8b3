# src/flowshop/runtime.py
"""Process-wide counters shared by every search running in one process.

Nothing in here is a module-level global: a :class:`RuntimeContext` is built
once by the caller and handed to the solutions and detectors that need it.
Both counters may be bumped from several search threads at once, so every
update goes through a lock.
"""

from __future__ import annotations

import itertools
import threading
from typing import List, Protocol, Tuple


class StatsSink(Protocol):
    """Receiver for local-optimum reports coming from a stagnation detector."""

    def record_local_optimum_count(self) -> None:  # pragma: no cover - behavioural interface
        ...

    def record_local_optimum_value(self, value: float) -> None:  # pragma: no cover - behavioural interface
        ...


class AtomicCounter:
    """Monotonic integer counter, safe to share between threads."""

    def __init__(self, start: int = 1) -> None:
        self._lock = threading.Lock()
        self._it = itertools.count(start)
        self._last = start - 1

    def next(self) -> int:
        with self._lock:
            self._last = next(self._it)
            return self._last

    @property
    def value(self) -> int:
        """Last value handed out (``start - 1`` before the first call)."""
        with self._lock:
            return self._last


class LocalOptimumStats:
    """Aggregates local optima reported by robust stagnation detectors."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._count = 0
        self._values: List[float] = []

    def record_local_optimum_count(self) -> None:
        with self._lock:
            self._count += 1

    def record_local_optimum_value(self, value: float) -> None:
        with self._lock:
            self._values.append(float(value))

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    @property
    def values(self) -> Tuple[float, ...]:
        with self._lock:
            return tuple(self._values)

    def best(self) -> float | None:
        with self._lock:
            return min(self._values) if self._values else None

    def reset(self) -> None:
        with self._lock:
            self._count = 0
            self._values.clear()


class RuntimeContext:
    """Bundle of the counters a group of cooperating searches shares."""

    def __init__(self) -> None:
        self.solution_ids = AtomicCounter(start=1)
        self.local_optima = LocalOptimumStats()

    def next_solution_id(self) -> int:
        return self.solution_ids.next()


__all__ = ["AtomicCounter", "LocalOptimumStats", "RuntimeContext", "StatsSink"]
