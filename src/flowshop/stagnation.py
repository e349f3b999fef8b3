# src/flowshop/stagnation.py
"""Sliding-window stagnation detector for iterated local search."""

from __future__ import annotations

import math
from collections import deque
from typing import Deque, Optional, Tuple

from .runtime import StatsSink


def _same_value(a: float, b: float) -> bool:
    """Bitwise-style equality: NaN matches NaN, 0.0 and -0.0 differ."""
    if a != a or b != b:
        return math.isnan(a) and math.isnan(b)
    return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)


class StagnationDetector:
    """Remember the last ``window_size`` cost values and spot plateaus.

    Parameters
    ----------
    window_size:
        Capacity of the history.  ``0`` switches detection off: nothing is
        recorded and :meth:`is_stagnant` is always false.
    robust:
        When true, every positive :meth:`is_stagnant` answer is reported to
        ``sink`` as one local optimum.  Polling the same plateau twice
        reports it twice, so callers should ask once per observation.
    sink:
        Receiver of local-optimum reports, usually
        ``RuntimeContext.local_optima``.
    """

    def __init__(
        self,
        window_size: int,
        robust: bool = False,
        sink: Optional[StatsSink] = None,
    ) -> None:
        self.sink = sink
        self.configure(window_size, robust)

    def configure(self, window_size: int, robust: Optional[bool] = None) -> None:
        if window_size < 0:
            raise ValueError("window_size must be non-negative")
        self.window_size = int(window_size)
        if robust is not None:
            self.robust = bool(robust)
        self._history: Deque[float] = deque(maxlen=self.window_size)

    def reset(self) -> None:
        self._history.clear()

    def observe(self, value: float) -> None:
        # deque(maxlen=W) drops the oldest entry itself; maxlen=0 keeps nothing
        self._history.append(value)

    @property
    def window(self) -> Tuple[float, ...]:
        return tuple(self._history)

    def __len__(self) -> int:
        return len(self._history)

    def is_full(self) -> bool:
        return self.window_size > 0 and len(self._history) == self.window_size

    def is_stagnant(self, probe: float) -> bool:
        if not self.is_full():
            return False
        if not all(_same_value(v, probe) for v in self._history):
            return False
        if self.robust and self.sink is not None:
            self.sink.record_local_optimum_count()
            self.sink.record_local_optimum_value(probe)
        return True

    def is_best_improving(self, candidate: float) -> bool:
        """True when ``candidate`` is at least as good as everything in the window."""
        return min(self._history) >= candidate

    def is_improving(self, candidate: float) -> bool:
        """True when ``candidate`` beats the worst value in the window."""
        return max(self._history) > candidate


__all__ = ["StagnationDetector"]
