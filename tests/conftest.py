"""Pytest configuration and shared fixtures.

Also ensures the 'src' directory (src layout) is on sys.path for imports.
"""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

_src = Path(__file__).resolve().parents[1] / "src"
if str(_src) not in sys.path:
    sys.path.insert(0, str(_src))

from flowshop.job import Job  # noqa: E402
from flowshop.runtime import RuntimeContext  # noqa: E402
from flowshop.solution import Solution  # noqa: E402


def reference_makespan(times: list[list[int]]) -> int:
    """Plain two-predecessor recurrence over rows = jobs in sequence order."""
    n = len(times)
    m = len(times[0])
    C = [[0] * m for _ in range(n)]
    for r in range(n):
        for c in range(m):
            up = C[r - 1][c] if r > 0 else 0
            left = C[r][c - 1] if c > 0 else 0
            C[r][c] = max(up, left) + times[r][c]
    return C[n - 1][m - 1]


@pytest.fixture
def context() -> RuntimeContext:
    return RuntimeContext()


@pytest.fixture
def small_jobs() -> list[Job]:
    return [
        Job.from_times(0, [2, 3]),
        Job.from_times(1, [4, 1]),
        Job.from_times(2, [1, 5]),
    ]


@pytest.fixture
def small_solution(small_jobs, context) -> Solution:
    return Solution.from_jobs(small_jobs, 2, context)


def random_jobs(n: int, m: int, seed: int, high: int = 50) -> list[Job]:
    rng = np.random.default_rng(seed)
    p = rng.integers(1, high, size=(n, m))
    return [Job.from_times(j, p[j]) for j in range(n)]
