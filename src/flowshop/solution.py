# src/flowshop/solution.py
"""Job sequence with cached costs and Taillard's insertion acceleration."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from .job import Job
from .runtime import RuntimeContext


# ---------- Completion-time chain (one job row through all machines) ----------
def _chain(prev: np.ndarray, p: np.ndarray) -> np.ndarray:
    """Completion row for a job with times ``p`` following a row ``prev``.

    Vectorised form of ``c[j] = max(prev[j], c[j-1]) + p[j]`` with
    ``c[-1] = 0``: unrolled, ``c[j] = max_{l<=j}(prev[l] + p[l..j].sum())``.
    ``prev`` must be non-negative (use zeros for the first row).
    """
    s = np.cumsum(p, dtype=np.int64)
    return s + np.maximum.accumulate(prev - s + p)


def _forward_table(p: np.ndarray) -> np.ndarray:
    """E-table: row ``i`` is the completion row of the first ``i+1`` jobs."""
    rows, m = p.shape
    e = np.zeros((rows, m), dtype=np.int64)
    prev = np.zeros(m, dtype=np.int64)
    for i in range(rows):
        prev = e[i] = _chain(prev, p[i])
    return e


def _tail_table(p: np.ndarray) -> np.ndarray:
    """Q-table: time to finish machines ``[j..m)`` for jobs ``i..rows-1``.

    Has ``rows + 1`` rows; the last one is the all-zero sentinel.
    """
    rows, m = p.shape
    q = np.zeros((rows + 1, m), dtype=np.int64)
    for i in range(rows - 1, -1, -1):
        q[i] = _chain(q[i + 1][::-1], p[i][::-1])[::-1]
    return q


def _insertion_table(e: np.ndarray, p_free: np.ndarray) -> np.ndarray:
    """F-table: completion row of the free job when inserted at position ``i``."""
    rows, m = e.shape
    f = np.zeros((rows + 1, m), dtype=np.int64)
    f[0] = _chain(np.zeros(m, dtype=np.int64), p_free)
    for i in range(1, rows + 1):
        f[i] = _chain(e[i - 1], p_free)
    return f


def _stack(jobs: Sequence[Job], n_machines: int) -> np.ndarray:
    if not jobs:
        return np.zeros((0, n_machines), dtype=np.int64)
    return np.stack([job.processing_times for job in jobs]).astype(np.int64, copy=False)


def format_hms(seconds: float) -> str:
    total = int(round(seconds))
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    return f"{h}:{m:02d}:{s:02d}"


class Solution:
    """A permutation of the instance's jobs plus its cached costs.

    ``costs`` (makespan) and ``exp_costs`` (expected makespan) are only
    meaningful after :meth:`evaluate`, or after :meth:`improve_insertion` was
    called on the last position.  The sequence length is fixed at
    construction; keeping it a true permutation is the caller's job.
    """

    def __init__(self, n_jobs: int, n_machines: int, context: RuntimeContext) -> None:
        self.context = context
        self.id = context.next_solution_id()
        self.n_jobs = int(n_jobs)
        self.n_machines = int(n_machines)
        self.jobs: List[Optional[Job]] = [None] * self.n_jobs
        self.costs = 0
        self.exp_costs = 0.0
        self.time = 0.0

    @classmethod
    def from_jobs(cls, jobs: Sequence[Job], n_machines: int, context: RuntimeContext) -> "Solution":
        sol = cls(len(jobs), n_machines, context)
        sol.set_jobs(jobs)
        return sol

    # ---- sequence access ----
    def set_job(self, pos: int, job: Job) -> None:
        self.jobs[pos] = job

    def set_jobs(self, jobs: Sequence[Job]) -> None:
        if len(jobs) != self.n_jobs:
            raise ValueError(f"Expected {self.n_jobs} jobs, got {len(jobs)}")
        self.jobs = list(jobs)

    def job_ids(self) -> List[int]:
        return [job.id for job in self.jobs]

    def permutation(self) -> List[Job]:
        """The job objects in sequence order, as a new list."""
        return list(self.jobs)

    def copy(self) -> "Solution":
        """Independent solution sharing the same job objects; time restarts at 0."""
        clone = Solution(self.n_jobs, self.n_machines, self.context)
        clone.jobs = list(self.jobs)
        clone.costs = self.costs
        clone.exp_costs = self.exp_costs
        return clone

    # ---- cost evaluation ----
    def compute_makespan(self, n_used: int) -> int:
        """Completion time of job ``n_used - 1`` on the last machine."""
        prev = np.zeros(self.n_machines, dtype=np.int64)
        for row in range(n_used):
            prev = _chain(prev, self.jobs[row].processing_times)
        return int(prev[-1])

    def compute_expected_makespan(self, n_used: int) -> float:
        """Expected-time variant of :meth:`compute_makespan`.

        Expected times are used on the first row and first column only;
        interior cells add the deterministic time of the job.
        """
        m = self.n_machines
        t = np.zeros((n_used, m), dtype=np.float64)
        for col in range(m):
            for row in range(n_used):
                if col == 0 and row == 0:
                    t[0, 0] = self.jobs[0].exp_processing_times[0]
                elif col == 0:
                    t[row, 0] = t[row - 1, 0] + self.jobs[row].exp_processing_times[0]
                elif row == 0:
                    t[0, col] = t[0, col - 1] + self.jobs[0].exp_processing_times[col]
                else:
                    t[row, col] = max(t[row - 1, col], t[row, col - 1]) + self.jobs[row].processing_times[col]
        return float(t[n_used - 1, m - 1])

    def evaluate(self) -> int:
        """Recompute and store both cost fields over the full sequence."""
        self.costs = self.compute_makespan(self.n_jobs)
        self.exp_costs = self.compute_expected_makespan(self.n_jobs)
        return self.costs

    # ---- Taillard's acceleration ----
    def improve_insertion(self, k: int) -> Tuple[int, int]:
        """Move the job at ``k`` to its best position within ``[0, k]``.

        The relative order of the other jobs in the prefix is kept.  Ties go
        to the leftmost position.  When ``k`` is the last position the winning
        makespan becomes ``self.costs``.  Returns ``(position, makespan)``.
        """
        m = self.n_machines
        p = _stack(self.jobs[:k], m)
        p_free = self.jobs[k].processing_times

        e = _forward_table(p)
        q = _tail_table(p)
        f = _insertion_table(e, p_free)

        # first minimum wins, i.e. the leftmost insertion point
        values = (f + q).max(axis=1)
        best_pos = int(np.argmin(values))
        best_val = int(values[best_pos])

        if best_pos < k:
            free = self.jobs[k]
            self.jobs[best_pos + 1:k + 1] = self.jobs[best_pos:k]
            self.jobs[best_pos] = free
        if k == self.n_jobs - 1:
            self.costs = best_val
        return best_pos, best_val

    # ---- presentation ----
    def report(self, include_jobs: bool = False) -> str:
        lines = [
            "",
            f"Sol ID : {self.id}",
            f"Sol costs: {self.costs}",
            f"Sol expCosts: {self.exp_costs}",
            f"Sol time: {format_hms(self.time)} ({self.time} sec.)",
        ]
        if include_jobs:
            lines.append("List of jobs:")
            lines.extend(str(job_id) for job_id in self.job_ids())
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return f"Solution(id={self.id}, costs={self.costs}, n_jobs={self.n_jobs})"


__all__ = ["Solution", "format_hms"]
