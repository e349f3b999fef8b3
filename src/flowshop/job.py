# src/flowshop/job.py
"""Job timing data and the total-time ordering used by list heuristics."""

from __future__ import annotations

import random
from typing import Iterable, List, Optional

import numpy as np


class Job:
    """Per-machine processing times of one job.

    Parameters
    ----------
    job_id:
        Stable identifier, assigned by the loader and never changed.
    n_machines:
        Length of both timing vectors.

    Times are written while the instance is being loaded.  :meth:`finalize`
    then fixes ``total_processing_time`` and write-protects both vectors so
    the job can be shared by every solution of the instance.
    """

    __slots__ = (
        "id",
        "processing_times",
        "exp_processing_times",
        "variances",
        "total_processing_time",
    )

    def __init__(self, job_id: int, n_machines: int) -> None:
        self.id = int(job_id)
        self.processing_times = np.zeros(n_machines, dtype=np.int64)
        self.exp_processing_times = np.zeros(n_machines, dtype=np.float64)
        self.variances = np.zeros(n_machines, dtype=np.float64)
        self.total_processing_time = 0

    @classmethod
    def from_times(
        cls,
        job_id: int,
        times: Iterable[int],
        exp_times: Optional[Iterable[float]] = None,
        variances: Optional[Iterable[float]] = None,
    ) -> "Job":
        """Build and finalize a job; expected times default to ``times``."""
        p = np.asarray(list(times), dtype=np.int64)
        job = cls(job_id, p.size)
        job.processing_times[:] = p
        if exp_times is None:
            job.exp_processing_times[:] = p
        else:
            job.exp_processing_times[:] = np.asarray(list(exp_times), dtype=np.float64)
        if variances is not None:
            job.variances[:] = np.asarray(list(variances), dtype=np.float64)
        return job.finalize()

    @property
    def n_machines(self) -> int:
        return int(self.processing_times.shape[0])

    def processing_time(self, machine: int) -> int:
        return int(self.processing_times[machine])

    def set_processing_time(self, machine: int, time: int) -> None:
        self.processing_times[machine] = time

    def exp_processing_time(self, machine: int) -> float:
        return float(self.exp_processing_times[machine])

    def set_exp_processing_time(self, machine: int, time: float) -> None:
        self.exp_processing_times[machine] = time

    def set_variance(self, machine: int, variance: float) -> None:
        self.variances[machine] = variance

    @property
    def finalized(self) -> bool:
        return not self.processing_times.flags.writeable

    def finalize(self) -> "Job":
        self.total_processing_time = int(self.processing_times.sum())
        for arr in (self.processing_times, self.exp_processing_times, self.variances):
            arr.flags.writeable = False
        return self

    def compare(self, other: "Job", rng: Optional[random.Random] = None) -> int:
        """Return -1 if ``self`` goes before ``other`` in a descending-total list.

        Equal totals are settled by a coin flip drawn from ``rng``.
        """
        s1 = self.total_processing_time
        s2 = other.total_processing_time
        if s1 > s2:
            return -1
        if s1 == s2 and (rng or random).random() > 0.5:
            return -1
        return 1

    def __repr__(self) -> str:
        return f"Job(id={self.id}, total={self.total_processing_time})"


def efficiency_list(jobs: Iterable[Job], rng: Optional[random.Random] = None) -> List[Job]:
    """Jobs sorted by descending total processing time, ties in random order."""
    r = rng or random
    keyed = [(-job.total_processing_time, r.random(), job) for job in jobs]
    keyed.sort(key=lambda t: (t[0], t[1]))
    return [job for _, _, job in keyed]


__all__ = ["Job", "efficiency_list"]
