# src/flowshop/inputs.py
"""Job-set providers: immutable instances built from files or matrices."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .job import Job

logger = logging.getLogger(__name__)


class MalformedInputError(ValueError):
    """Raised when an instance source cannot be turned into a job set."""


@dataclass
class Inputs:
    name: str
    jobs: Tuple[Job, ...]
    n_machines: int
    best_makespan: Optional[int] = None

    @property
    def n_jobs(self) -> int:
        return len(self.jobs)

    @property
    def p_times(self) -> np.ndarray:
        """Deterministic times as a (machines, jobs) matrix."""
        return np.stack([job.processing_times for job in self.jobs], axis=1)

    def clone(self) -> "Inputs":
        jobs = tuple(
            Job.from_times(job.id, job.processing_times, job.exp_processing_times, job.variances)
            for job in self.jobs
        )
        return Inputs(name=self.name, jobs=jobs, n_machines=self.n_machines,
                      best_makespan=self.best_makespan)


def inputs_from_matrix(
    p_times: np.ndarray,
    name: str = "instance",
    exp_times: Optional[np.ndarray] = None,
) -> Inputs:
    """Build an instance from a (machines, jobs) matrix of integer times."""
    p = np.asarray(p_times)
    if p.ndim != 2 or p.size == 0:
        raise MalformedInputError(f"'{name}': expected a non-empty (machines, jobs) matrix")
    if np.any(p < 0):
        raise MalformedInputError(f"'{name}': processing times must be non-negative")
    if exp_times is not None and np.shape(exp_times) != p.shape:
        raise MalformedInputError(f"'{name}': expected-time matrix has shape {np.shape(exp_times)}, not {p.shape}")
    m, n = p.shape
    jobs = tuple(
        Job.from_times(j, p[:, j], None if exp_times is None else np.asarray(exp_times)[:, j])
        for j in range(n)
    )
    return Inputs(name=name, jobs=jobs, n_machines=m)


def _ints(tokens: Sequence[str], where: str) -> List[int]:
    try:
        return [int(t) for t in tokens]
    except ValueError as exc:
        raise MalformedInputError(f"{where}: non-numeric token ({exc})") from None


def _looks_like_ints(values: list) -> bool:
    try:
        _ = [int(x) for x in values]
        return True
    except (TypeError, ValueError):
        return False


def read_baker_instance(path: str) -> Inputs:
    """Read a Baker-format file.

    Layout::

        # nJobs nMachines
        20 5
        # times (m columns) then variances (m columns), one job per line
        21 23 32 ...  4 2 7 ...

    Job ids are 1-based, in file order.  Expected times are the deterministic
    times; variances are kept on the job.
    """
    with open(path, "r") as f:
        lines = [line.strip() for line in f]
    name = os.path.splitext(os.path.basename(path))[0]
    if len(lines) < 2:
        raise MalformedInputError(f"{path}: missing header")
    header = lines[1].split()
    if len(header) < 2:
        raise MalformedInputError(f"{path}: header must hold 'nJobs nMachines', got {lines[1]!r}")
    n, m = _ints(header[:2], f"{path} header")
    if n <= 0 or m <= 0:
        raise MalformedInputError(f"{path}: job and machine counts must be positive")

    tokens = " ".join(lines[3:]).split()
    values = _ints(tokens, path)
    if len(values) < n * 2 * m:
        raise MalformedInputError(
            f"{path}: expected {n} rows of {2 * m} values, found {len(values)} values"
        )
    jobs: List[Job] = []
    for i in range(n):
        row = values[i * 2 * m:(i + 1) * 2 * m]
        if any(v < 0 for v in row[:m]):
            raise MalformedInputError(f"{path}: negative processing time for job {i + 1}")
        job = Job(i + 1, m)
        for j in range(m):
            job.set_processing_time(j, row[j])
            job.set_exp_processing_time(j, row[j])
            job.set_variance(j, row[m + j])
        jobs.append(job.finalize())
    logger.debug("read %s: %d jobs x %d machines", path, n, m)
    return Inputs(name=name, jobs=tuple(jobs), n_machines=m)


def _matrix_from_rows(rows: List[List[int]], m: int, n: int, where: str) -> np.ndarray:
    p_times = np.zeros((m, n), dtype=np.int64)
    if len(rows) < m:
        raise MalformedInputError(f"{where}: expected {m} machine rows, found {len(rows)}")
    # Plain MxN matrix
    if all(len(r) == n for r in rows):
        for i in range(m):
            p_times[i, :] = rows[i]
        return p_times
    # Pairs (2N)
    if not all(len(r) == 2 * n for r in rows):
        raise MalformedInputError(
            f"{where}: invalid row lengths. Expected {n} or {2 * n} integers per machine row."
        )
    ids = [rows[0][2 * j] for j in range(n)]
    one_based = (min(ids) == 1 and max(ids) == n)
    for i in range(m):
        r = rows[i]
        for j in range(n):
            job = r[2 * j] - 1 if one_based else r[2 * j]
            if job < 0 or job >= n:
                raise MalformedInputError(f"{where}: invalid job id {r[2 * j]} on machine {i}")
            p_times[i, job] = r[2 * j + 1]
    return p_times


def read_raw_instance(path: str) -> Inputs:
    """Read a Taillard-style file: ``M N`` header then M machine rows."""
    with open(path, "r") as f:
        lines = [line.strip() for line in f if line.strip()]
    if not lines:
        raise MalformedInputError(f"{path}: missing header")
    header = lines[0].split()
    if len(header) < 2:
        raise MalformedInputError(f"{path}: header must hold 'M N'")
    m, n = _ints(header[:2], f"{path} header")
    rows = [_ints(ln.split(), path) for ln in lines[1:1 + m]]
    p_times = _matrix_from_rows(rows, m, n, path)
    name = os.path.splitext(os.path.basename(path))[0]
    return inputs_from_matrix(p_times, name=name)


def read_instances(xlsx_path: str, verbose: bool = False) -> Dict[str, Inputs]:
    """Read every sheet of a workbook laid out like :func:`read_raw_instance`."""
    # Force engine to openpyxl to avoid hangs/ambiguous detection
    xl = pd.ExcelFile(xlsx_path, engine="openpyxl")
    out: Dict[str, Inputs] = {}
    total = len(xl.sheet_names)
    for idx, sheet in enumerate(xl.sheet_names, start=1):
        if verbose:
            logger.info("[read] %d/%d %s", idx, total, sheet)
        df = xl.parse(sheet, header=None)
        if df.empty:
            raise MalformedInputError(f"Sheet '{sheet}' is empty")
        header = [x for x in df.iloc[0].tolist() if pd.notna(x)]
        if len(header) < 2 or not _looks_like_ints(header[:2]):
            raise MalformedInputError(f"Sheet '{sheet}' must start with integer header [M, N]. Got: {header}")
        m = int(header[0]); n = int(header[1])
        body = df.iloc[1:1 + m]
        rows = [
            _ints([x for x in row.tolist() if pd.notna(x)], f"sheet '{sheet}'")
            for _, row in body.iterrows()
        ]
        out[sheet] = inputs_from_matrix(_matrix_from_rows(rows, m, n, f"sheet '{sheet}'"), name=sheet)
    return out


SHEET_NAME_LIMIT = 31


def excel_sheet_names(names: Sequence[str]) -> List[str]:
    """Map instance names to distinct sheet names of at most 31 characters.

    Excel compares sheet names case-insensitively, so a clash after
    truncation gets a ``~2``, ``~3``, ... suffix in place of its tail.
    """
    taken = set()
    out: List[str] = []
    for name in names:
        candidate = name[:SHEET_NAME_LIMIT]
        k = 2
        while candidate.lower() in taken:
            suffix = f"~{k}"
            candidate = name[:SHEET_NAME_LIMIT - len(suffix)] + suffix
            k += 1
        taken.add(candidate.lower())
        out.append(candidate)
    return out


def load_best_known(csv_path: str) -> Dict[str, int]:
    df = pd.read_csv(csv_path)
    if not {"instance", "best_makespan"} <= set(df.columns):
        raise MalformedInputError("best_known.csv must have columns: instance,best_makespan")
    return (
        df[["instance", "best_makespan"]]
        .dropna()
        .set_index("instance")["best_makespan"]
        .astype(int)
        .to_dict()
    )


def attach_best_known(instances: Dict[str, Inputs], best_known: Mapping[str, int]) -> None:
    for name, val in best_known.items():
        if name in instances:
            instances[name].best_makespan = int(val)


__all__ = [
    "Inputs",
    "MalformedInputError",
    "attach_best_known",
    "excel_sheet_names",
    "inputs_from_matrix",
    "load_best_known",
    "read_baker_instance",
    "read_instances",
    "read_raw_instance",
]
