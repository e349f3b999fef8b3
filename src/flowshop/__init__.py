"""Permutation flow-shop local-search engine.

This package contains the job/timing model, the solution type with
Taillard's accelerated insertion evaluator, a stagnation detector for
iterated local search, instance loaders and an experiment runner.
"""

from .config import SearchConfig
from .job import Job, efficiency_list
from .inputs import (
    Inputs,
    MalformedInputError,
    attach_best_known,
    excel_sheet_names,
    inputs_from_matrix,
    load_best_known,
    read_baker_instance,
    read_instances,
    read_raw_instance,
)
from .runtime import AtomicCounter, LocalOptimumStats, RuntimeContext, StatsSink
from .solution import Solution
from .stagnation import StagnationDetector
from .ils import ILSResult, IteratedLocalSearch
from .runner import run_experiments
from .reporting import add_rpd_column, local_optima_frame, summarise_by_instance

__all__ = [
    "AtomicCounter",
    "ILSResult",
    "Inputs",
    "IteratedLocalSearch",
    "Job",
    "LocalOptimumStats",
    "MalformedInputError",
    "RuntimeContext",
    "SearchConfig",
    "Solution",
    "StagnationDetector",
    "StatsSink",
    "add_rpd_column",
    "attach_best_known",
    "efficiency_list",
    "excel_sheet_names",
    "inputs_from_matrix",
    "load_best_known",
    "local_optima_frame",
    "read_baker_instance",
    "read_instances",
    "read_raw_instance",
    "run_experiments",
    "summarise_by_instance",
]
