"""Experiment runner for the flow-shop ILS (with convergence logging)."""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from .config import SearchConfig
from .ils import ILSResult, IteratedLocalSearch
from .inputs import Inputs
from .runtime import RuntimeContext

logger = logging.getLogger(__name__)


def run_experiments(
    instances: Dict[str, Inputs],
    config: Optional[SearchConfig] = None,
    runs: int = 3,
    seed: Optional[int] = None,
    context: Optional[RuntimeContext] = None,
    # progress logging
    log_dir: Optional[str] = None,
) -> pd.DataFrame:
    """Execute ``runs`` seeded ILS runs per instance and collect one row per run."""
    base = config or SearchConfig()
    ctx = context or RuntimeContext()
    records: List[dict] = []

    conv_base: Optional[Path] = None
    if log_dir:
        conv_base = Path(log_dir) / "convergence"
        conv_base.mkdir(parents=True, exist_ok=True)

    for inst_name, inst in instances.items():
        for run_idx in range(runs):
            run_seed = seed + run_idx if seed is not None else None
            logger.info("%s - run %d/%d (seed=%s)", inst_name, run_idx + 1, runs, run_seed)

            start_time = time.time()
            convergence_rows: List[dict] = []

            def _trace(event: dict) -> None:
                if event.get("event") not in ("iter_best", "stagnation", "diversify"):
                    return
                convergence_rows.append({
                    "instance": inst_name,
                    "run": run_idx,
                    "seed": run_seed,
                    "elapsed": time.time() - start_time,
                    **event,
                })

            solver = IteratedLocalSearch(
                inst, base.replace(seed=run_seed), context=ctx, logger=_trace,
            )
            result: ILSResult = solver.run()
            best_known = inst.best_makespan
            rpd = (
                100.0 * (result.makespan - best_known) / best_known
                if (best_known is not None and best_known > 0)
                else None
            )

            records.append(
                {
                    "instance": inst_name,
                    "run": run_idx,
                    "seed": run_seed,
                    "makespan": result.makespan,
                    "expected_makespan": result.expected_makespan,
                    "best_known": best_known,
                    "rpd": rpd,
                    "elapsed": result.elapsed,
                    "iterations": result.iterations,
                    "stagnations": result.stagnations,
                }
            )
            logger.info("%s run%d -> %d in %.2fs", inst_name, run_idx, result.makespan, result.elapsed)

            if conv_base is not None and convergence_rows:
                out_path = conv_base / f"{inst_name}_run{run_idx}.csv"
                pd.DataFrame(convergence_rows).to_csv(out_path, index=False)

    return pd.DataFrame.from_records(records)


__all__ = ["run_experiments"]
