# src/flowshop/ils.py
from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .config import SearchConfig
from .inputs import Inputs
from .job import efficiency_list
from .runtime import RuntimeContext
from .solution import Solution
from .stagnation import StagnationDetector


@dataclass
class ILSResult:
    permutation: List[int]
    makespan: int
    expected_makespan: float
    iterations: int
    stagnations: int
    elapsed: float
    solution: Optional[Solution] = None


class IteratedLocalSearch:
    """Iterated greedy / local search driven by Taillard's insertion evaluator.

    NEH builds the start sequence, insertion local search polishes it and
    destruction/construction perturbs it.  Every accepted cost is fed to a
    :class:`StagnationDetector`; a plateau triggers a stronger restart from
    the best solution, and ``max_stagnations`` plateaus end the run.
    """

    def __init__(
        self,
        inputs: Inputs,
        config: Optional[SearchConfig] = None,
        context: Optional[RuntimeContext] = None,
        logger: Optional[Callable[[Dict[str, Any]], None]] = None,
    ) -> None:
        self.inputs = inputs
        self.config = config or SearchConfig()
        self.context = context or RuntimeContext()
        self.rng = random.Random(self.config.seed)
        self.detector = StagnationDetector(
            self.config.window_size,
            robust=self.config.robust,
            sink=self.context.local_optima,
        )
        self.logger = logger

    def _log(self, event: str, **fields: Any) -> None:
        if self.logger:
            payload = {"event": event, **fields}
            try: self.logger(payload)
            except Exception: pass

    @property
    def n_jobs(self) -> int:
        return self.inputs.n_jobs

    def _destroy_size(self) -> int:
        n = self.n_jobs
        return max(1, min(n - 1, max(2, int(round(self.config.destroy_fraction * n)))))

    # ---- NEH ----
    def construct(self) -> Solution:
        sol = Solution.from_jobs(
            efficiency_list(self.inputs.jobs, self.rng), self.inputs.n_machines, self.context
        )
        for k in range(sol.n_jobs):
            sol.improve_insertion(k)
        sol.exp_costs = sol.compute_expected_makespan(sol.n_jobs)
        return sol

    # ---- insertion local search ----
    def local_search(self, sol: Solution, deadline: Optional[float] = None) -> Solution:
        """Reinsert every job at its best position until a sweep stops improving.

        ``sol.costs`` must be current on entry.
        """
        n = sol.n_jobs
        if n < 2:
            return sol
        improved = True
        while improved:
            improved = False
            for job in self.rng.sample(sol.jobs, n):
                if deadline and time.time() >= deadline:
                    break
                before = sol.costs
                rest = [other for other in sol.jobs if other is not job]
                sol.set_jobs(rest + [job])
                sol.improve_insertion(n - 1)
                if sol.costs < before:
                    improved = True
        sol.exp_costs = sol.compute_expected_makespan(n)
        return sol

    # ---- destruction / construction ----
    def perturb(self, sol: Solution, d: int) -> Solution:
        cand = sol.copy()
        n = cand.n_jobs
        if n < 2:
            return cand
        d = max(1, min(d, n - 1))
        removed_idx = set(self.rng.sample(range(n), d))
        kept = [job for i, job in enumerate(cand.jobs) if i not in removed_idx]
        removed = [cand.jobs[i] for i in removed_idx]
        self.rng.shuffle(removed)
        cand.set_jobs(kept + removed)
        for k in range(n - d, n):
            cand.improve_insertion(k)
        return cand

    def _accept(self, cand: Solution, current: Solution) -> bool:
        if cand.costs <= current.costs:
            return True
        # a worse candidate may still beat the worst cost seen recently
        return len(self.detector) > 0 and self.detector.is_improving(cand.costs)

    def run(self) -> ILSResult:
        cfg = self.config
        start = time.time()
        deadline = (start + cfg.time_limit) if cfg.time_limit is not None else None
        self.detector.reset()

        self._log("start", instance=self.inputs.name, n=self.n_jobs, m=self.inputs.n_machines,
                  seed=cfg.seed, time_limit=cfg.time_limit)

        current = self.construct()
        self._log("neh_done", val=int(current.costs))
        if cfg.local_search:
            current = self.local_search(current, deadline)
            self._log("ls_done", val=int(current.costs))
        best = current.copy()
        best.time = time.time() - start

        d = self._destroy_size()
        iterations = 0
        stagnations = 0
        for it in range(cfg.max_iter):
            if deadline and time.time() >= deadline:
                self._log("time_stop", iter=int(it), best=int(best.costs))
                break
            iterations = it + 1

            cand = self.perturb(current, d)
            if cfg.local_search:
                cand = self.local_search(cand, deadline)
            if len(self.detector) > 0 and self.detector.is_best_improving(cand.costs):
                self._log("window_best", iter=int(it), val=int(cand.costs))
            if self._accept(cand, current):
                current = cand

            if current.costs < best.costs:
                best = current.copy()
                best.time = time.time() - start
                self._log("iter_best", iter=int(it), best=int(best.costs))

            self.detector.observe(current.costs)
            if self.detector.is_stagnant(current.costs):
                stagnations += 1
                self._log("stagnation", iter=int(it), val=int(current.costs), count=stagnations)
                if stagnations >= cfg.max_stagnations:
                    self._log("stagnation_stop", iter=int(it), best=int(best.costs))
                    break
                current = self.perturb(best, min(self.n_jobs - 1, 2 * d))
                if cfg.local_search:
                    current = self.local_search(current, deadline)
                self.detector.reset()
                self._log("diversify", iter=int(it), val=int(current.costs))

        best.exp_costs = best.compute_expected_makespan(best.n_jobs)
        elapsed = time.time() - start
        self._log("end", best=int(best.costs), iterations=int(iterations), stagnations=int(stagnations))
        return ILSResult(
            permutation=best.job_ids(),
            makespan=int(best.costs),
            expected_makespan=float(best.exp_costs),
            iterations=int(iterations),
            stagnations=int(stagnations),
            elapsed=float(elapsed),
            solution=best,
        )


__all__ = ["ILSResult", "IteratedLocalSearch"]
