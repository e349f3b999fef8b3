import numpy as np
import pytest

from conftest import reference_makespan
from flowshop.config import SearchConfig
from flowshop.ils import IteratedLocalSearch
from flowshop.inputs import inputs_from_matrix
from flowshop.runtime import RuntimeContext


def _instance(n: int = 12, m: int = 4, seed: int = 0):
    rng = np.random.default_rng(seed)
    return inputs_from_matrix(rng.integers(1, 40, size=(m, n)), name=f"r{n}x{m}_{seed}")


def _times(inst, perm):
    by_id = {job.id: job for job in inst.jobs}
    return [list(by_id[j].processing_times) for j in perm]


def test_construct_is_consistent() -> None:
    inst = _instance()
    ils = IteratedLocalSearch(inst, SearchConfig(seed=1))
    sol = ils.construct()
    assert sorted(sol.job_ids()) == list(range(inst.n_jobs))
    assert sol.costs == sol.compute_makespan(sol.n_jobs)
    assert sol.exp_costs == pytest.approx(sol.costs)


def test_local_search_never_worsens() -> None:
    inst = _instance(seed=3)
    ils = IteratedLocalSearch(inst, SearchConfig(seed=3))
    sol = ils.construct()
    start = sol.costs
    sol = ils.local_search(sol)
    assert sol.costs <= start
    assert sol.costs == sol.compute_makespan(sol.n_jobs)


def test_perturb_keeps_permutation() -> None:
    inst = _instance(seed=4)
    ils = IteratedLocalSearch(inst, SearchConfig(seed=4))
    sol = ils.construct()
    cand = ils.perturb(sol, 4)
    assert cand is not sol
    assert sorted(cand.job_ids()) == list(range(inst.n_jobs))
    assert cand.costs == cand.compute_makespan(cand.n_jobs)


@pytest.mark.parametrize("seed", [0, 1])
def test_run_returns_valid_best(seed: int) -> None:
    inst = _instance(seed=seed)
    ils = IteratedLocalSearch(inst, SearchConfig(seed=seed, max_iter=30, window_size=5))
    neh = IteratedLocalSearch(inst, SearchConfig(seed=seed)).construct().costs
    res = ils.run()
    assert sorted(res.permutation) == list(range(inst.n_jobs))
    assert res.makespan == reference_makespan(_times(inst, res.permutation))
    assert res.makespan <= neh
    assert res.iterations <= 30
    assert res.expected_makespan == pytest.approx(res.makespan)


def test_run_is_reproducible() -> None:
    inst = _instance(seed=7)
    cfg = SearchConfig(seed=11, max_iter=20)
    a = IteratedLocalSearch(inst, cfg).run()
    b = IteratedLocalSearch(inst, cfg).run()
    assert a.permutation == b.permutation
    assert a.makespan == b.makespan


def test_stagnation_stops_run_and_reports() -> None:
    # identical jobs: every sequence has the same makespan, so the window fills with one value
    inst = inputs_from_matrix(np.full((3, 6), 5), name="flat")
    context = RuntimeContext()
    events: list = []
    cfg = SearchConfig(seed=0, window_size=3, robust=True, max_stagnations=2, max_iter=100)
    res = IteratedLocalSearch(inst, cfg, context=context, logger=events.append).run()
    assert res.stagnations == 2
    assert res.iterations == 6
    assert context.local_optima.count == 2
    assert context.local_optima.values == (40.0, 40.0)
    names = [e["event"] for e in events]
    assert names[0] == "start"
    assert names[-1] == "end"
    assert "diversify" in names
    assert "stagnation_stop" in names


def test_zero_window_runs_to_max_iter() -> None:
    inst = inputs_from_matrix(np.full((2, 5), 3), name="flat")
    res = IteratedLocalSearch(inst, SearchConfig(seed=0, window_size=0, max_iter=7)).run()
    assert res.stagnations == 0
    assert res.iterations == 7


def test_single_job_instance() -> None:
    inst = inputs_from_matrix(np.array([[2], [3], [4]]), name="one")
    res = IteratedLocalSearch(inst, SearchConfig(seed=0, max_iter=3)).run()
    assert res.permutation == [0]
    assert res.makespan == 9


def test_failing_logger_does_not_break_run() -> None:
    def boom(_event: dict) -> None:
        raise RuntimeError("trace sink down")

    inst = _instance(n=6, m=3)
    res = IteratedLocalSearch(inst, SearchConfig(seed=0, max_iter=5), logger=boom).run()
    assert res.makespan > 0
