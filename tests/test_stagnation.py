import pytest

from flowshop.runtime import LocalOptimumStats
from flowshop.stagnation import StagnationDetector


class SpySink:
    def __init__(self) -> None:
        self.counts = 0
        self.values: list = []

    def record_local_optimum_count(self) -> None:
        self.counts += 1

    def record_local_optimum_value(self, value: float) -> None:
        self.values.append(value)


def test_window_keeps_most_recent_values() -> None:
    det = StagnationDetector(3)
    for v in (1, 2, 3, 4, 5):
        det.observe(v)
    assert det.window == (3, 4, 5)
    assert len(det) == 3


def test_full_window_of_same_value_is_stagnant() -> None:
    det = StagnationDetector(4)
    for _ in range(4):
        det.observe(100)
    assert det.is_stagnant(100)
    assert not det.is_stagnant(99)


def test_partial_window_is_not_stagnant() -> None:
    det = StagnationDetector(4)
    for _ in range(3):
        det.observe(100)
    assert not det.is_stagnant(100)


def test_one_different_value_breaks_stagnation() -> None:
    det = StagnationDetector(4)
    for v in (100, 100, 101, 100):
        det.observe(v)
    assert not det.is_stagnant(100)
    det.observe(100)
    det.observe(100)
    det.observe(100)
    assert det.is_stagnant(100)


def test_stagnation_compares_values_bitwise() -> None:
    det = StagnationDetector(2)
    det.observe(float("nan"))
    det.observe(float("nan"))
    assert det.is_stagnant(float("nan"))
    det.observe(0.0)
    det.observe(0.0)
    assert det.is_stagnant(0.0)
    assert not det.is_stagnant(-0.0)


def test_zero_window_disables_detection() -> None:
    det = StagnationDetector(0, robust=True, sink=SpySink())
    for _ in range(10):
        det.observe(5)
    assert len(det) == 0
    assert not det.is_stagnant(5)
    assert det.sink.counts == 0


def test_trend_predicates_boundaries() -> None:
    det = StagnationDetector(3)
    for _ in range(3):
        det.observe(5)
    assert det.is_best_improving(5)
    assert not det.is_best_improving(6)
    assert det.is_improving(4)
    assert not det.is_improving(5)


def test_trend_predicates_use_min_and_max() -> None:
    det = StagnationDetector(3)
    for v in (7, 3, 9):
        det.observe(v)
    assert det.is_best_improving(3)
    assert not det.is_best_improving(4)
    assert det.is_improving(8)
    assert not det.is_improving(9)


def test_robust_mode_reports_every_positive_poll() -> None:
    sink = SpySink()
    det = StagnationDetector(2, robust=True, sink=sink)
    det.observe(42)
    det.observe(42)
    assert det.is_stagnant(42)
    assert det.is_stagnant(42)
    assert sink.counts == 2
    assert sink.values == [42, 42]


def test_non_robust_mode_stays_silent() -> None:
    sink = SpySink()
    det = StagnationDetector(2, robust=False, sink=sink)
    det.observe(1)
    det.observe(1)
    assert det.is_stagnant(1)
    assert sink.counts == 0


def test_robust_mode_feeds_shared_stats() -> None:
    stats = LocalOptimumStats()
    det = StagnationDetector(2, robust=True, sink=stats)
    det.observe(8.0)
    det.observe(8.0)
    det.is_stagnant(8.0)
    assert stats.count == 1
    assert stats.values == (8.0,)


def test_configure_resets_window() -> None:
    det = StagnationDetector(3)
    det.observe(1)
    det.configure(2, robust=True)
    assert det.window == ()
    assert det.window_size == 2
    assert det.robust
    with pytest.raises(ValueError):
        det.configure(-1)
