import threading

from flowshop.runtime import AtomicCounter, LocalOptimumStats, RuntimeContext
from flowshop.solution import Solution


def test_counter_is_monotonic() -> None:
    c = AtomicCounter()
    assert c.value == 0
    assert [c.next() for _ in range(3)] == [1, 2, 3]
    assert c.value == 3


def test_counter_under_threads() -> None:
    c = AtomicCounter()
    seen: list = []
    lock = threading.Lock()

    def worker() -> None:
        got = [c.next() for _ in range(500)]
        with lock:
            seen.extend(got)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sorted(seen) == list(range(1, 4001))


def test_contexts_are_independent() -> None:
    a, b = RuntimeContext(), RuntimeContext()
    assert Solution(1, 1, a).id == 1
    assert Solution(1, 1, a).id == 2
    assert Solution(1, 1, b).id == 1


def test_local_optimum_stats() -> None:
    stats = LocalOptimumStats()
    assert stats.best() is None
    stats.record_local_optimum_count()
    stats.record_local_optimum_value(12)
    stats.record_local_optimum_value(10)
    assert stats.count == 1
    assert stats.values == (12.0, 10.0)
    assert stats.best() == 10.0
    stats.reset()
    assert stats.count == 0
    assert stats.values == ()
