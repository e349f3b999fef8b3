import pytest

from flowshop.config import SearchConfig


def test_defaults() -> None:
    cfg = SearchConfig()
    assert cfg.window_size == 10
    assert not cfg.robust
    assert cfg.time_limit is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"window_size": -1},
        {"destroy_fraction": 0.0},
        {"destroy_fraction": 1.0},
        {"max_iter": -5},
        {"max_stagnations": 0},
        {"time_limit": 0},
    ],
)
def test_invalid_values(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        SearchConfig(**kwargs)


def test_from_mapping_coerces_and_ignores_unknown() -> None:
    cfg = SearchConfig.from_mapping(
        {"window_size": "4", "robust": "true", "time_limit": "2.5", "seed": 3, "colour": "red", "max_iter": None}
    )
    assert cfg.window_size == 4
    assert cfg.robust is True
    assert cfg.time_limit == 2.5
    assert cfg.seed == 3
    assert cfg.max_iter == 1000


def test_replace_returns_copy() -> None:
    cfg = SearchConfig(seed=1)
    other = cfg.replace(seed=2)
    assert cfg.seed == 1
    assert other.seed == 2
    assert other.as_dict()["seed"] == 2
