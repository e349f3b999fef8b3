# src/flowshop/config.py
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class SearchConfig:
    """Parameters of one iterated local search run.

    Attributes:
        window_size: Cost observations kept by the stagnation detector (0 disables it).
        robust: Report every detected plateau to the shared local-optimum stats.
        destroy_fraction: Share of jobs removed by one destruction/construction step.
        max_iter: Upper bound on perturbation iterations.
        max_stagnations: Plateaus tolerated before the search stops.
        time_limit: Wall-clock budget in seconds, or None for no limit.
        seed: Seed of the run's random generator.
        local_search: Apply insertion local search after every construction.
    """

    window_size: int = 10
    robust: bool = False
    destroy_fraction: float = 0.25
    max_iter: int = 1000
    max_stagnations: int = 3
    time_limit: Optional[float] = None
    seed: Optional[int] = None
    local_search: bool = True

    def __post_init__(self) -> None:
        if self.window_size < 0:
            raise ValueError("window_size must be non-negative")
        if not 0.0 < self.destroy_fraction < 1.0:
            raise ValueError("destroy_fraction must be within (0, 1)")
        if self.max_iter < 0:
            raise ValueError("max_iter must be non-negative")
        if self.max_stagnations < 1:
            raise ValueError("max_stagnations must be at least 1")
        if self.time_limit is not None and self.time_limit <= 0:
            raise ValueError("time_limit must be positive when given")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "SearchConfig":
        """Build a config from loose options; unknown keys are ignored."""
        fields = {f.name: f for f in dataclasses.fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            if key not in fields or value is None:
                continue
            if key in ("window_size", "max_iter", "max_stagnations", "seed"):
                kwargs[key] = int(value)
            elif key in ("destroy_fraction", "time_limit"):
                kwargs[key] = float(value)
            elif key in ("robust", "local_search"):
                kwargs[key] = value if isinstance(value, bool) else str(value).lower() in ("1", "true", "yes")
        return cls(**kwargs)

    def replace(self, **changes: Any) -> "SearchConfig":
        return dataclasses.replace(self, **changes)

    def as_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


__all__ = ["SearchConfig"]
