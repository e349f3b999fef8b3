"""Reporting helpers for flow-shop experiment results."""

from __future__ import annotations

from typing import Mapping

import pandas as pd

from .runtime import LocalOptimumStats


def add_rpd_column(df: pd.DataFrame, best_known: Mapping[str, int] | None = None) -> pd.DataFrame:
    """Return a copy of *df* with a normalised ``rpd`` column.

    Parameters
    ----------
    df:
        DataFrame with at least ``instance`` and ``makespan`` columns.
    best_known:
        Optional mapping from instance name to best known makespan.  When
        provided, the ``best_known`` column is overwritten with the mapped
        values before the RPD is computed.
    """

    if "instance" not in df.columns:
        raise ValueError("Input DataFrame must contain an 'instance' column")
    if "makespan" not in df.columns:
        raise ValueError("Input DataFrame must contain a 'makespan' column")

    result = df.copy()
    if best_known is not None:
        result["best_known"] = result["instance"].map(best_known)
    if "best_known" not in result.columns:
        result["best_known"] = pd.NA
    result["rpd"] = float("nan")
    known = pd.to_numeric(result["best_known"], errors="coerce")
    mask = known.notna() & (known > 0)
    result.loc[mask, "rpd"] = (result.loc[mask, "makespan"] - known[mask]) / known[mask] * 100.0
    return result


def summarise_by_instance(df: pd.DataFrame) -> pd.DataFrame:
    """Mean/min/std makespan and mean run statistics per instance."""

    required = {"instance", "makespan", "elapsed"}
    missing = required.difference(df.columns)
    if missing:
        raise ValueError(f"DataFrame missing required columns: {', '.join(sorted(missing))}")
    agg_dict: dict[str, object] = {
        "makespan": ["mean", "min", "std"],
        "elapsed": "mean",
    }
    for col in ("expected_makespan", "iterations", "stagnations", "rpd"):
        if col in df.columns:
            agg_dict[col] = "mean"
    grouped = df.groupby("instance", as_index=False).agg(agg_dict)
    # Flatten MultiIndex columns produced by aggregation
    grouped.columns = [
        "_".join(filter(None, map(str, col))).rstrip("_") for col in grouped.columns.values
    ]
    return grouped


def local_optima_frame(stats: LocalOptimumStats) -> pd.DataFrame:
    """One row per reported local optimum, in report order."""
    values = stats.values
    return pd.DataFrame({"order": range(len(values)), "value": list(values)})


__all__ = ["add_rpd_column", "local_optima_frame", "summarise_by_instance"]
