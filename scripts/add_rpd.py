#!/usr/bin/env python3
"""Augment a results CSV with RPD information."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pandas as pd

from flowshop.inputs import load_best_known
from flowshop.reporting import add_rpd_column, summarise_by_instance


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Add relative percent deviation (RPD) values to an experiment CSV"
    )
    parser.add_argument("--results", type=str, required=True, help="Input results CSV (raw.csv)")
    parser.add_argument(
        "--bks-file",
        type=str,
        required=True,
        help="CSV with columns 'instance' and 'best_makespan'",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Optional output path (defaults to overwriting the input file)",
    )
    parser.add_argument("--summary", type=str, default=None, help="Also write a per-instance summary here")
    args = parser.parse_args()

    df = pd.read_csv(args.results)
    best_known = load_best_known(args.bks_file)
    enriched = add_rpd_column(df, best_known)
    output_path = Path(args.output) if args.output else Path(args.results)
    enriched.to_csv(output_path, index=False)
    print(f"Wrote enriched results to {output_path}")
    if args.summary:
        summarise_by_instance(enriched).to_csv(args.summary, index=False)
        print(f"Wrote summary to {args.summary}")


if __name__ == "__main__":
    main()
