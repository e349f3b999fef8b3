# scripts/run_experiments.py
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# make src importable
THIS_FILE = Path(__file__).resolve()
ROOT = THIS_FILE.parents[1]
SRC_DIR = ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

import pandas as pd
from flowshop.config import SearchConfig
from flowshop.inputs import (
    attach_best_known,
    load_best_known,
    read_baker_instance,
    read_instances,
    read_raw_instance,
)
from flowshop.ils import IteratedLocalSearch
from flowshop.reporting import add_rpd_column, local_optima_frame, summarise_by_instance
from flowshop.runtime import RuntimeContext

log = logging.getLogger("flowshop.cli")


def load_inputs(args) -> dict:
    if args.xlsx:
        return read_instances(args.xlsx, verbose=args.verbose)
    reader = read_baker_instance if args.format == "baker" else read_raw_instance
    insts = {}
    for path in args.files:
        inst = reader(path)
        insts[inst.name] = inst
    return insts


def run_single(inst, config: SearchConfig, context: RuntimeContext, trace_dir: Path | None) -> dict:
    # optional trace writer
    logger = None
    f = None
    if trace_dir is not None:
        trace_dir.mkdir(parents=True, exist_ok=True)
        trace_path = trace_dir / f"trace_{inst.name}_seed{config.seed}.jsonl"
        f = trace_path.open("w", encoding="utf-8")
        def _logger(ev: dict):
            f.write(json.dumps(ev) + "\n"); f.flush()
        logger = _logger

    try:
        res = IteratedLocalSearch(inst, config, context=context, logger=logger).run()
    finally:
        if f is not None:
            f.close()

    return {
        "instance": inst.name,
        "seed": config.seed,
        "makespan": res.makespan,
        "expected_makespan": res.expected_makespan,
        "iterations": res.iterations,
        "stagnations": res.stagnations,
        "elapsed": res.elapsed,
        "permutation": " ".join(map(str, res.permutation)),
    }


def main():
    p = argparse.ArgumentParser(description="Run the flow-shop ILS over a set of instances")
    # data
    p.add_argument("files", nargs="*", help="Instance files (see --format)")
    p.add_argument("--format", choices=("baker", "raw"), default="baker")
    p.add_argument("--xlsx", type=str, default="", help="Workbook with one instance per sheet")
    p.add_argument("--best-known", type=str, default="", help="CSV with instance,best_makespan")
    p.add_argument("--seeds", type=str, default="0,1,2,3,4")
    p.add_argument("--outdir", type=str, default="results")
    p.add_argument("--verbose", action="store_true")
    p.add_argument("--trace", action="store_true", help="write JSONL step traces into OUTDIR/traces/")
    # search parameters
    p.add_argument("--time-limit", type=float, default=10.0, help="seconds per run")
    p.add_argument("--window-size", type=int, default=10)
    p.add_argument("--robust", action="store_true")
    p.add_argument("--destroy-fraction", type=float, default=0.25)
    p.add_argument("--max-iter", type=int, default=1000)
    p.add_argument("--max-stagnations", type=int, default=3)
    p.add_argument("--no-local-search", action="store_true")

    args = p.parse_args()
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not args.xlsx and not args.files:
        p.error("give instance files or --xlsx")

    outdir = Path(args.outdir); outdir.mkdir(parents=True, exist_ok=True)
    trace_dir = (outdir / "traces") if args.trace else None

    insts = load_inputs(args)
    bk = {}
    if args.best_known:
        bk = load_best_known(args.best_known)
        attach_best_known(insts, bk)

    base = SearchConfig(
        window_size=args.window_size,
        robust=args.robust,
        destroy_fraction=args.destroy_fraction,
        max_iter=args.max_iter,
        max_stagnations=args.max_stagnations,
        time_limit=args.time_limit,
        local_search=not args.no_local_search,
    )
    seeds = [int(x) for x in args.seeds.split(",") if x.strip()]
    context = RuntimeContext()

    rows = []
    for name, inst in insts.items():
        for sd in seeds:
            log.info("-> %s | seed=%d (t<=%ss, max_iter=%d)", name, sd, args.time_limit, args.max_iter)
            r = run_single(inst, base.replace(seed=sd), context, trace_dir)
            rows.append(r)
            print(f"{name} | seed={sd} -> {r['makespan']} in {r['elapsed']:.2f}s")

    df = pd.DataFrame(rows)
    if bk:
        df = add_rpd_column(df, best_known=bk)
    df.to_csv(outdir / "raw.csv", index=False)
    summarise_by_instance(df).to_csv(outdir / "summary_by_instance.csv", index=False)
    if args.robust:
        local_optima_frame(context.local_optima).to_csv(outdir / "local_optima.csv", index=False)

    meta = {
        "args": vars(args),
        "n_instances": len(insts),
        "seeds": seeds,
        "config": base.as_dict(),
        "local_optima": context.local_optima.count,
    }
    with open(outdir / "meta.json", "w") as f:
        json.dump(meta, f, indent=2)


if __name__ == "__main__":
    main()
