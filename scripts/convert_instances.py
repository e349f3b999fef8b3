#!/usr/bin/env python3
"""Collect flow-shop instance files into a single Excel workbook.

Every Baker-format (``--format baker``) or Taillard-style (``--format raw``)
file in the input directory becomes one sheet holding the ``M N`` header
followed by the machines x jobs matrix, the layout
``flowshop.inputs.read_instances`` reads back.

Usage
-----

```
python scripts/convert_instances.py --input-dir data/baker --output data/Instances.xlsx
```

Dependencies: pandas and xlsxwriter.
"""

import argparse
import sys
from pathlib import Path
import pandas as pd

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

from flowshop.inputs import excel_sheet_names, read_baker_instance, read_raw_instance


def main() -> None:
    parser = argparse.ArgumentParser(description="Convert flow-shop instances to an Excel workbook")
    parser.add_argument("--input-dir", type=str, required=True, help="Directory with instance files")
    parser.add_argument("--output", type=str, required=True, help="Path to the output Excel file")
    parser.add_argument("--format", choices=("baker", "raw"), default="baker")
    parser.add_argument("--suffix", type=str, default=".txt", help="Instance file extension")
    args = parser.parse_args()
    input_dir = Path(args.input_dir)
    output_path = Path(args.output)
    if not input_dir.exists() or not input_dir.is_dir():
        raise FileNotFoundError(f"Input directory {input_dir} does not exist or is not a directory")
    files = sorted(p for p in input_dir.iterdir() if p.suffix.lower() == args.suffix.lower())
    if not files:
        raise FileNotFoundError(f"No {args.suffix} files found in {input_dir}")
    reader = read_baker_instance if args.format == "baker" else read_raw_instance
    instances = [reader(str(path)) for path in files]
    # Excel sheet names are capped at 31 characters and must stay distinct
    sheet_names = excel_sheet_names([inst.name for inst in instances])
    # Use xlsxwriter engine to ensure a proper .xlsx zip file is produced.
    with pd.ExcelWriter(output_path, engine="xlsxwriter") as writer:
        for instance, sheet_name in zip(instances, sheet_names):
            m, n = instance.n_machines, instance.n_jobs
            header = pd.DataFrame([[m, n]])
            df = pd.concat([header, pd.DataFrame(instance.p_times)], ignore_index=True)
            df.to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    print(f"Wrote {len(files)} instances to {output_path}")


if __name__ == "__main__":
    main()
