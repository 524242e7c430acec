#!/usr/bin/env python3
"""
Build binary expression trees for a batch of raw arithmetic expressions.

Input can be JSONL, CSV or Parquet (a single file, a directory, or a glob
pattern). Each record must carry the raw text in --column (default
'expression'):

    {"id": 0, "expression": "2(3+4)"}

Output JSONL keeps every input field and adds the normalized text and the
serialized tree:

    {"id": 0, "expression": "2(3+4)", "normalized": "2 * (3+4)",
     "tree": {"value": "*", "left": {...}, "right": {...}, "isSubExpression": false}}

Invalid expressions are skipped unless --keep-failures is given, in which
case they are written with "tree": null and an "error" field.

A missing --column is an error in every format: a CSV/Parquet file without
the column, or a JSONL record without the field, raises KeyError. A field
that is present but empty or not a string is reported as [SKIP].

Usage:
    python build_expression_trees.py \
        --in manual_expressions.jsonl \
        --out expression_trees.jsonl

    python build_expression_trees.py \
        --in 'data/*.parquet' \
        --out expression_trees.jsonl \
        --column formula \
        --max 1000
"""

import argparse
import glob
import json
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import pandas as pd

from expr_tree import submit_expression

DEFAULT_COLUMN = "expression"
SUPPORTED_SUFFIXES = (".jsonl", ".csv", ".parquet")


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(
        description="Convert raw arithmetic expressions into serialized expression trees."
    )
    p.add_argument(
        "--in",
        dest="in_spec",
        required=True,
        help=(
            "Input spec: a .jsonl/.csv/.parquet file, a directory, or a glob "
            "pattern (e.g., 'data/*.parquet')."
        ),
    )
    p.add_argument(
        "--out",
        dest="out_path",
        required=True,
        help="Output JSONL file with added 'normalized' and 'tree' fields.",
    )
    p.add_argument(
        "--column",
        dest="col_name",
        default=DEFAULT_COLUMN,
        help=f"Field holding the raw expression (default: {DEFAULT_COLUMN}).",
    )
    p.add_argument(
        "--max",
        dest="max_items",
        type=int,
        default=None,
        help="Optional max number of records to process (for testing).",
    )
    p.add_argument(
        "--keep-failures",
        action="store_true",
        help="Also write invalid expressions, with tree=null and an 'error' field.",
    )
    return p.parse_args(argv)


def iter_input_files(spec: str) -> Iterable[Path]:
    """
    Resolve the --in spec into a list of input files.

    spec can be:
      - a single .jsonl / .csv / .parquet file path
      - a directory containing such files
      - a glob pattern (e.g. 'data/*.parquet')
    """
    p = Path(spec)

    # Case 1: exact file
    if p.is_file() and p.suffix in SUPPORTED_SUFFIXES:
        yield p
        return

    # Case 2: directory
    if p.is_dir():
        for q in sorted(p.iterdir()):
            if q.is_file() and q.suffix in SUPPORTED_SUFFIXES:
                yield q
        return

    # Case 3: treat as glob pattern
    matches = sorted(Path(m) for m in glob.glob(spec))
    if not matches:
        raise FileNotFoundError(
            f"No input files found for spec {spec!r} "
            "(not a file, not a directory, and glob had no matches)."
        )
    for q in matches:
        if q.is_file() and q.suffix in SUPPORTED_SUFFIXES:
            yield q


def load_records(path: Path, col_name: str) -> Iterator[Dict[str, Any]]:
    """Yield one dict per record; tabular inputs go through pandas."""
    if path.suffix == ".jsonl":
        with path.open("r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                rec = json.loads(line)
                if col_name not in rec:
                    raise KeyError(
                        f"Field '{col_name}' not found in {path} line {line_no}. "
                        f"Available fields: {list(rec)}"
                    )
                yield rec
        return

    if path.suffix == ".csv":
        # Keep "12" as text, not an int column
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    else:
        df = pd.read_parquet(path)

    if col_name not in df.columns:
        raise KeyError(
            f"Column '{col_name}' not found in {path}. "
            f"Available columns: {list(df.columns)}"
        )

    # to_json turns numpy scalars and NaN into plain JSON values
    for rec in json.loads(df.to_json(orient="records", force_ascii=False)):
        yield rec


def build_record(rec: Dict[str, Any], col_name: str) -> Dict[str, Any]:
    """Attach 'normalized', 'tree' and (on failure) 'error' to a copy of rec."""
    result = submit_expression(rec[col_name])
    out = dict(rec)
    out["normalized"] = result.normalized
    out["tree"] = result.tree.to_dict() if result.tree is not None else None
    if result.error is not None:
        out["error"] = result.error
    return out


def build_trees(
    in_spec: str,
    out_path: Path,
    col_name: str = DEFAULT_COLUMN,
    max_items: Optional[int] = None,
    keep_failures: bool = False,
) -> Tuple[int, int]:
    """Convert every record reachable from in_spec; return (num_ok, num_fail)."""
    input_files: List[Path] = list(iter_input_files(in_spec))
    if not input_files:
        raise RuntimeError(f"No input files resolved from spec {in_spec!r}")

    print(f"[INFO] Found {len(input_files)} input file(s).")
    print(f"[INFO] Using column '{col_name}' for expressions.")

    num_ok = 0
    num_fail = 0
    num_total = 0

    with out_path.open("w", encoding="utf-8") as fout:
        for path in input_files:
            if max_items is not None and num_total >= max_items:
                break

            print(f"[INFO] Reading {path} ...")
            for rec in load_records(path, col_name):
                if max_items is not None and num_total >= max_items:
                    break

                expr = rec.get(col_name)
                rec_id = rec.get("id", num_total)
                if not isinstance(expr, str) or not expr.strip():
                    print(f"[SKIP] {rec_id} (empty expression)")
                    continue

                num_total += 1
                out = build_record(rec, col_name)

                if out["tree"] is None:
                    num_fail += 1
                    print(f"[FAIL] {rec_id}")
                    if not keep_failures:
                        continue
                else:
                    num_ok += 1
                    print(f"[OK] {rec_id}")

                fout.write(json.dumps(out, ensure_ascii=False) + "\n")

    print(f"[INFO] Processed {num_total} expressions from {in_spec}")
    print(f"[INFO]   Converted (OK): {num_ok}")
    print(f"[INFO]   Invalid: {num_fail}")
    print(f"[INFO] Output written to {out_path}")
    return num_ok, num_fail


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    build_trees(
        args.in_spec,
        Path(args.out_path),
        col_name=args.col_name,
        max_items=args.max_items,
        keep_failures=args.keep_failures,
    )


if __name__ == "__main__":
    main()
