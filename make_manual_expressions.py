#!/usr/bin/env python3
import argparse
import json
from pathlib import Path

OUT = Path("manual_expressions.jsonl")

CASES = [
    # ----- Plain arithmetic -----
    ("arith_1", "2 + 3"),
    ("arith_2", "10 - 4 - 3"),      # left-assoc: (10-4)-3
    ("arith_3", "2 + 3 * 4"),
    ("arith_4", "15 / 4"),

    # ----- Powers -----
    ("power_1", "2 ^ 3"),
    ("power_2", "2 ^ 3 ^ 2"),       # right-assoc: 2^(3^2)

    # ----- Grouping -----
    ("group_1", "(2+3)*(10-5)"),
    ("group_2", "((1 + 2)) * 3"),
    ("group_3", "2 * (3 + (4 - 1))"),

    # ----- Alternate brackets -----
    ("bracket_1", "[1+2]*{3+4}"),
    ("bracket_2", "{[2 + 3] * 4} / 2"),

    # ----- Implicit multiplication -----
    ("implicit_1", "2(3+4)"),
    ("implicit_2", "(3+4)2"),
    ("implicit_3", "2.5 (4)"),

    # ----- Dash glyphs -----
    ("dash_1", "5 – 2"),

    # ----- Decimals & exponents -----
    ("num_1", "0.1 + 0.2"),
    ("num_2", "1e3 / .5"),

    # ----- Invalid (should produce no tree) -----
    ("bad_1", "(2+"),
    ("bad_2", "2 + * 3"),
    ("bad_3", "-5 + 1"),            # unary minus is not representable
    ("bad_4", "(2)(3)"),
    ("bad_5", "x + 1"),
]


def parse_args():
    p = argparse.ArgumentParser(
        description="Write the hand-curated expression cases to a JSONL file."
    )
    p.add_argument(
        "--out",
        dest="out_path",
        default=str(OUT),
        help=f"Output JSONL file (default: {OUT}).",
    )
    return p.parse_args()


def main():
    args = parse_args()
    out_path = Path(args.out_path)
    with out_path.open("w", encoding="utf-8") as f:
        for id_, expr in CASES:
            rec = {
                "id": id_,
                "expression": expr,
            }
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")
    print(f"Wrote {len(CASES)} cases to {out_path}")


if __name__ == "__main__":
    main()
