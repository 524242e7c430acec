#!/usr/bin/env python3
"""
Rewrite user-typed arithmetic into the canonical form expr_core accepts.

The rewrite is a fixed sequence of textual substitutions; later steps rely on
the bracket characters having been unified first:

    "[1+2]{3}"  ->  "(1+2)(3)"  ->  "(1+2) * (3)"
    "5 – 2"     ->  "5 - 2"

Usage:
    python expr_normalize.py "2(3+4)"
"""

import argparse
import re

OPEN_BRACKETS = "{["
CLOSE_BRACKETS = "}]"

# Digit runs are ASCII only; "2.5(3)" still matches on its trailing "5".
NUMBER_BEFORE_PAREN_RE = re.compile(r"([0-9]+)(\s*\()")
PAREN_BEFORE_NUMBER_RE = re.compile(r"(\))(\s*[0-9]+)")

DASH_GLYPHS = {
    "–": "-",   # en dash
}


# ----------------- rewrite steps ----------------- #

def unify_brackets(expr: str) -> str:
    """Turn { [ into ( and } ] into )."""
    for ch in OPEN_BRACKETS:
        expr = expr.replace(ch, "(")
    for ch in CLOSE_BRACKETS:
        expr = expr.replace(ch, ")")
    return expr


def insert_implicit_multiplication(expr: str) -> str:
    """
    Make juxtaposed numbers and parentheses explicit products:
        2(3)   -> 2 * (3)
        (3)4   -> (3) * 4
    Whitespace between the two operands is kept after the inserted '*'.
    """
    expr = NUMBER_BEFORE_PAREN_RE.sub(r"\1 * \2", expr)
    expr = PAREN_BEFORE_NUMBER_RE.sub(r"\1 * \2", expr)
    return expr


def replace_dash_glyphs(expr: str) -> str:
    for old, new in DASH_GLYPHS.items():
        expr = expr.replace(old, new)
    return expr


def normalize_expression(expr: str) -> str:
    """
    Combine all rewrite steps into a single pass. Never fails; malformed
    input comes out malformed and is left for the parser to reject.
    """
    expr = unify_brackets(expr)
    expr = insert_implicit_multiplication(expr)
    expr = replace_dash_glyphs(expr)
    return expr


# ----------------- main ----------------- #

def parse_args():
    p = argparse.ArgumentParser(
        description="Print the normalized form of an arithmetic expression."
    )
    p.add_argument("expression", help='Raw expression, e.g. "2[3+4]"')
    return p.parse_args()


def main():
    args = parse_args()
    print(normalize_expression(args.expression))


if __name__ == "__main__":
    main()
