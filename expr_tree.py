#!/usr/bin/env python3
"""
Binary expression trees for rendering.

Pipeline for a single submitted expression:

  1. Normalize the raw text with expr_normalize.normalize_expression
  2. Parse it into an Expr graph using expr_core.parse_expression
  3. Convert the graph into a strict binary TreeNode tree, where every
     node that came from a parenthesized group has is_sub_expression set

Only binary operators are representable. Unary signs (e.g. "-5") and node
kinds the converter does not know make the expression invalid; the caller
gets no tree at all rather than a partial one.

Usage:
    python expr_tree.py "(2+3)*(10-5)"
    python expr_tree.py "2(3+4)" --json
"""

from __future__ import annotations

import argparse
import json
import math
import sys
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from expr_core import (
    Expr,
    ConstantNode,
    OperatorNode,
    ParenthesisNode,
    ParseError,
    parse_expression,
)
from expr_normalize import normalize_expression

# Integral constants at or above this magnitude are printed in exponent form.
EXPONENT_THRESHOLD = 1e21


class UnsupportedNodeError(ValueError):
    """Raised when a node cannot be represented in a binary TreeNode tree."""
    pass


# ---------------------------------------------------------------------------
# Tree definition
# ---------------------------------------------------------------------------

def is_numeric_value(value: str) -> bool:
    """True for finite numeric text; "nan" and "inf" are not leaf values."""
    try:
        number = float(value)
    except ValueError:
        return False
    return math.isfinite(number)


@dataclass(frozen=True)
class TreeNode:
    value: str
    left: Optional["TreeNode"] = None
    right: Optional["TreeNode"] = None
    is_sub_expression: bool = False

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def to_dict(self) -> Dict[str, Any]:
        """
        JSON-ready form consumed by the renderer:
            {"value": "+", "left": {...}, "right": {...}, "isSubExpression": false}
        Absent children are omitted rather than written as null.
        """
        out: Dict[str, Any] = {"value": self.value}
        if self.left is not None:
            out["left"] = self.left.to_dict()
        if self.right is not None:
            out["right"] = self.right.to_dict()
        out["isSubExpression"] = self.is_sub_expression
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TreeNode":
        """Inverse of to_dict; raises ValueError for a dict breaking the binary shape."""
        value = data.get("value")
        if not isinstance(value, str):
            raise ValueError(f"Tree node value must be a string, got {value!r}")
        left = data.get("left")
        right = data.get("right")
        if is_numeric_value(value):
            if left is not None or right is not None:
                raise ValueError(f"Numeric node {value!r} cannot have children")
            return cls(value, is_sub_expression=bool(data.get("isSubExpression", False)))
        if left is None or right is None:
            raise ValueError(f"Operator node {value!r} needs both children")
        return cls(
            value,
            left=cls.from_dict(left),
            right=cls.from_dict(right),
            is_sub_expression=bool(data.get("isSubExpression", False)),
        )


def iter_tree(node: TreeNode) -> Iterator[TreeNode]:
    """Pre-order walk: node, then left subtree, then right subtree."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        if current.right is not None:
            stack.append(current.right)
        if current.left is not None:
            stack.append(current.left)


# ---------------------------------------------------------------------------
# Conversion from the parser's Expr graph
# ---------------------------------------------------------------------------

def format_number(value: float) -> str:
    """
    Render a constant the way it should appear on a node:
        2.0  -> "2"      1e5  -> "100000"
        2.5  -> "2.5"    1e21 -> "1e+21"
    """
    if math.isfinite(value) and value.is_integer() and abs(value) < EXPONENT_THRESHOLD:
        return str(int(value))
    return repr(float(value))


def convert_to_tree(node: Expr, is_sub_expression: bool = False) -> TreeNode:
    """
    Convert an Expr graph into a TreeNode tree.

    Parenthesis nodes never produce a TreeNode of their own; they only force
    is_sub_expression=True for everything converted beneath them.

    Works off an explicit stack, so a long flat sum like 1+1+...+1 (one tree
    level per term) converts without hitting the recursion limit.
    """
    # (node, flag, children_done); finished subtrees land on `built`
    pending = [(node, is_sub_expression, False)]
    built: List[TreeNode] = []

    while pending:
        current, flag, children_done = pending.pop()

        if isinstance(current, OperatorNode):
            if len(current.args) != 2:
                raise UnsupportedNodeError(
                    f"Operator {current.op!r} with {len(current.args)} operand(s) is not binary"
                )
            if children_done:
                right = built.pop()
                left = built.pop()
                built.append(TreeNode(current.op, left, right, flag))
            else:
                pending.append((current, flag, True))
                pending.append((current.args[1], flag, False))
                pending.append((current.args[0], flag, False))
            continue

        if isinstance(current, ConstantNode):
            built.append(TreeNode(format_number(current.value), is_sub_expression=flag))
            continue

        if isinstance(current, ParenthesisNode):
            pending.append((current.content, True, False))
            continue

        raise UnsupportedNodeError(f"Unsupported node type: {type(current).__name__}")

    return built[0]


# ---------------------------------------------------------------------------
# Renderings
# ---------------------------------------------------------------------------

def tree_to_infix(node: TreeNode) -> str:
    """
    Rebuild infix text, putting parentheses back around grouped operators.

    The flag is shared by everything inside a group, so nested groups cannot
    be told apart; every flagged operator gets its own parentheses, which
    keeps the structure even when it adds redundant ones:
        "(1+2*3)"  ->  "(1 + (2 * 3))"
    Ungrouped operators follow normal precedence and need none.
    """
    if node.is_leaf:
        return node.value
    text = f"{tree_to_infix(node.left)} {node.value} {tree_to_infix(node.right)}"
    if node.is_sub_expression:
        return f"({text})"
    return text


def format_tree(node: TreeNode, indent: str = "  ") -> str:
    """Indented dump for eyeballing structure; grouped nodes are tagged [sub]."""
    lines: List[str] = []

    def walk(n: TreeNode, depth: int) -> None:
        tag = " [sub]" if n.is_sub_expression else ""
        lines.append(f"{indent * depth}{n.value}{tag}")
        if n.left is not None:
            walk(n.left, depth + 1)
        if n.right is not None:
            walk(n.right, depth + 1)

    walk(node, 0)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Pipeline entry points
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Submission:
    expression: str
    normalized: str
    tree: Optional[TreeNode] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.tree is not None


def submit_expression(expression: str) -> Submission:
    """
    Run normalize -> parse -> convert for one raw expression.

    Never raises for bad input: a ParseError (including nesting too deep to
    parse) or UnsupportedNodeError is reported on stderr and comes back as a
    Submission with tree=None.
    """
    normalized = normalize_expression(expression)
    try:
        tree = convert_to_tree(parse_expression(normalized))
    except (ParseError, UnsupportedNodeError) as e:
        print(f"[ERROR] Invalid expression {normalized!r}: {e}", file=sys.stderr)
        return Submission(expression=expression, normalized=normalized, error=str(e))
    return Submission(expression=expression, normalized=normalized, tree=tree)


def build_expression_tree(expression: str) -> Optional[TreeNode]:
    """Return the tree for a raw expression, or None if it is invalid."""
    return submit_expression(expression).tree


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def parse_args():
    p = argparse.ArgumentParser(
        description="Build the binary expression tree for an arithmetic expression."
    )
    p.add_argument(
        "expression",
        help='Arithmetic expression, e.g. "(2+3)*(10-5)"',
    )
    p.add_argument(
        "--json",
        action="store_true",
        help="Print the tree as JSON instead of an indented outline.",
    )
    return p.parse_args()


def main():
    args = parse_args()
    result = submit_expression(args.expression)
    if result.tree is None:
        sys.exit(1)

    print(f"[INFO] Normalized: {result.normalized}")
    if args.json:
        print(json.dumps(result.tree.to_dict(), indent=2))
    else:
        print(format_tree(result.tree))


if __name__ == "__main__":
    main()
