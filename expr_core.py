#!/usr/bin/env python3
"""
Core AST + parser for plain arithmetic expressions.

We parse normalized math strings of the form:

    2 * (3 + 4)
    (2+3)*(10-5)
    2 ^ 3 ^ 2
    1.5e3 / .5

into a generic expression-node graph:

    OperatorNode(op='*', args=[ConstantNode(2.0), ParenthesisNode(...)])

Grammar (informal):

    expr   -> add EOF

    add    -> mul (('+' | '-') mul)*
    mul    -> unary (('*' | '/') unary)*
    unary  -> ('-' | '+') unary | power
    power  -> atom ('^' unary)?          # right-associative

    atom   -> NUMBER
            | '(' add ')'

Unary signs are kept as one-argument OperatorNodes; whether they are
accepted is up to the consumer of the graph.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class ParseError(SyntaxError):
    """Raised for any malformed expression."""
    pass


# ---------------------------------------------------------------------------
# AST definitions
# ---------------------------------------------------------------------------

class Expr:
    """Base class for expression nodes."""
    pass


@dataclass
class ConstantNode(Expr):
    value: float


@dataclass
class OperatorNode(Expr):
    op: str   # '+', '-', '*', '/', '^'
    args: List[Expr] = field(default_factory=list)


@dataclass
class ParenthesisNode(Expr):
    content: Expr


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------

SYMBOLS = "+-*/^()"
DIGITS = "0123456789"


@dataclass
class Token:
    kind: str   # 'NUMBER', 'SYMBOL', 'EOF'
    value: str
    pos: int = 0

    def __repr__(self) -> str:
        return f"Token({self.kind!r}, {self.value!r})"


def _scan_number(src: str, i: int) -> int:
    """Return the index just past the numeric literal starting at i."""
    n = len(src)
    j = i
    while j < n and src[j] in DIGITS:
        j += 1
    if j < n and src[j] == ".":
        j += 1
        while j < n and src[j] in DIGITS:
            j += 1
    # Exponent only counts if digits follow: "2e" is a number then junk
    if j < n and src[j] in "eE":
        k = j + 1
        if k < n and src[k] in "+-":
            k += 1
        if k < n and src[k] in DIGITS:
            while k < n and src[k] in DIGITS:
                k += 1
            j = k
    return j


def tokenize_expr(src: str) -> List[Token]:
    """
    Turn a math string into a flat list of tokens.

    - Numbers: 42, 3.14, .5, 2., 1e3, 6.02E-23
    - Symbols: single characters in +-*/^()
    """
    tokens: List[Token] = []
    i = 0
    n = len(src)

    while i < n:
        c = src[i]

        if c.isspace():
            i += 1
            continue

        if c in DIGITS or (c == "." and i + 1 < n and src[i + 1] in DIGITS):
            j = _scan_number(src, i)
            tokens.append(Token("NUMBER", src[i:j], i))
            i = j
            continue

        if c in SYMBOLS:
            tokens.append(Token("SYMBOL", c, i))
            i += 1
            continue

        raise ParseError(f"Unexpected character {c!r} at position {i}")

    tokens.append(Token("EOF", "", n))
    return tokens


# ---------------------------------------------------------------------------
# Recursive-descent parser
# ---------------------------------------------------------------------------

class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def consume(self, expected_kind: Optional[str] = None,
                expected_value: Optional[str] = None) -> Token:
        tok = self.current
        if expected_kind is not None and tok.kind != expected_kind:
            raise ParseError(
                f"Expected {expected_value or expected_kind}, got {_describe(tok)}"
            )
        if expected_value is not None and tok.value != expected_value:
            raise ParseError(
                f"Expected {expected_value!r}, got {_describe(tok)}"
            )
        self.pos += 1
        return tok

    def match(self, kind: str, value: Optional[str] = None) -> bool:
        tok = self.current
        if tok.kind != kind:
            return False
        if value is not None and tok.value != value:
            return False
        return True

    def match_any(self, values: str) -> bool:
        return self.match("SYMBOL") and self.current.value in values

    # expr  -> add EOF
    def parse_expr(self) -> Expr:
        node = self.parse_add()
        if not self.match("EOF"):
            raise ParseError(f"Unexpected {_describe(self.current)} after expression")
        return node

    # add   -> mul (('+' | '-') mul)*
    def parse_add(self) -> Expr:
        node = self.parse_mul()
        while self.match_any("+-"):
            op = self.consume("SYMBOL").value
            right = self.parse_mul()
            node = OperatorNode(op=op, args=[node, right])
        return node

    # mul   -> unary (('*' | '/') unary)*
    def parse_mul(self) -> Expr:
        node = self.parse_unary()
        while self.match_any("*/"):
            op = self.consume("SYMBOL").value
            right = self.parse_unary()
            node = OperatorNode(op=op, args=[node, right])
        return node

    # unary -> ('-' | '+') unary | power
    def parse_unary(self) -> Expr:
        if self.match_any("+-"):
            op = self.consume("SYMBOL").value
            operand = self.parse_unary()
            return OperatorNode(op=op, args=[operand])
        return self.parse_power()

    # power -> atom ('^' unary)?   # right-associative
    def parse_power(self) -> Expr:
        left = self.parse_atom()
        if self.match("SYMBOL", "^"):
            self.consume("SYMBOL", "^")
            right = self.parse_unary()
            return OperatorNode(op="^", args=[left, right])
        return left

    # atom  -> NUMBER | '(' add ')'
    def parse_atom(self) -> Expr:
        tok = self.current

        if tok.kind == "NUMBER":
            self.consume("NUMBER")
            value = float(tok.value)
            if not math.isfinite(value):
                raise ParseError(f"Numeric literal out of range: {tok.value!r}")
            return ConstantNode(value)

        if tok.kind == "SYMBOL" and tok.value == "(":
            self.consume("SYMBOL", "(")
            if self.match("SYMBOL", ")"):
                raise ParseError(f"Empty parentheses at position {tok.pos}")
            content = self.parse_add()
            if not self.match("SYMBOL", ")"):
                raise ParseError(
                    f"Unbalanced parenthesis opened at position {tok.pos}"
                )
            self.consume("SYMBOL", ")")
            return ParenthesisNode(content)

        raise ParseError(f"Unexpected {_describe(tok)}, expected a number or '('")


def _describe(tok: Token) -> str:
    if tok.kind == "EOF":
        return "end of expression"
    return f"{tok.value!r} at position {tok.pos}"


# ---------------------------------------------------------------------------
# Top-level
# ---------------------------------------------------------------------------

def parse_expression(src: str) -> Expr:
    """
    Parse a normalized expression string into an Expr graph.

    Flat chains like 1+2+...+n parse in a loop, but every '(' level, unary
    sign and '^' costs parser frames; nesting past the recursion limit is
    reported as a ParseError rather than a RecursionError.
    """
    if not src.strip():
        raise ParseError("Empty expression")
    parser = Parser(tokenize_expr(src))
    try:
        return parser.parse_expr()
    except RecursionError:
        raise ParseError(
            f"Expression nested too deeply (stopped at {_describe(parser.current)})"
        ) from None


# ---------------------------------------------------------------------------
# Tiny manual test harness
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    tests = [
        "2 * (3+4)",
        "(2+3)*(10-5)",
        "2 ^ 3 ^ 2",
        "10 - 4 - 3",
        "-5 + 1",
        "(2+",
        "3 4",
    ]
    for t in tests:
        print("====", t)
        try:
            print(parse_expression(t))
        except ParseError as e:
            print("Syntax error:", e)
