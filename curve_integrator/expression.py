"""
Single-variable algebraic expressions: tokenizer, recursive-descent parser
and a small tree evaluator working on numpy arrays.

Grammar
-------
    expression := term (('+' | '-') term)*
    term       := unary (('*' | '/') unary | <implicit> unary)*
    unary      := ('+' | '-') unary | power
    power      := primary ('^' unary)?
    primary    := NUMBER | CONSTANT | VARIABLE | FUNCTION '(' expression ')'
                | '(' expression ')'

``**`` is accepted as a synonym for ``^``.  Power is right-associative and
binds tighter than unary minus, so ``-x^2`` is ``-(x^2)``.  Implicit
multiplication applies when a factor is directly followed by an identifier or
an opening parenthesis (``2x``, ``3(x + 1)``, ``0.5x^2``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Union

import numpy as np
from numpy.typing import NDArray

from .errors import ExpressionParseError

FloatArray = NDArray[np.float64]
ArrayLike = Union[float, FloatArray]

CONSTANTS: dict[str, float] = {
    "e": float(np.e),
    "pi": float(np.pi),
}

FUNCTIONS: dict[str, Callable[[FloatArray], FloatArray]] = {
    "ln": np.log,
    "log": np.log,       # natural log, as math.js reads it
    "log10": np.log10,
    "exp": np.exp,
    "sqrt": np.sqrt,
    "abs": np.abs,
    "sin": np.sin,
    "cos": np.cos,
    "tan": np.tan,
}

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
  | (?P<ident>[A-Za-z_][A-Za-z_0-9]*)
  | (?P<op>\*\*|[-+*/^()])
    """,
    re.VERBOSE,
)


@dataclass(frozen=True, slots=True)
class Token:
    kind: str   # "number" | "ident" | "op" | "end"
    text: str
    pos: int


def tokenize(text: str) -> list[Token]:
    tokens: list[Token] = []
    pos = 0
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            raise ExpressionParseError(f"unexpected character {text[pos]!r}", text, pos)
        kind = m.lastgroup
        if kind != "ws":
            value = m.group()
            tokens.append(Token(kind, "^" if value == "**" else value, pos))
        pos = m.end()
    tokens.append(Token("end", "", len(text)))
    return tokens


# ===========================================================================
# Syntax tree
# ===========================================================================

class Node:

    def evaluate(self, x: FloatArray) -> FloatArray:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class Number(Node):
    value: float

    def evaluate(self, x: FloatArray) -> FloatArray:
        return np.full_like(x, self.value)


@dataclass(frozen=True, slots=True)
class Variable(Node):
    name: str

    def evaluate(self, x: FloatArray) -> FloatArray:
        return x


@dataclass(frozen=True, slots=True)
class Negate(Node):
    operand: Node

    def evaluate(self, x: FloatArray) -> FloatArray:
        return np.negative(self.operand.evaluate(x))


_BINARY_OPS: dict[str, Callable[[FloatArray, FloatArray], FloatArray]] = {
    "+": np.add,
    "-": np.subtract,
    "*": np.multiply,
    "/": np.divide,
    "^": np.power,
}


@dataclass(frozen=True, slots=True)
class BinaryOp(Node):
    op: str
    left: Node
    right: Node

    def evaluate(self, x: FloatArray) -> FloatArray:
        return _BINARY_OPS[self.op](self.left.evaluate(x), self.right.evaluate(x))


@dataclass(frozen=True, slots=True)
class Call(Node):
    name: str
    argument: Node

    def evaluate(self, x: FloatArray) -> FloatArray:
        return FUNCTIONS[self.name](self.argument.evaluate(x))


# ===========================================================================
# Parser
# ===========================================================================

class _Parser:

    def __init__(self, text: str, variable: str) -> None:
        self._text = text
        self._variable = variable
        self._tokens = tokenize(text)
        self._i = 0

    @property
    def _tok(self) -> Token:
        return self._tokens[self._i]

    def _advance(self) -> Token:
        tok = self._tokens[self._i]
        self._i += 1
        return tok

    def _error(self, message: str, tok: Token) -> ExpressionParseError:
        return ExpressionParseError(message, self._text, tok.pos)

    def _expect(self, op: str) -> None:
        tok = self._tok
        if tok.kind != "op" or tok.text != op:
            found = "end of input" if tok.kind == "end" else repr(tok.text)
            raise self._error(f"expected {op!r}, found {found}", tok)
        self._advance()

    def parse(self) -> Node:
        if self._tok.kind == "end":
            raise self._error("empty expression", self._tok)
        node = self._expression()
        if self._tok.kind != "end":
            raise self._error(f"unexpected {self._tok.text!r}", self._tok)
        return node

    def _expression(self) -> Node:
        node = self._term()
        while self._tok.kind == "op" and self._tok.text in "+-":
            op = self._advance().text
            node = BinaryOp(op, node, self._term())
        return node

    def _term(self) -> Node:
        node = self._unary()
        while True:
            tok = self._tok
            if tok.kind == "op" and tok.text in ("*", "/"):
                self._advance()
                node = BinaryOp(tok.text, node, self._unary())
            elif tok.kind == "ident" or (tok.kind == "op" and tok.text == "("):
                node = BinaryOp("*", node, self._unary())
            else:
                return node

    def _unary(self) -> Node:
        tok = self._tok
        if tok.kind == "op" and tok.text in "+-":
            self._advance()
            operand = self._unary()
            return Negate(operand) if tok.text == "-" else operand
        return self._power()

    def _power(self) -> Node:
        base = self._primary()
        if self._tok.kind == "op" and self._tok.text == "^":
            self._advance()
            return BinaryOp("^", base, self._unary())
        return base

    def _primary(self) -> Node:
        tok = self._tok
        if tok.kind == "number":
            self._advance()
            return Number(float(tok.text))
        if tok.kind == "ident":
            self._advance()
            name = tok.text
            if name in FUNCTIONS:
                if not (self._tok.kind == "op" and self._tok.text == "("):
                    raise self._error(f"function {name!r} needs a parenthesised argument", self._tok)
                self._advance()
                arg = self._expression()
                self._expect(")")
                return Call(name, arg)
            if name == self._variable:
                return Variable(name)
            if name in CONSTANTS:
                return Number(CONSTANTS[name])
            raise self._error(f"unknown identifier {name!r}", tok)
        if tok.kind == "op" and tok.text == "(":
            self._advance()
            node = self._expression()
            self._expect(")")
            return node
        if tok.kind == "end":
            raise self._error("unexpected end of expression", tok)
        raise self._error(f"unexpected {tok.text!r}", tok)


# ===========================================================================
# Public API
# ===========================================================================

@dataclass(frozen=True, slots=True)
class Expression:
    """A parsed expression in one free variable; call it like a function."""

    text: str
    variable: str
    root: Node

    def evaluate(self, x: Any) -> ArrayLike:
        """Evaluate on a scalar or an array.

        Domain violations (division by zero, log of a non-positive value,
        fractional power of a negative base) yield inf/nan entries, never an
        exception; callers decide how to treat non-finite values.
        """
        x_arr = np.asarray(x, dtype=np.float64)
        with np.errstate(all="ignore"):
            out = np.asarray(self.root.evaluate(x_arr), dtype=np.float64)
        if x_arr.ndim == 0:
            return float(out)
        return np.broadcast_to(out, x_arr.shape).copy()

    __call__ = evaluate

    def __str__(self) -> str:
        return self.text


def parse_expression(text: str, variable: str = "x") -> Expression:
    if not isinstance(text, str):
        raise ExpressionParseError(f"expected text, got {type(text).__name__}", repr(text))
    if variable in CONSTANTS or variable in FUNCTIONS or not variable.isidentifier():
        raise ExpressionParseError(f"{variable!r} cannot be used as the variable name", text)
    return Expression(text=text, variable=variable, root=_Parser(text, variable).parse())
