"""Chemical formula parsing.

Formulas follow the grammar::

    formula := group*
    group   := element count? | "(" formula ")" count?
    element := [A-Z][a-z]*
    count   := digits ["." digits] | "." digits

A count multiplies everything in the group it follows. Counts for a symbol
that occurs more than once are summed, both within a scope and across
parenthesized groups, so ``"CH3CH2OH"`` and ``"C2H6O"`` parse to the same
element counts.
"""

from __future__ import annotations

import string
from numbers import Number
from typing import Dict, Optional

ElementCounts = Dict[str, Number]

_UPPER = frozenset(string.ascii_uppercase)
_LOWER = frozenset(string.ascii_lowercase)
_DIGITS = frozenset(string.digits)


class FormulaParseError(ValueError):
    """A formula string does not follow the formula grammar."""

    def __init__(self, formula: str, position: int, message: str) -> None:
        self.formula = formula
        self.position = position
        self.message = message
        super().__init__(f"{message} at position {position}:\n{formula}\n{' ' * position}^")


def _merge(target: ElementCounts, source: ElementCounts, multiplier: Number = 1) -> None:
    for symbol, count in source.items():
        target[symbol] = target.get(symbol, 0) + count * multiplier


class _FormulaParser:
    def __init__(self, formula: str) -> None:
        self.formula = formula
        self.pos = 0

    def error(self, message: str, position: Optional[int] = None) -> FormulaParseError:
        return FormulaParseError(
            self.formula, self.pos if position is None else position, message
        )

    def peek(self) -> str:
        return self.formula[self.pos] if self.pos < len(self.formula) else ""

    def parse(self) -> ElementCounts:
        counts = self.parse_sequence()
        if self.pos < len(self.formula):
            # parse_sequence only stops early on ")" at top level
            raise self.error("unmatched ')'")
        return counts

    def parse_sequence(self) -> ElementCounts:
        counts: ElementCounts = {}
        while self.pos < len(self.formula):
            char = self.peek()
            if char == "(":
                start = self.pos
                self.pos += 1
                inner = self.parse_sequence()
                if self.peek() != ")":
                    raise self.error("unclosed '('", start)
                if not inner:
                    raise self.error("empty group", start)
                self.pos += 1
                _merge(counts, inner, self.parse_count())
            elif char == ")":
                break
            elif char in _UPPER:
                symbol = self.parse_symbol()
                _merge(counts, {symbol: 1}, self.parse_count())
            elif char in _DIGITS or char == ".":
                raise self.error("count does not follow an element or group")
            elif char == "-":
                raise self.error("negative count")
            elif char in _LOWER:
                raise self.error(f"element symbol cannot start with {char!r}")
            else:
                raise self.error(f"unrecognized character {char!r}")
        return counts

    def parse_symbol(self) -> str:
        start = self.pos
        self.pos += 1
        while self.peek() in _LOWER:
            self.pos += 1
        return self.formula[start:self.pos]

    def parse_count(self) -> Number:
        start = self.pos
        if self.peek() == "-":
            raise self.error("negative count")
        while self.peek() in _DIGITS:
            self.pos += 1
        integral = self.pos > start
        if self.peek() != ".":
            return int(self.formula[start:self.pos]) if integral else 1
        self.pos += 1
        fraction_start = self.pos
        while self.peek() in _DIGITS:
            self.pos += 1
        if self.pos == fraction_start or self.peek() == ".":
            raise self.error("malformed count", start)
        return float(self.formula[start:self.pos])


def parse_formula(formula: str) -> ElementCounts:
    """Convert a formula to an ordered dict (element -> count).

    Integer counts stay ``int``; any decimal count makes the affected entries
    ``float``. Symbols are kept in order of first appearance.

    >>> parse_formula("Ca3(PO4)2")
    {'Ca': 3, 'P': 2, 'O': 8}

    :raises FormulaParseError: if the formula is malformed
    """
    return _FormulaParser(formula.strip()).parse()


def try_parse_formula(formula: str) -> Optional[ElementCounts]:
    """Like :func:`parse_formula` but return None instead of raising."""
    try:
        return parse_formula(formula)
    except FormulaParseError:
        return None


def format_counts(counts: ElementCounts) -> str:
    """Render element counts back to a flat formula, omitting unit counts."""
    parts = []
    for symbol, count in counts.items():
        if count == 1:
            parts.append(symbol)
        else:
            parts.append(f"{symbol}{count:g}")
    return "".join(parts)
