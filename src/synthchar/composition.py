"""Composition percentages and chart colors for batch components."""

from __future__ import annotations

import math
from typing import Iterable

from synthchar.constants import COLOR_LIGHTNESS, COLOR_SATURATION
from synthchar.models import Component, CompositionSlice


def string_hash(text: str) -> int:
    """Stable signed 32-bit hash: ``h = h * 31 + code`` per character."""
    value = 0
    for char in text:
        value = ((value << 5) - value + ord(char)) & 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def formula_hue(formula: str) -> int:
    return abs(string_hash(formula)) % 360


def formula_color(formula: str) -> str:
    return f"hsl({formula_hue(formula)}, {COLOR_SATURATION}%, {COLOR_LIGHTNESS}%)"


def composition(components: Iterable[Component]) -> list[CompositionSlice]:
    """Share of each formula in the summed matrix percentages.

    Components with a blank formula or a missing, zero or negative matrix are
    left out. Formulas are keyed exactly as written. When the same formula
    appears twice the later matrix replaces the earlier one, keeping the
    position of the first occurrence.
    """
    matrices: dict[str, float] = {}
    for component in components:
        formula = component.formula
        matrix = component.matrix_percent
        if not formula.strip() or matrix is None or not math.isfinite(matrix) or matrix <= 0:
            continue
        matrices[formula] = float(matrix)

    total = sum(matrices.values())
    if total <= 0:
        return []
    return [
        CompositionSlice(
            formula=formula,
            percentage=matrix / total * 100.0,
            color=formula_color(formula),
        )
        for formula, matrix in matrices.items()
    ]
