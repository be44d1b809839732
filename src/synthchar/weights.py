"""Molecular weights and gravimetric factors."""

from __future__ import annotations

import logging
import math
from typing import Mapping

from synthchar.formula import ElementCounts, FormulaParseError, parse_formula
from synthchar.periodic import MassLookup

logger = logging.getLogger(__name__)


def formula_mass(counts: Mapping[str, float], table: MassLookup) -> float | None:
    """Sum ``count * atomic_mass`` over parsed element counts.

    Returns None if any symbol is missing from ``table``; an unknown mass is
    never treated as zero.
    """
    total = 0.0
    for symbol, count in counts.items():
        mass = table.atomic_mass(symbol)
        if mass is None:
            logger.debug("No atomic mass for %s", symbol)
            return None
        total += count * mass
    return total if math.isfinite(total) else None


def molecular_weight(formula: str, table: MassLookup) -> float | None:
    """Molecular weight (g/mol) of ``formula``, or None if it cannot be computed."""
    try:
        counts: ElementCounts = parse_formula(formula)
    except FormulaParseError as exc:
        logger.debug("Cannot weigh %r: %s", formula, exc.message)
        return None
    if not counts:
        return None
    return formula_mass(counts, table)


def gravimetric_factor(
    precursor_formula: str,
    product_formula: str,
    precursor_moles: float,
    product_moles: float,
    table: MassLookup,
) -> float | None:
    """Mass of product obtained per unit mass of precursor.

    GF = (n_product * MW_product) / (n_precursor * MW_precursor)

    Args:
        precursor_formula: Formula of the starting material.
        product_formula: Formula of the compound it converts into.
        precursor_moles: Moles of precursor in the conversion (must be > 0).
        product_moles: Moles of product formed (0 is allowed and gives GF = 0).
        table: Atomic mass source.

    Returns:
        The factor, or None when either molecular weight is undefined or the
        mole counts are out of range.
    """
    if not (math.isfinite(precursor_moles) and math.isfinite(product_moles)):
        return None
    if precursor_moles <= 0 or product_moles < 0:
        return None
    precursor_weight = molecular_weight(precursor_formula, table)
    product_weight = molecular_weight(product_formula, table)
    if precursor_weight is None or product_weight is None or precursor_weight <= 0:
        return None
    factor = (product_moles * product_weight) / (precursor_moles * precursor_weight)
    return factor if math.isfinite(factor) else None
