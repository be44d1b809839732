"""Batch weight normalization and the full batch recomputation.

Each component contributes a raw quantity

    raw_i = matrix_i * weight_i * mole_ratio_i / 1000

where ``matrix_i`` is a 0-100 percentage and ``weight_i`` a molecular weight
in g/mol. Raw quantities are scaled so the batch sums to the desired mass:

    mass_i = desired_total * raw_i / sum(raw)

The same normalization produces three views of a batch:

- precursor view: component molecular weights, with the mole ratio taken from
  the product whose precursor matches the component (1 when none does
  or its precursor moles are not a finite positive number);
- gravimetric view: component molecular weights multiplied by the matching
  product's gravimetric factor, mole ratio 1; identical to the precursor view
  when no product supplies a factor for any component;
- product view: one line per product, product weight (times its gravimetric
  factor when defined) at the matrix of its precursor component.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Mapping, Sequence

import numpy as np

from synthchar.composition import composition
from synthchar.constants import BATCH_SCALE, MATRIX_TARGET, MATRIX_TOLERANCE
from synthchar.models import (
    BatchLine,
    BatchResult,
    BatchView,
    Component,
    Product,
    ProductSummary,
)
from synthchar.periodic import MassLookup
from synthchar.weights import gravimetric_factor, molecular_weight

logger = logging.getLogger(__name__)

MATRIX_WARNING = "Matrix values do not sum to 100%."


@dataclass(frozen=True)
class BatchEntry:
    matrix_percent: float | None
    weight: float | None
    mole_ratio: float = 1.0


@dataclass(frozen=True)
class BatchWeights:
    raw: np.ndarray
    total: float
    normalized: np.ndarray


def _defined(values: Sequence[float | None]) -> np.ndarray:
    """Array of ``values`` with None and non-finite entries replaced by 0."""
    array = np.array([np.nan if value is None else value for value in values], dtype=float)
    return np.where(np.isfinite(array), array, 0.0)


def batch_weights(entries: Sequence[BatchEntry], desired_total_mass: float) -> BatchWeights:
    """Raw quantities, their total, and masses scaled to ``desired_total_mass``.

    Undefined matrices, weights or ratios count as 0, as does a raw quantity
    that overflows. If the raw total is 0 (or overflows) every normalized
    mass is 0.

    Raises:
        ValueError: If ``desired_total_mass`` is negative or not finite.
    """
    if not math.isfinite(desired_total_mass) or desired_total_mass < 0:
        raise ValueError(f"Desired total mass must be a finite value >= 0, got {desired_total_mass}")

    matrices = _defined([entry.matrix_percent for entry in entries])
    weights = _defined([entry.weight for entry in entries])
    ratios = _defined([entry.mole_ratio for entry in entries])

    with np.errstate(over="ignore", invalid="ignore"):
        raw = matrices * weights * ratios / BATCH_SCALE
        raw = np.where(np.isfinite(raw), raw, 0.0)
        total = float(np.sum(raw))
    if not math.isfinite(total):
        logger.warning("Raw batch total overflows; treating the batch as empty")
        raw = np.zeros_like(raw)
        total = 0.0
    if total == 0.0:
        normalized = np.zeros_like(raw)
    else:
        normalized = desired_total_mass * (raw / total)
    return BatchWeights(raw=raw, total=total, normalized=normalized)


def normalize_batch(entries: Sequence[BatchEntry], desired_total_mass: float) -> list[float]:
    """Masses (g) for ``entries`` summing to ``desired_total_mass``, in input order."""
    return batch_weights(entries, desired_total_mass).normalized.tolist()


def _build_view(
    formulas: Sequence[str],
    entries: Sequence[BatchEntry],
    desired_total_mass: float,
) -> BatchView:
    result = batch_weights(entries, desired_total_mass)
    lines = tuple(
        BatchLine(
            formula=formula,
            matrix_percent=float(entry.matrix_percent or 0.0),
            weight=entry.weight,
            mole_ratio=entry.mole_ratio,
            raw_quantity=float(raw),
            mass=float(mass),
        )
        for formula, entry, raw, mass in zip(formulas, entries, result.raw, result.normalized)
    )
    return BatchView(lines=lines, total=result.total)


def matrix_warnings(components: Sequence[Component]) -> list[str]:
    total = sum(
        c.matrix_percent
        for c in components
        if c.matrix_percent is not None and math.isfinite(c.matrix_percent)
    )
    if total > 0 and abs(total - MATRIX_TARGET) > MATRIX_TOLERANCE:
        logger.warning("Matrix total is %.3f%%, expected %.0f%%", total, MATRIX_TARGET)
        return [MATRIX_WARNING]
    return []


def recompute(
    components: Sequence[Component],
    products: Sequence[Product],
    desired_total_mass: float,
    table: MassLookup,
) -> BatchResult:
    """Recalculate every derived quantity of a batch from its inputs.

    Pure: the result depends only on the arguments, and nothing is cached
    between calls.

    Args:
        components: Precursor components with matrix percentages.
        products: Products, each naming the precursor it is made from.
        desired_total_mass: Mass (g) every view is normalized to.
        table: Atomic mass source.

    Returns:
        A :class:`BatchResult` holding component molecular weights, product
        summaries, the precursor, gravimetric and product views, the
        composition and any input warnings.
    """
    component_weights = [molecular_weight(c.formula, table) for c in components]

    summaries = []
    for p in products:
        factor = None
        if p.formula.strip() and p.precursor_formula.strip():
            factor = gravimetric_factor(
                p.precursor_formula, p.formula, p.precursor_moles, p.product_moles, table
            )
        summaries.append(
            ProductSummary(
                formula=p.formula,
                precursor_formula=p.precursor_formula,
                molecular_weight=molecular_weight(p.formula, table),
                gravimetric_factor=factor,
            )
        )

    # later products override earlier ones sharing a precursor
    precursor_ratios: dict[str, float] = {}
    precursor_factors: dict[str, float] = {}
    for p, summary in zip(products, summaries):
        if not p.precursor_formula:
            continue
        precursor_ratios[p.precursor_formula] = _precursor_ratio(p.precursor_moles)
        if p.formula and summary.gravimetric_factor is not None:
            precursor_factors[p.precursor_formula] = summary.gravimetric_factor

    formulas = [c.formula for c in components]
    precursor = _build_view(
        formulas,
        [
            BatchEntry(c.matrix_percent, weight, precursor_ratios.get(c.formula, 1.0))
            for c, weight in zip(components, component_weights)
        ],
        desired_total_mass,
    )
    if any(f in precursor_factors for f in formulas):
        gravimetric = _build_view(
            formulas,
            [
                BatchEntry(c.matrix_percent, _adjusted(weight, precursor_factors.get(c.formula)))
                for c, weight in zip(components, component_weights)
            ],
            desired_total_mass,
        )
    else:
        # no factor applies to any component
        gravimetric = precursor

    matrices = _matrix_lookup(components)
    product = _build_view(
        [p.formula for p in products],
        [
            BatchEntry(
                matrices.get(p.precursor_formula, 0.0),
                _adjusted(summary.molecular_weight, summary.gravimetric_factor),
                _product_ratio(p.product_moles),
            )
            for p, summary in zip(products, summaries)
        ],
        desired_total_mass,
    )

    return BatchResult(
        desired_total_mass=desired_total_mass,
        molecular_weights=tuple(component_weights),
        products=tuple(summaries),
        precursor=precursor,
        gravimetric=gravimetric,
        product=product,
        composition=tuple(composition(components)),
        warnings=tuple(matrix_warnings(components)),
    )


def _precursor_ratio(moles: float) -> float:
    return moles if math.isfinite(moles) and moles > 0 else 1.0


def _product_ratio(moles: float) -> float:
    return moles if math.isfinite(moles) and moles >= 0 else 0.0


def _adjusted(weight: float | None, factor: float | None) -> float | None:
    if weight is None or factor is None:
        return weight
    return weight * factor


def _matrix_lookup(components: Sequence[Component]) -> Mapping[str, float | None]:
    # first component wins for a repeated formula
    matrices: dict[str, float | None] = {}
    for c in components:
        if c.formula:
            matrices.setdefault(c.formula, c.matrix_percent)
    return matrices
