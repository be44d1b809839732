"""Data structures for batch components, products and derived results."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AtomicMassEntry:
    symbol: str
    element_name: str
    atomic_number: int
    atomic_mass: float


@dataclass(frozen=True)
class Component:
    formula: str
    matrix_percent: float | None = 0.0


@dataclass(frozen=True)
class Product:
    formula: str
    precursor_formula: str
    precursor_moles: float = 1.0
    product_moles: float = 1.0


@dataclass(frozen=True)
class BatchLine:
    """One row of a batch view.

    Attributes:
        formula: Formula the row is keyed on.
        matrix_percent: Matrix percentage used for the row (0-100).
        weight: Weight fed into the normalization (g/mol), ``None`` if undefined.
        mole_ratio: Mole multiplier applied to the row.
        raw_quantity: ``matrix * weight * mole_ratio / 1000``.
        mass: Normalized batch mass (g).
    """

    formula: str
    matrix_percent: float
    weight: float | None
    mole_ratio: float
    raw_quantity: float
    mass: float


@dataclass(frozen=True)
class BatchView:
    lines: tuple[BatchLine, ...]
    total: float

    @property
    def masses(self) -> list[float]:
        return [line.mass for line in self.lines]


@dataclass(frozen=True)
class ProductSummary:
    formula: str
    precursor_formula: str
    molecular_weight: float | None
    gravimetric_factor: float | None


@dataclass(frozen=True)
class CompositionSlice:
    formula: str
    percentage: float
    color: str


@dataclass(frozen=True)
class BatchResult:
    desired_total_mass: float
    molecular_weights: tuple[float | None, ...]
    products: tuple[ProductSummary, ...]
    precursor: BatchView
    gravimetric: BatchView
    product: BatchView
    composition: tuple[CompositionSlice, ...]
    warnings: tuple[str, ...] = field(default_factory=tuple)
