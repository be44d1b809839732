"""SynthChar batch composition engine."""

from synthchar.batch import BatchEntry, normalize_batch, recompute
from synthchar.composition import composition
from synthchar.formula import FormulaParseError, parse_formula, try_parse_formula
from synthchar.models import BatchResult, Component, Product
from synthchar.periodic import AtomicMassTable
from synthchar.weights import gravimetric_factor, molecular_weight

__all__ = [
    "AtomicMassTable",
    "BatchEntry",
    "BatchResult",
    "Component",
    "FormulaParseError",
    "Product",
    "composition",
    "gravimetric_factor",
    "molecular_weight",
    "normalize_batch",
    "parse_formula",
    "recompute",
    "try_parse_formula",
]
