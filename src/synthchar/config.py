"""Runtime configuration and batch definition files.

Environment variables:

- ``SYNTHCHAR_PERIODIC_TABLE``: path to an atomic mass CSV used instead of the
  bundled table.
- ``SYNTHCHAR_LOG_LEVEL``: default log level for the command line (``WARNING``).
"""

from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from synthchar.models import Component, Product
from synthchar.periodic import AtomicMassTable

logger = logging.getLogger(__name__)

TABLE_ENV = "SYNTHCHAR_PERIODIC_TABLE"
LOG_LEVEL_ENV = "SYNTHCHAR_LOG_LEVEL"


def _env(key: str, default: str = "") -> str:
    v = os.getenv(key)
    return default if v is None else str(v).strip()


def log_level(default: str = "WARNING") -> int:
    name = _env(LOG_LEVEL_ENV, default).upper() or default
    level = getattr(logging, name, logging.WARNING)
    return level if isinstance(level, int) else logging.WARNING


def resolve_table(path: Optional[Path] = None) -> AtomicMassTable:
    """Load the atomic mass table: explicit path, then environment, then bundled."""
    if path is None:
        env_path = _env(TABLE_ENV)
        path = Path(env_path) if env_path else None
    if path is None:
        return AtomicMassTable.bundled()
    logger.info("Loading atomic masses from %s", path)
    return AtomicMassTable.from_csv(path)


class BatchFileError(ValueError):
    """A batch definition file is missing required fields or holds bad values."""


@dataclass(frozen=True)
class BatchInputs:
    components: tuple[Component, ...]
    products: tuple[Product, ...]
    desired_total_mass: float


def _number(data: Dict[str, Any], key: str, default: Optional[float] = None) -> float:
    value = data.get(key, default)
    if value is None:
        raise BatchFileError(f"Missing required field: {key}")
    return _to_float(value, key)


def _to_float(value: Any, key: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise BatchFileError(f"Field {key} must be a number, got {value!r}") from exc


def _parse_component(data: Dict[str, Any]) -> Component:
    matrix = data.get("matrix", data.get("matrix_percent"))
    return Component(
        formula=str(data.get("formula", "")),
        matrix_percent=None if matrix is None else _to_float(matrix, "matrix"),
    )


def _parse_product(data: Dict[str, Any]) -> Product:
    precursor_moles = _number(data, "precursor_moles", 1.0)
    product_moles = _number(data, "product_moles", 1.0)
    if not math.isfinite(precursor_moles) or precursor_moles <= 0:
        raise BatchFileError(f"precursor_moles must be a finite number > 0, got {precursor_moles}")
    if not math.isfinite(product_moles) or product_moles < 0:
        raise BatchFileError(f"product_moles must be a finite number >= 0, got {product_moles}")
    return Product(
        formula=str(data.get("formula", "")),
        precursor_formula=str(data.get("precursor_formula", "")),
        precursor_moles=precursor_moles,
        product_moles=product_moles,
    )


def parse_batch(config: Dict[str, Any]) -> BatchInputs:
    if not isinstance(config, dict):
        raise BatchFileError("Batch definition must be a JSON object")
    try:
        components = tuple(_parse_component(c) for c in config.get("components", []))
        products = tuple(_parse_product(p) for p in config.get("products", []))
    except AttributeError as exc:
        raise BatchFileError("Components and products must be JSON objects") from exc
    return BatchInputs(
        components=components,
        products=products,
        desired_total_mass=_number(config, "desired_total_mass"),
    )


def load_batch_file(path: Path) -> BatchInputs:
    """Read a JSON batch definition.

    Expected layout::

        {
          "desired_total_mass": 5,
          "components": [{"formula": "H3BO3", "matrix": 60}],
          "products": [{"formula": "B2O3", "precursor_formula": "H3BO3",
                        "precursor_moles": 2, "product_moles": 1}]
        }
    """
    with open(path, "r") as f:
        try:
            config = json.load(f)
        except json.JSONDecodeError as exc:
            raise BatchFileError(f"{path}: invalid JSON ({exc})") from exc
    return parse_batch(config)
