"""Numeric conventions shared across the batch engine."""

from __future__ import annotations

# matrix (0-100) * MW (g/mol) * moles -> raw batch quantity
BATCH_SCALE = 1000.0

MATRIX_TARGET = 100.0
MATRIX_TOLERANCE = 0.001

COLOR_SATURATION = 70  # %
COLOR_LIGHTNESS = 60  # %

PERIODIC_TABLE_RESOURCE = "periodic_table.csv"
