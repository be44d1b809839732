from .base import MassLookup
from .table import AtomicMassTable, parse_mass_row

__all__ = ["MassLookup", "AtomicMassTable", "parse_mass_row"]
