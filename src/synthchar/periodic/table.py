"""Atomic mass table loaded from comma-separated text."""

from __future__ import annotations

import csv
import io
import logging
import math
import re
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Sequence

from synthchar.constants import PERIODIC_TABLE_RESOURCE
from synthchar.models import AtomicMassEntry
from synthchar.periodic.base import MassLookup

logger = logging.getLogger(__name__)

_SYMBOL = re.compile(r"[A-Z][a-z]*")
_COLUMNS = 4


def parse_mass_row(row: Sequence[str]) -> AtomicMassEntry:
    """Convert one ``AtomicNumber, ElementName, Symbol, AtomicMass`` row.

    Raises:
        ValueError: If the row has the wrong shape or holds invalid values.
    """
    if len(row) != _COLUMNS:
        raise ValueError(f"expected {_COLUMNS} columns, got {len(row)}")
    number_text, name, symbol, mass_text = (cell.strip() for cell in row)
    if not _SYMBOL.fullmatch(symbol):
        raise ValueError(f"invalid element symbol {symbol!r}")
    atomic_number = int(number_text)
    atomic_mass = float(mass_text)
    if not math.isfinite(atomic_mass) or atomic_mass < 0:
        raise ValueError(f"invalid atomic mass {mass_text!r}")
    return AtomicMassEntry(
        symbol=symbol,
        element_name=name,
        atomic_number=atomic_number,
        atomic_mass=atomic_mass,
    )


class AtomicMassTable(MassLookup):
    """Immutable symbol -> :class:`AtomicMassEntry` mapping.

    Rows that fail validation while loading are skipped and their line
    numbers kept in ``rejected_lines``; the rest of the table still loads.
    """

    def __init__(
        self,
        entries: Iterable[AtomicMassEntry],
        rejected_lines: Sequence[int] = (),
    ) -> None:
        by_symbol: dict[str, AtomicMassEntry] = {}
        for entry in entries:
            by_symbol.setdefault(entry.symbol, entry)
        self._entries: Mapping[str, AtomicMassEntry] = MappingProxyType(by_symbol)
        self.rejected_lines = tuple(rejected_lines)

    @classmethod
    def from_text(cls, text: str, source: str = "<text>") -> AtomicMassTable:
        """Parse CSV text: one header line, then one row per element."""
        entries: list[AtomicMassEntry] = []
        seen: set[str] = set()
        rejected: list[int] = []
        reader = csv.reader(io.StringIO(text))
        next(reader, None)
        for row in reader:
            line = reader.line_num
            if not any(cell.strip() for cell in row):
                continue
            try:
                entry = parse_mass_row(row)
            except ValueError as exc:
                logger.warning("%s:%d: skipping malformed row (%s)", source, line, exc)
                rejected.append(line)
                continue
            if entry.symbol in seen:
                logger.warning("%s:%d: skipping duplicate symbol %s", source, line, entry.symbol)
                rejected.append(line)
                continue
            seen.add(entry.symbol)
            entries.append(entry)
        logger.debug("Loaded %d atomic masses from %s", len(entries), source)
        return cls(entries, rejected)

    @classmethod
    def from_csv(cls, path: str | Path) -> AtomicMassTable:
        path = Path(path)
        return cls.from_text(path.read_text(encoding="utf-8"), source=str(path))

    @classmethod
    def from_masses(cls, masses: Mapping[str, float]) -> AtomicMassTable:
        """Build a table from bare symbol -> mass pairs (names and numbers left blank)."""
        return cls(
            AtomicMassEntry(symbol=symbol, element_name="", atomic_number=0, atomic_mass=float(mass))
            for symbol, mass in masses.items()
        )

    @staticmethod
    @lru_cache(maxsize=1)
    def bundled() -> AtomicMassTable:
        """Return the packaged 118-element table, loaded once per process."""
        text = (
            resources.files("synthchar.data")
            .joinpath(PERIODIC_TABLE_RESOURCE)
            .read_text(encoding="utf-8")
        )
        return AtomicMassTable.from_text(text, source=PERIODIC_TABLE_RESOURCE)

    def atomic_mass(self, symbol: str) -> float | None:
        entry = self._entries.get(symbol)
        return None if entry is None else entry.atomic_mass

    def entry(self, symbol: str) -> AtomicMassEntry | None:
        return self._entries.get(symbol)

    @property
    def symbols(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[AtomicMassEntry]:
        return iter(self._entries.values())
