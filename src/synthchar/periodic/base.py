"""Base interface for atomic mass sources."""

from __future__ import annotations

from abc import ABC, abstractmethod


class MassLookup(ABC):
    """Abstract read-only lookup from element symbol to atomic mass."""

    @abstractmethod
    def atomic_mass(self, symbol: str) -> float | None:
        """Return the atomic mass (g/mol) of ``symbol``, or None if unknown."""
        pass

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and self.atomic_mass(symbol) is not None
