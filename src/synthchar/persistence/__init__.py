"""Persistence helpers for SynthChar."""

from synthchar.persistence.sqlite_store import (
    connect,
    create_project,
    ensure_schema,
    load_lines,
    save_lines,
    save_run,
)

__all__ = [
    "connect",
    "create_project",
    "ensure_schema",
    "load_lines",
    "save_lines",
    "save_run",
]
