"""SQLite persistence helpers for SynthChar batch runs."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping

from synthchar.models import BatchLine, BatchView

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS project (
  id INTEGER PRIMARY KEY,
  name TEXT NOT NULL,
  created_utc TEXT,
  notes TEXT
);
CREATE TABLE IF NOT EXISTS batch_run (
  id INTEGER PRIMARY KEY,
  project_id INTEGER REFERENCES project(id),
  inputs JSON,
  manifest JSON,
  desired_total_mass REAL,
  started TEXT
);
CREATE TABLE IF NOT EXISTS batch_line (
  run_id INTEGER REFERENCES batch_run(id),
  view TEXT,
  position INTEGER,
  formula TEXT,
  matrix_percent REAL,
  weight REAL,
  mole_ratio REAL,
  raw_quantity REAL,
  mass REAL,
  PRIMARY KEY (run_id, view, position)
);
"""


def connect(project_file: str | Path) -> sqlite3.Connection:
    """Open (and create) a SQLite project file."""
    path = Path(project_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    connection = sqlite3.connect(path)
    connection.execute("PRAGMA foreign_keys = ON;")
    return connection


def ensure_schema(connection: sqlite3.Connection) -> None:
    connection.executescript(SCHEMA_SQL)
    connection.commit()


def create_project(
    connection: sqlite3.Connection,
    name: str,
    notes: str | None = None,
    created_utc: str | None = None,
) -> int:
    """Create a project entry and return its ID."""
    created_utc = created_utc or _utc_now()
    cursor = connection.execute(
        "INSERT INTO project (name, created_utc, notes) VALUES (?, ?, ?)",
        (name, created_utc, notes),
    )
    connection.commit()
    return int(cursor.lastrowid)


def save_run(
    connection: sqlite3.Connection,
    project_id: int,
    inputs: Mapping[str, object],
    manifest: Mapping[str, object],
    desired_total_mass: float,
    started_utc: str | None = None,
) -> int:
    """Persist a batch run record and return its ID."""
    started_utc = started_utc or _utc_now()
    cursor = connection.execute(
        "INSERT INTO batch_run (project_id, inputs, manifest, desired_total_mass, started)"
        " VALUES (?, ?, ?, ?, ?)",
        (
            project_id,
            _json_dumps(inputs),
            _json_dumps(manifest),
            desired_total_mass,
            started_utc,
        ),
    )
    connection.commit()
    return int(cursor.lastrowid)


def save_lines(
    connection: sqlite3.Connection,
    run_id: int,
    views: Mapping[str, BatchView],
) -> None:
    """Save the lines of each named view (e.g. ``"precursor"``) for a run."""
    rows_list: list[tuple[object, ...]] = []
    for view_name, view in views.items():
        for position, line in enumerate(view.lines):
            rows_list.append(
                (
                    run_id,
                    view_name,
                    position,
                    line.formula,
                    line.matrix_percent,
                    line.weight,
                    line.mole_ratio,
                    line.raw_quantity,
                    line.mass,
                ),
            )
    connection.executemany(
        "INSERT INTO batch_line (run_id, view, position, formula, matrix_percent,"
        " weight, mole_ratio, raw_quantity, mass) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
        rows_list,
    )
    connection.commit()


def load_lines(connection: sqlite3.Connection, run_id: int, view: str) -> list[BatchLine]:
    cursor = connection.execute(
        "SELECT formula, matrix_percent, weight, mole_ratio, raw_quantity, mass"
        " FROM batch_line WHERE run_id = ? AND view = ? ORDER BY position",
        (run_id, view),
    )
    return [
        BatchLine(
            formula=formula,
            matrix_percent=matrix_percent,
            weight=weight,
            mole_ratio=mole_ratio,
            raw_quantity=raw_quantity,
            mass=mass,
        )
        for formula, matrix_percent, weight, mole_ratio, raw_quantity, mass in cursor
    ]


def _json_dumps(payload: Mapping[str, object]) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()
