"""Command-line entrypoints for SynthChar."""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Annotated, Any, Dict

import typer

from synthchar import config as settings
from synthchar.batch import recompute
from synthchar.formula import FormulaParseError, format_counts, parse_formula
from synthchar.models import BatchResult, BatchView
from synthchar.persistence import sqlite_store
from synthchar.weights import gravimetric_factor, molecular_weight

app = typer.Typer(add_completion=False)

TableOption = Annotated[
    Path | None,
    typer.Option(help="Atomic mass CSV (AtomicNumber,Element,Symbol,AtomicMass)."),
]


@app.callback()
def main(
    log_level: Annotated[
        str | None, typer.Option(help="Logging level, e.g. INFO or DEBUG.")
    ] = None,
) -> None:
    """Batch composition calculator for synthesis recipes."""
    if log_level is None:
        level = settings.log_level()
    else:
        level = getattr(logging, log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _echo_json(payload: Dict[str, Any]) -> str:
    json_output = json.dumps(payload, indent=2)
    typer.echo(json_output)
    return json_output


def _view_payload(view: BatchView) -> Dict[str, Any]:
    return {
        "total": view.total,
        "lines": [dataclasses.asdict(line) for line in view.lines],
    }


def result_payload(result: BatchResult) -> Dict[str, Any]:
    return {
        "desired_total_mass": result.desired_total_mass,
        "molecular_weights": list(result.molecular_weights),
        "products": [dataclasses.asdict(p) for p in result.products],
        "precursor": _view_payload(result.precursor),
        "gravimetric": _view_payload(result.gravimetric),
        "product": _view_payload(result.product),
        "composition": [dataclasses.asdict(s) for s in result.composition],
        "warnings": list(result.warnings),
    }


@app.command()
def parse(formula: Annotated[str, typer.Argument(help="Chemical formula.")]) -> None:
    """Print the element counts of a formula and its flattened form."""
    try:
        counts = parse_formula(formula)
    except FormulaParseError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    _echo_json({"formula": formula, "elements": counts, "flat": format_counts(counts)})


@app.command()
def weigh(
    formula: Annotated[str, typer.Argument(help="Chemical formula.")],
    table: TableOption = None,
) -> None:
    """Print the molecular weight of a formula (null when undefined)."""
    masses = settings.resolve_table(table)
    _echo_json({"formula": formula, "molecular_weight": molecular_weight(formula, masses)})


@app.command()
def gf(
    precursor: Annotated[str, typer.Argument(help="Precursor formula.")],
    product: Annotated[str, typer.Argument(help="Product formula.")],
    precursor_moles: Annotated[float, typer.Option(help="Moles of precursor.")] = 1.0,
    product_moles: Annotated[float, typer.Option(help="Moles of product.")] = 1.0,
    table: TableOption = None,
) -> None:
    """Print the gravimetric factor converting precursor mass to product mass."""
    masses = settings.resolve_table(table)
    factor = gravimetric_factor(precursor, product, precursor_moles, product_moles, masses)
    _echo_json(
        {
            "precursor": precursor,
            "product": product,
            "precursor_moles": precursor_moles,
            "product_moles": product_moles,
            "gravimetric_factor": factor,
        }
    )


@app.command()
def batch(
    batch_file: Annotated[Path, typer.Argument(help="Path to JSON batch definition.")],
    output: Annotated[
        Path | None, typer.Option(help="Path to save output JSON.")
    ] = None,
    project_file: Annotated[
        Path | None,
        typer.Option(help="Optional SQLite project file to persist the run."),
    ] = None,
    table: TableOption = None,
) -> None:
    """Compute batch masses for every view of a batch definition."""
    try:
        inputs = settings.load_batch_file(batch_file)
    except (settings.BatchFileError, OSError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    masses = settings.resolve_table(table)
    try:
        result = recompute(inputs.components, inputs.products, inputs.desired_total_mass, masses)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    payload = result_payload(result)
    json_output = _echo_json(payload)

    if output:
        with open(output, "w") as f:
            f.write(json_output)

    if project_file is not None:
        connection = sqlite_store.connect(project_file)
        sqlite_store.ensure_schema(connection)
        project_id = sqlite_store.create_project(
            connection,
            name=batch_file.stem,
            notes=f"Batch computed from {batch_file.name}.",
        )
        run_id = sqlite_store.save_run(
            connection,
            project_id=project_id,
            inputs=dataclasses.asdict(inputs),
            manifest={
                "composition": payload["composition"],
                "products": payload["products"],
                "warnings": payload["warnings"],
            },
            desired_total_mass=inputs.desired_total_mass,
        )
        sqlite_store.save_lines(
            connection,
            run_id=run_id,
            views={
                "precursor": result.precursor,
                "gravimetric": result.gravimetric,
                "product": result.product,
            },
        )
        connection.close()
