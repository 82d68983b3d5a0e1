"""Check command: parse a schema and optionally validate a value set."""

from pathlib import Path
from typing import Optional

import typer

from dynaform.cli._app import app
from dynaform.cli._common import read_schema, read_values, setup_logging
from dynaform.cli._console import console, output_errors, output_json, print_err, print_ok
from dynaform.runtime.schema_loader import SchemaLoadError
from dynaform.runtime.validators import validate_all


@app.command("check", help="Parse a form schema and validate values against it.")
def check_cmd(
    ctx: typer.Context,
    schema: Path = typer.Argument(..., help="Path to the form schema (JSON)"),
    data: Optional[Path] = typer.Option(None, "--data", help="JSON object of field values to validate"),
):
    """Report schema statistics; with --data, list validation errors."""
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    try:
        spec = read_schema(schema)
        values = read_values(data) if data is not None else None
    except SchemaLoadError as e:
        print_err(str(e))
        raise SystemExit(1)

    summary = {
        "id": spec.id,
        "title": spec.title,
        "fields": len(spec.fields),
        "visibility_rules": len(spec.visibility),
        "validation_rules": len(spec.validation),
        "actions": len(spec.actions),
    }

    report = None
    if values is not None:
        # Declared data acts as defaults for the values under test
        model = dict(spec.data)
        model.update(values)
        report = validate_all(spec, model, ctx.obj["settings"])
        summary["errors"] = {k: v for k, v in report.errors.items() if v}

    if not output_json(summary, ctx=ctx) and not ctx.obj["quiet"]:
        print_ok(
            f"{spec.title}: {summary['fields']} fields, "
            f"{summary['visibility_rules']} visibility rules, "
            f"{summary['validation_rules']} validation rules"
        )
        if report is not None and report.ok:
            console.print("  Values are valid")

    if report is not None and not report.ok:
        if not ctx.obj["json"]:
            output_errors(report.errors)
        raise SystemExit(1)
