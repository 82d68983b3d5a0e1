"""Run command: drive a form session headlessly from the command line."""

from pathlib import Path
from typing import List, Optional

import typer

from dynaform.cli._app import app
from dynaform.cli._common import parse_assignments, read_schema, setup_logging
from dynaform.cli._console import console, output_errors, output_json, output_text, print_err
from dynaform.runtime.result_formatter import to_interchange, to_text
from dynaform.runtime.schema_loader import SchemaLoadError
from dynaform.runtime.session import FormSession, SessionStateError


@app.command("run", help="Fill in a form headlessly and print the result.")
def run_cmd(
    ctx: typer.Context,
    schema: Path = typer.Argument(..., help="Path to the form schema (JSON)"),
    set_values: Optional[List[str]] = typer.Option(
        None, "--set", help="Field change key=value, applied in order (repeatable)"
    ),
    context_values: Optional[List[str]] = typer.Option(
        None, "--context", help="Read-only rule context key=value (repeatable)"
    ),
    dismiss: bool = typer.Option(False, "--dismiss", help="Dismiss instead of submitting"),
):
    """Apply changes, then submit or dismiss and print the outcome."""
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    try:
        spec = read_schema(schema)
        changes = parse_assignments(set_values)
        context = dict(parse_assignments(context_values))
    except (SchemaLoadError, ValueError) as e:
        print_err(str(e))
        raise SystemExit(1)

    session = FormSession(spec, context=context, settings=ctx.obj["settings"]).start()
    try:
        for key, value in changes:
            session.notify_changed(key, value)
    except SessionStateError as e:
        print_err(str(e))
        raise SystemExit(1)

    hidden = sorted(session.hidden_fields)
    if not ctx.obj["json"] and not ctx.obj["quiet"]:
        console.print(f"Hidden fields: {', '.join(hidden) if hidden else '(none)'}", markup=False)

    if dismiss:
        session.request_dismiss()
    else:
        report = session.request_submit()
        if not report.ok:
            rejected = {
                "submitted": False,
                "hidden": hidden,
                "errors": {k: v for k, v in report.errors.items() if v},
            }
            if not output_json(rejected, ctx=ctx):
                output_errors(report.errors, title="Submission rejected")
            raise SystemExit(1)

    payload = to_interchange(session.result)
    payload["hidden"] = hidden
    if not output_json(payload, ctx=ctx):
        output_text(to_text(session.result))
