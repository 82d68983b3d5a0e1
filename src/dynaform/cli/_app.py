"""Root Typer application for dynaform.

Global options are resolved once here and handed to every command through
``ctx.obj``: output mode flags and the engine settings to run with.
"""

from pathlib import Path
from typing import Optional

import typer

from dynaform import __version__
from dynaform.config.settings import SettingsError, get_settings, load_settings

app = typer.Typer(
    name="dynaform",
    help="Check and run declarative form schemas without a UI.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"dynaform {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log rule evaluation detail"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log rejected submissions and errors"),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON on stdout"),
    settings_path: Optional[Path] = typer.Option(
        None,
        "--settings",
        help="Engine settings YAML (messages, labels); defaults to $DYNAFORM_SETTINGS",
    ),
    version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True, help="Show the version and exit"
    ),
):
    if verbose and quiet:
        raise typer.BadParameter("--verbose and --quiet cannot be combined")

    try:
        settings = load_settings(settings_path) if settings_path else get_settings()
    except SettingsError as e:
        raise typer.BadParameter(str(e), param_hint="--settings")

    ctx.ensure_object(dict)
    ctx.obj.update(verbose=verbose, quiet=quiet, json=json_output, settings=settings)
