"""CLI package - Typer-based command-line interface.

Usage:
    python -m dynaform --help
    python -m dynaform run schema.json --set role=Admin
"""

from dynaform.cli._app import app

# Register command modules (side-effect imports)
import dynaform.cli.cmd_check  # noqa: F401
import dynaform.cli.cmd_run  # noqa: F401

__all__ = ["app"]
