"""Rich console singleton and output helpers."""

from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Status and diagnostics go to stderr so piped JSON stays clean
console = Console(stderr=True)

# Data output to stdout (pipeable to jq)
stdout_console = Console()


def print_ok(msg: str) -> None:
    """Print a success message to stderr."""
    console.print(f"[green]✓[/green] {escape(msg)}")


def print_err(msg: str) -> None:
    """Print an error message to stderr."""
    console.print(f"[red]✗[/red] {escape(msg)}")


def output_json(data, *, ctx: typer.Context) -> bool:
    """Print data as JSON on stdout when --json is set. Returns True if printed."""
    if ctx.obj.get("json"):
        stdout_console.print_json(data=data)
        return True
    return False


def output_text(text: str) -> None:
    """Print plain text on stdout without Rich markup or wrapping."""
    stdout_console.print(text, markup=False, highlight=False, soft_wrap=True)


def output_errors(errors: Dict[str, Optional[str]], *, title: str = "Validation errors") -> None:
    """Print failing fields as a Rich table on stderr."""
    rows: List[tuple] = [(key, message) for key, message in errors.items() if message]
    if not rows:
        console.print("[dim]No errors[/dim]")
        return

    table = Table(title=title, show_lines=False)
    table.add_column("field")
    table.add_column("message", style="red")
    for key, message in rows:
        table.add_row(escape(key), escape(message))
    console.print(table)
