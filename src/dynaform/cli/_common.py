"""Shared helpers for CLI commands."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.logging import RichHandler

from dynaform.cli._console import console
from dynaform.runtime.schema_loader import SchemaLoadError, parse_form_spec, strip_json_extensions
from dynaform.schemas.form_spec import FormSpec


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging with Rich handler."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def read_schema(path: Path) -> FormSpec:
    """Read and parse a form schema file.

    Raises:
        SchemaLoadError: If the file is missing or the schema is invalid.
    """
    if not path.exists():
        raise SchemaLoadError(f"Schema file not found: {path}")
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise SchemaLoadError(f"Cannot read schema file {path}: {e}") from e
    return parse_form_spec(raw)


def read_values(path: Path) -> Dict[str, Any]:
    """Read a JSON object of field values (comments allowed)."""
    if not path.exists():
        raise SchemaLoadError(f"Data file not found: {path}")
    try:
        text = path.read_bytes().decode("utf-8")
    except OSError as e:
        raise SchemaLoadError(f"Cannot read data file {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise SchemaLoadError(f"Data file {path} is not valid UTF-8: {e}") from e
    try:
        data = json.loads(strip_json_extensions(text))
    except (ValueError, RecursionError) as e:
        raise SchemaLoadError(f"Invalid JSON in data file {path}: {e}") from e
    if not isinstance(data, dict):
        raise SchemaLoadError(f"Data file {path} must contain a JSON object")
    return data


def parse_assignments(pairs: Optional[List[str]]) -> List[tuple]:
    """
    Parse ``key=value`` arguments in order.

    The value is read as JSON when possible (``true``, ``5``, ``["a","b"]``)
    and kept as a plain string otherwise.

    Raises:
        ValueError: If an argument has no '=' or an empty key
    """
    parsed = []
    for pair in pairs or []:
        key, sep, raw = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Invalid assignment '{pair}'. Expected key=value")
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            value = raw
        parsed.append((key, value))
    return parsed
