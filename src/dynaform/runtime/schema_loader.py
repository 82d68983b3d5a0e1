"""
Utility module for parsing form schemas from the JSON interchange format.

The reader is relaxed: ``//`` and ``/* */`` comments and trailing commas are
accepted, property names match case-insensitively and unknown properties
are ignored. Anything structurally wrong (an option that is neither a string
nor an object, a tags value that is not a string or string array, a regex
that does not compile) is rejected with ``SchemaLoadError``.

This module never touches the filesystem; callers pass text or an
already-parsed mapping.
"""

import json
import logging
from typing import Any, Dict, Mapping, Union

from pydantic import ValidationError

from dynaform.schemas.form_spec import FormSpec

logger = logging.getLogger(__name__)


class SchemaLoadError(Exception):
    """Raised when a form schema cannot be parsed or is invalid."""
    pass


def strip_json_extensions(text: str) -> str:
    """Remove comments and trailing commas outside of string literals."""
    out = []
    i = 0
    n = len(text)
    in_string = False

    while i < n:
        ch = text[i]

        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
            continue

        # Line comment
        if text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
            continue

        # Block comment
        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                raise SchemaLoadError("Unterminated block comment in schema")
            i = end + 2
            continue

        # Trailing comma: drop it if the next significant char closes a container
        if ch == ",":
            j = i + 1
            while j < n:
                if text[j].isspace():
                    j += 1
                elif text.startswith("//", j):
                    nl = text.find("\n", j)
                    j = n if nl == -1 else nl
                elif text.startswith("/*", j):
                    close = text.find("*/", j + 2)
                    j = n if close == -1 else close + 2
                else:
                    break
            if j < n and text[j] in "}]":
                i += 1
                continue

        out.append(ch)
        i += 1

    return "".join(out)


def parse_form_spec(source: Union[str, bytes, Mapping[str, Any], FormSpec]) -> FormSpec:
    """
    Parse a form schema.

    Args:
        source: JSON text (comments and trailing commas allowed), an
            already-parsed mapping, or a FormSpec (returned unchanged)

    Returns:
        The validated FormSpec

    Raises:
        SchemaLoadError: If the text is not valid JSON or the document does
            not describe a valid form
    """
    if isinstance(source, FormSpec):
        return source

    if isinstance(source, (str, bytes)):
        try:
            text = source.decode("utf-8") if isinstance(source, bytes) else source
        except UnicodeDecodeError as e:
            raise SchemaLoadError(f"Form schema is not valid UTF-8: {e}") from e
        try:
            data = json.loads(strip_json_extensions(text))
        except (ValueError, RecursionError) as e:
            # JSONDecodeError is a ValueError; RecursionError comes from deep nesting
            raise SchemaLoadError(f"Invalid JSON in form schema: {e}") from e
    else:
        data = source

    if not isinstance(data, Mapping):
        raise SchemaLoadError(
            f"Form schema must be a JSON object, got {type(data).__name__}"
        )

    try:
        spec = FormSpec.model_validate(dict(data))
    except (ValidationError, RecursionError) as e:
        raise SchemaLoadError(f"Invalid form schema: {e}") from e

    logger.debug(
        f"Parsed form '{spec.title}' with {len(spec.fields)} fields, "
        f"{len(spec.visibility)} visibility rules, {len(spec.actions)} actions"
    )
    return spec


def dump_form_spec(spec: FormSpec, indented: bool = True) -> str:
    """Serialize a FormSpec back to interchange JSON (camelCase properties)."""
    payload: Dict[str, Any] = spec.to_interchange()
    return json.dumps(payload, indent=2 if indented else None, ensure_ascii=False, default=str)
