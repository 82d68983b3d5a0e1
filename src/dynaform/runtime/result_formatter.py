"""
Result Formatter - renders a completed form result for people or machines.

The Session decides what was entered; the Formatter decides how to show it.

Text output:
    Submitted: True
    name = Ada
    interests = [python, rust]

Interchange output:
    {"submitted": true, "values": {"name": "Ada", "interests": ["python", "rust"]}}

Durations use the canonical ``[-][d.]hh:mm:ss[.fffffff]`` notation and
dates/datetimes are ISO-8601 in both forms.
"""

import json
import sys
from datetime import date, time, timedelta
from typing import Any, Dict, Optional, TextIO

from dynaform.schemas.form_result import FormResult
from dynaform.utils.coercion import is_sequence, to_sequence
from dynaform.utils.coercion import to_interchange as normalize_value
from dynaform.utils.date_parsing import format_duration
from dynaform.utils.number_parsing import format_number


class ResultFormatter:
    """Formats FormResult objects as text or interchange JSON."""

    def to_text(self, result: FormResult) -> str:
        """Human-readable lines: a Submitted header then ``key = value``."""
        lines = [f"Submitted: {result.submitted}"]
        for key, value in result.values.items():
            lines.append(f"{key} = {self.format_value(value)}")
        return "\n".join(lines)

    def to_interchange(self, result: FormResult) -> Dict[str, Any]:
        """JSON-safe payload with normalized values."""
        return {
            "submitted": result.submitted,
            "values": {key: normalize_value(value) for key, value in result.values.items()},
        }

    def to_json(self, result: FormResult, indented: bool = True) -> str:
        return json.dumps(
            self.to_interchange(result),
            indent=2 if indented else None,
            ensure_ascii=False,
        )

    def write_text(self, result: FormResult, writer: Optional[TextIO] = None) -> None:
        """Write the text form followed by a newline (stdout by default)."""
        out = writer if writer is not None else sys.stdout
        out.write(self.to_text(result) + "\n")

    def format_value(self, value: Any) -> str:
        """Text form of a single value; sequences render as ``[a, b]``."""
        if value is None:
            return "null"
        if isinstance(value, str):
            return value
        if isinstance(value, timedelta):
            return format_duration(value)
        if isinstance(value, (date, time)):
            return value.isoformat()
        if isinstance(value, float):
            return format_number(value)
        if is_sequence(value):
            return "[" + ", ".join(self.format_value(v) for v in to_sequence(value)) + "]"
        return str(value)


_formatter = ResultFormatter()


def to_text(result: FormResult) -> str:
    return _formatter.to_text(result)


def to_interchange(result: FormResult) -> Dict[str, Any]:
    return _formatter.to_interchange(result)


def to_json(result: FormResult, indented: bool = True) -> str:
    return _formatter.to_json(result, indented)


def write_text(result: FormResult, writer: Optional[TextIO] = None) -> None:
    _formatter.write_text(result, writer)
