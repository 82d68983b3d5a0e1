"""Unit tests for result formatting."""

import io
import json
from datetime import date, datetime, timedelta

import pytest

from dynaform.runtime.result_formatter import (
    ResultFormatter,
    to_interchange,
    to_json,
    to_text,
    write_text,
)
from dynaform.schemas.form_result import FormResult
from dynaform.utils.coercion import to_duration


def _result():
    return FormResult(
        submitted=True,
        values={
            "name": "Ada",
            "interests": ["python", "rust"],
            "age": 36.0,
            "born": date(1815, 12, 10),
            "lunch": timedelta(minutes=45),
            "note": None,
            "agree": True,
        },
    )


class TestToText:
    def test_lines(self):
        assert to_text(_result()).splitlines() == [
            "Submitted: True",
            "name = Ada",
            "interests = [python, rust]",
            "age = 36",
            "born = 1815-12-10",
            "lunch = 00:45:00",
            "note = null",
            "agree = True",
        ]

    def test_dismissed_header(self):
        assert to_text(FormResult(submitted=False, values={})) == "Submitted: False"

    def test_empty_sequence(self):
        assert ResultFormatter().format_value([]) == "[]"

    def test_datetime_iso(self):
        assert ResultFormatter().format_value(datetime(2026, 1, 2, 8, 30)) == "2026-01-02T08:30:00"

    def test_write_text(self):
        buffer = io.StringIO()
        write_text(FormResult(submitted=False, values={"a": "b"}), buffer)
        assert buffer.getvalue() == "Submitted: False\na = b\n"


class TestInterchange:
    def test_values_normalized(self):
        payload = to_interchange(_result())
        assert payload["submitted"] is True
        assert payload["values"]["lunch"] == "00:45:00"
        assert payload["values"]["born"] == "1815-12-10"
        assert payload["values"]["interests"] == ["python", "rust"]
        assert payload["values"]["note"] is None

    def test_json_is_parseable(self):
        assert json.loads(to_json(_result()))["values"]["name"] == "Ada"

    def test_compact_json(self):
        assert "\n" not in to_json(_result(), indented=False)

    def test_duration_survives_serialization(self):
        span = timedelta(days=1, hours=2, seconds=3, microseconds=500)
        text = json.loads(to_json(FormResult(submitted=True, values={"t": span})))["values"]["t"]
        assert text == "1.02:00:03.0005000"
        assert to_duration(text) == span


class TestFormResult:
    def test_values_read_only(self):
        result = FormResult(submitted=True, values={"a": 1})
        with pytest.raises(TypeError):
            result.values["a"] = 2

    def test_detached_from_source(self):
        source = {"a": 1}
        result = FormResult(submitted=True, values=source)
        source["a"] = 2
        assert result["a"] == 1

    def test_missing_key(self):
        result = FormResult(submitted=False)
        assert result["ghost"] is None
        assert result.get("ghost", "x") == "x"
