"""Closed set of field kinds understood by the form engine."""

from enum import Enum
from typing import Any


class FieldKind(str, Enum):
    """Kind of input a field represents.

    Unknown kinds are not an error: they resolve to ``TEXT`` so a schema
    written for a newer renderer still loads.
    """

    TEXT = "text"
    EMAIL = "email"
    PASSWORD = "password"
    TEXTAREA = "textarea"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    SWITCH = "switch"
    SELECT = "select"
    MULTISELECT = "multiselect"
    RADIO = "radio"
    SLIDER = "slider"
    RANGE = "range"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    FILE = "file"
    COLOR = "color"

    @classmethod
    def parse(cls, raw: Any) -> "FieldKind":
        """Resolve a raw type string (case-insensitive), falling back to TEXT."""
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            try:
                return cls(raw.strip().lower())
            except ValueError:
                pass
        return cls.TEXT

    @property
    def has_options(self) -> bool:
        return self in _OPTION_KINDS

    @property
    def is_multi(self) -> bool:
        return self is FieldKind.MULTISELECT

    @property
    def is_boolean(self) -> bool:
        return self in (FieldKind.CHECKBOX, FieldKind.SWITCH)

    @property
    def is_numeric(self) -> bool:
        return self in (FieldKind.NUMBER, FieldKind.SLIDER, FieldKind.RANGE)


_OPTION_KINDS = frozenset({FieldKind.SELECT, FieldKind.MULTISELECT, FieldKind.RADIO})
