"""Conversion between interchange values and typed form values.

Interchange values are what a parsed JSON document holds: strings, numbers,
booleans, lists and None. Typed values are what the session keeps in its
value model: dates, durations, numbers, booleans and lists of scalars.

Every function here is lenient. A value that cannot be converted comes back
as None (or False for booleans) instead of raising.
"""

from datetime import date, datetime, time, timedelta
from typing import Any, List, Optional

from dynaform.schemas.field_kind import FieldKind
from dynaform.utils.date_parsing import (
    format_duration,
    parse_date,
    parse_datetime,
    parse_duration,
)
from dynaform.utils.number_parsing import format_number, parse_number

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def to_number(value: Any) -> Optional[float]:
    """Numeric view of a value, or None when it is not a number."""
    return parse_number(value)


def to_date(value: Any) -> Optional[date]:
    return parse_date(value)


def to_datetime(value: Any) -> Optional[datetime]:
    return parse_datetime(value)


def to_duration(value: Any) -> Optional[timedelta]:
    return parse_duration(value)


def to_bool(value: Any) -> bool:
    """True for ``True`` or the string "true" (any case); False otherwise."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def is_sequence(value: Any) -> bool:
    return isinstance(value, _SEQUENCE_TYPES)


def to_sequence(value: Any) -> List[Any]:
    """Normalize a value to an ordered list of scalars.

    None becomes an empty list and a lone scalar becomes a one-item list.
    Sets are sorted so the order is stable.
    """
    if value is None:
        return []
    if isinstance(value, (set, frozenset)):
        return sorted((_scalar(v) for v in value), key=lambda v: str(v))
    if isinstance(value, (list, tuple)):
        return [_scalar(v) for v in value]
    return [_scalar(value)]


def _scalar(value: Any) -> Any:
    """Collapse nested sequences to their string form; keep scalars as-is."""
    if is_sequence(value):
        return stringify(value)
    return value


def to_interchange(value: Any) -> Any:
    """Convert a typed value into its interchange (JSON-safe) form.

    - timedelta -> canonical duration string
    - datetime / date / time -> ISO-8601 string
    - sequences -> lists, recursively
    - everything else unchanged
    """
    if value is None:
        return None
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return [to_interchange(v) for v in to_sequence(value)]
    if isinstance(value, (list, tuple)):
        return [to_interchange(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_interchange(v) for k, v in value.items()}
    return value


def stringify(value: Any) -> Optional[str]:
    """String form of a value as used by rule comparisons.

    Booleans render as "True"/"False", so an ``eq: "True"`` rule matches a
    checked checkbox.

    None stays None so "unset" never equals an ``eq`` value.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, timedelta):
        return format_duration(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if is_sequence(value):
        return ",".join("" if v is None else stringify(v) for v in to_sequence(value))
    return str(value)


def coerce_field_value(kind: FieldKind, value: Any) -> Any:
    """Convert a raw value into the typed value a field of ``kind`` holds.

    Text-like kinds keep strings (None stays None), booleans never become
    None, and failed date/number conversions yield None.
    """
    kind = FieldKind.parse(kind)

    if kind.is_boolean:
        return to_bool(value)
    if kind.is_numeric:
        return to_number(value)
    if kind is FieldKind.DATE:
        return to_date(value)
    if kind is FieldKind.TIME:
        return to_duration(value)
    if kind is FieldKind.DATETIME:
        return to_datetime(value)
    if kind is FieldKind.MULTISELECT:
        return [stringify(v) for v in to_sequence(value) if v is not None]
    if kind in (FieldKind.SELECT, FieldKind.RADIO):
        return stringify(value)

    if value is None or isinstance(value, str):
        return value
    return stringify(value)
