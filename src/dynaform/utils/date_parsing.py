"""Date, datetime and duration parsing for form values.

Accepts native values or interchange strings and never raises on bad input:
unparseable values come back as None so callers can skip range checks.

Durations use a fixed canonical notation, ``[-][d.]hh:mm:ss[.fffffff]``,
so a serialized value parses back to an equal ``timedelta``.
"""

import re
from datetime import date, datetime, time, timedelta
from typing import Any, Optional

# ISO: 2026-01-23 (optionally followed by T or space + time)
_RE_ISO = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})(?:[T \s].*)?$")

# Numeric with separators: DD.MM.YYYY, DD/MM/YYYY
_RE_NUMERIC = re.compile(r"^(\d{1,2})[./](\d{1,2})[./](\d{4})$")

# Canonical duration: [-][d.]hh:mm[:ss[.fffffff]]
_RE_DURATION = re.compile(
    r"^(-)?(?:(\d+)\.)?(\d{1,2}):(\d{1,2})(?::(\d{1,2})(?:\.(\d{1,7}))?)?$"
)

_TICKS_PER_MICROSECOND = 10
_FRACTION_DIGITS = 7


def _validate_date(year: int, month: int, day: int) -> Optional[date]:
    """Build a date, or None if the parts are out of range."""
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_date(value: Any) -> Optional[date]:
    """Parse a value into a date.

    Supported inputs:
    - ``date`` / ``datetime`` objects (datetimes are truncated to the date)
    - ISO strings: "2026-01-23", "2026-01-23T10:00:00"
    - European numeric strings: "23.01.2026", "23/01/2026"

    Returns:
        The date, or None if unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    m = _RE_ISO.match(text)
    if m:
        return _validate_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = _RE_NUMERIC.match(text)
    if m:
        return _validate_date(int(m.group(3)), int(m.group(2)), int(m.group(1)))

    return None


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse a value into a datetime.

    Dates become midnight of that day. Strings go through
    ``datetime.fromisoformat`` first and fall back to :func:`parse_date`.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    d = parse_date(text)
    if d is None:
        return None
    return datetime(d.year, d.month, d.day)


def parse_duration(value: Any) -> Optional[timedelta]:
    """Parse a value into a timedelta.

    Accepts ``timedelta``, ``time`` (as time since midnight) and canonical
    duration strings such as "01:30:00", "2.04:00:00" or "-00:00:05.2500000".
    """
    if value is None:
        return None
    if isinstance(value, timedelta):
        return value
    if isinstance(value, time):
        return timedelta(
            hours=value.hour,
            minutes=value.minute,
            seconds=value.second,
            microseconds=value.microsecond,
        )
    if not isinstance(value, str):
        return None

    m = _RE_DURATION.match(value.strip())
    if not m:
        return None

    negative, days, hours, minutes, seconds, fraction = m.groups()
    hours_i, minutes_i, seconds_i = int(hours), int(minutes), int(seconds or 0)
    if hours_i > 23 or minutes_i > 59 or seconds_i > 59:
        return None

    ticks = int((fraction or "").ljust(_FRACTION_DIGITS, "0"))
    result = timedelta(
        days=int(days or 0),
        hours=hours_i,
        minutes=minutes_i,
        seconds=seconds_i,
        microseconds=ticks // _TICKS_PER_MICROSECOND,
    )
    return -result if negative else result


def format_duration(value: timedelta) -> str:
    """Format a timedelta in the canonical constant notation.

    Examples: 1h30m -> "01:30:00", 2d4h -> "2.04:00:00",
    -5.25s -> "-00:00:05.2500000".
    """
    sign = "-" if value < timedelta(0) else ""
    span = abs(value)

    hours, remainder = divmod(span.seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    text = f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    if span.days:
        text = f"{span.days}.{text}"
    if span.microseconds:
        ticks = span.microseconds * _TICKS_PER_MICROSECOND
        text = f"{text}.{ticks:0{_FRACTION_DIGITS}d}"
    return sign + text
