"""Number parsing utilities for locale-invariant form input."""

import re
from typing import Any, Optional, Union

# Plain decimal literal: "12", "-3.5", ".5", "1e3". No thousand separators,
# no underscores, no nan/inf.
_RE_DECIMAL = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


def parse_number(value: Any) -> Optional[float]:
    """Parse a value into a float using the invariant decimal format.

    Handles:
    - Native numbers: 5 -> 5.0, 2.5 -> 2.5
    - Decimal strings: "249.77" -> 249.77, " -3 " -> -3.0, "1e3" -> 1000.0

    Booleans are not numbers here, even though Python treats them as ints.

    Args:
        value: The value to parse (string, int, float, or anything else)

    Returns:
        Parsed float or None if the value is not numeric
    """
    if value is None or isinstance(value, bool):
        return None

    # Already a number
    if isinstance(value, (int, float)):
        return float(value)

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text or not _RE_DECIMAL.match(text):
        return None

    try:
        return float(text)
    except ValueError:
        return None


def format_number(value: Union[int, float]) -> str:
    """Render a number the way messages and rule comparisons expect.

    Integral floats drop their decimal part: 3.0 -> "3", 2.5 -> "2.5".
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
