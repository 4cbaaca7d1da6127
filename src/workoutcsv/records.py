"""
Field coercion and record building shared by both parsers.

Raw CSV fields are text. A record maps header names to coerced values:
numbers become ``int``/``float``, date-like values in ``*time*`` columns
become timezone-aware datetimes, and everything else stays text.
"""

import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from dateutil import parser as date_parser
from dateutil import tz

__all__ = [
    "is_numeric",
    "coerce_value",
    "build_record",
    "leading_float",
    "to_float",
    "to_int",
    "parse_timestamp",
    "to_epoch_seconds",
]

_INT_RE = re.compile(r"^[+-]?\d+$")
_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_LEADING_NUMBER_RE = re.compile(r"^\s*([+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?)")

# Separators that make a value look like a calendar date
DATE_SEPARATORS = ("-", "/")


def is_numeric(value: Any) -> bool:
    """Return True when ``value`` is a number or text that parses fully as one."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if not isinstance(value, str):
        return False
    return bool(_NUMBER_RE.match(value.strip()))


def _to_number(text: str):
    text = text.strip()
    if _INT_RE.match(text):
        return int(text)
    return float(text)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a date/time value into an aware UTC datetime.

    Numbers are read as epoch seconds and naive datetimes are assumed to be
    UTC. Returns None when the value cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif is_numeric(value):
        try:
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            return None
    elif isinstance(value, str) and value.strip():
        try:
            parsed = date_parser.parse(value.strip())
        except (ValueError, OverflowError):
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(tz.UTC)


def coerce_value(header: str, value: Any) -> Any:
    """Coerce one raw field according to its header name.

    Args:
        header: Column name the value sits under.
        value: Raw field text (non-text values are returned unchanged).

    Returns:
        ``int``/``float`` for fully numeric text, a datetime when the header
        contains "time" and the text contains a date separator, otherwise the
        text itself.
    """
    if not isinstance(value, str):
        return value
    if is_numeric(value):
        return _to_number(value)
    if "time" in header.lower() and any(sep in value for sep in DATE_SEPARATORS):
        parsed = parse_timestamp(value)
        if parsed is not None:
            return parsed
    return value


def build_record(headers: Sequence[str], fields: Sequence[str]) -> Dict[str, Any]:
    """Zip fields positionally against headers and coerce every value.

    Extra fields beyond the header (or missing trailing fields) are ignored.
    """
    return {header: coerce_value(header, value) for header, value in zip(headers, fields)}


def leading_float(value: Any) -> float:
    """Parse the leading number of a value, returning 0.0 when there is none."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if not isinstance(value, str):
        return 0.0
    match = _LEADING_NUMBER_RE.match(value)
    if not match:
        return 0.0
    number = float(match.group(1))
    return number if math.isfinite(number) else 0.0


def to_float(value: Any, default: float = 0.0) -> float:
    """Convert a coerced field to float; missing or non-numeric values give ``default``."""
    if is_numeric(value):
        number = float(value)
        return number if math.isfinite(number) else default
    return default


def to_int(value: Any, default: int = 0) -> int:
    """Convert a coerced field to int, truncating decimals."""
    if is_numeric(value):
        number = float(value)
        return int(number) if math.isfinite(number) else default
    return default


def to_epoch_seconds(value: Any) -> Optional[int]:
    """Express a start time as whole epoch seconds.

    Numbers are taken as already being epoch seconds; datetimes and date
    strings are converted. Returns None when no time can be derived or the
    time falls outside the range a datetime can represent.
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    if is_numeric(value):
        return int(float(value))
    return int(parsed.timestamp())
