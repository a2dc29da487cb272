"""Shared coercion helpers used by the normalizer, sort stage and views.

parse_timestamp:  backend timestamp → aware datetime (None on bad input)
to_epoch_millis:  backend timestamp → epoch millis (default on bad input)
render_date:      backend timestamp → "YYYY-MM-DD" or "N/A"
as_int / as_number / as_text: never-raising scalar coercions
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from bizdesk.models.vocab import MISSING_DATE


def parse_timestamp(value):
    """Parse a backend timestamp to a timezone-aware datetime.

    Returns None for empty/invalid input. Supports:
    - ISO 8601 with or without time, with ``Z`` or an explicit offset
    - ``YYYY-MM-DD HH:MM:SS`` (SQL style)
    - ``date`` / ``datetime`` objects
    - epoch milliseconds (int/float)

    Naive values are taken as UTC.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            try:
                parsed = datetime.strptime(text, "%d.%m.%Y")
            except ValueError:
                return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_epoch_millis(value, default: int = 0) -> int:
    """Return epoch milliseconds for a timestamp, ``default`` when missing."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return default
    return int(parsed.timestamp() * 1000)


def render_date(value) -> str:
    """Format a timestamp for display; missing or unparseable → ``"N/A"``."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return MISSING_DATE
    return parsed.date().isoformat()


def as_int(value):
    """Coerce to int, None when the value is blank or not numeric."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return None


def as_number(value, default=0):
    """Coerce to a number (int when integral), ``default`` otherwise."""
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if number != number:  # NaN
        return default
    return int(number) if number.is_integer() else number


def as_text(value) -> str:
    """Coerce to str, with None → ``''``."""
    if value is None:
        return ""
    return str(value)
