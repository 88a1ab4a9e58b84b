"""Date parsing, ordering and display helpers.

Manifests carry dates in a few loose shapes ("2024-02-01", "2024-02-01T10:00:00Z",
"May 2023", "March 3, 2024"). Projects carry a ``year`` instead. Everything
that sorts or prints a date goes through this module.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from email.utils import format_datetime
import re

_FALLBACK_FORMATS = (
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %Y",
    "%b %Y",
    "%Y-%m",
    "%Y/%m/%d",
    "%Y",
)
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

# Sort key for entries whose date/year does not parse: older than anything valid.
INVALID_SORT_KEY = (0, datetime.min.replace(tzinfo=timezone.utc))


def parse_date(value: object) -> datetime | None:
    """Parse a manifest date into an aware UTC datetime, or None."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    text = str(value).strip()
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
        for fmt in _FALLBACK_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_year(value: object) -> int | None:
    """Read the leading integer of a year field ("2023", 2023, "2023 (ongoing)")."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else None


def date_sort_key(value: object) -> tuple[int, datetime]:
    parsed = parse_date(value)
    if parsed is None:
        return INVALID_SORT_KEY
    return (1, parsed)


def year_sort_key(value: object) -> tuple[int, int]:
    year = parse_year(value)
    if year is None:
        return (0, 0)
    return (1, year)


def format_date(value: object, style: str = "long") -> str:
    """Format a manifest date for display.

    ``long`` gives "January 5, 2024", ``short`` gives "Jan 5, 2024". Values
    that do not parse are returned as-is so the page still shows something.
    """
    parsed = parse_date(value)
    if parsed is None:
        return "" if value is None else str(value)
    month = "%B" if style == "long" else "%b"
    return f"{parsed.strftime(month)} {parsed.day}, {parsed.year}"


def format_rfc822(value: object) -> str | None:
    """Format a date as an RSS ``pubDate`` value."""
    parsed = parse_date(value)
    if parsed is None:
        return None
    return format_datetime(parsed.astimezone(timezone.utc), usegmt=True)
