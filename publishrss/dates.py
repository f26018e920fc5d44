"""Timestamp helpers shared by the fetcher, importers and renderers."""

from datetime import date, datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def now_iso() -> str:
    """Current time as an ISO-8601 string with millisecond precision and Z suffix."""
    return to_iso(utc_now())


def to_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_datetime(value: object) -> datetime | None:
    """
    Parse an ISO-8601 string, date or datetime into an aware UTC datetime.

    Returns None when the value cannot be interpreted.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            # RFC-2822 dates, as found in RSS pubDate fields
            try:
                parsed = parsedate_to_datetime(value.strip())
            except (TypeError, ValueError, IndexError):
                return None
            if parsed is None:
                return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def sort_key(pub_date: str) -> datetime:
    """Sort key for ISO strings; unparsable dates sort last."""
    return parse_datetime(pub_date) or datetime.min.replace(tzinfo=timezone.utc)


def to_rfc1123(pub_date: str) -> str:
    """Format an ISO-8601 string as an RFC-1123 date (e.g. for RSS pubDate)."""
    parsed = parse_datetime(pub_date) or utc_now()
    return format_datetime(parsed, usegmt=True)


def date_stamp(pub_date: str | None = None) -> str:
    """YYYY-MM-DD for filenames; today when no date is given."""
    parsed = parse_datetime(pub_date) if pub_date else None
    return (parsed or utc_now()).strftime("%Y-%m-%d")


def long_date(pub_date: str | None = None) -> str:
    """Human-readable date such as "January 15, 2024"; today when no date is given."""
    parsed = parse_datetime(pub_date) if pub_date else None
    value = parsed or utc_now()
    return f"{value.strftime('%B')} {value.day}, {value.year}"
