"""Post timestamps: the 'YYYY-MM-DD HH:MM:SS +ZZZZ' format and file-name date prefixes"""

import re
from datetime import date, datetime, timezone


DATE_FORMAT = "%Y-%m-%d %H:%M:%S %z"
FILENAME_DATE_RE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})-')


def parse_post_date(value) -> datetime:
    """Return a timezone-aware datetime for a front-matter date value.

    Accepts a 'YYYY-MM-DD HH:MM:SS +ZZZZ' string or a datetime YAML already
    decoded, provided it carries a UTC offset. Raises ValueError otherwise.
    """
    if isinstance(value, datetime):
        if value.utcoffset() is None:
            raise ValueError(f"date {value.isoformat(sep=' ')} has no UTC offset")
        return value
    if isinstance(value, date):
        raise ValueError(f"date {value.isoformat()} needs a time and UTC offset")
    if not isinstance(value, str):
        raise ValueError(f"date must be a string, got {type(value).__name__}")
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT)
    except ValueError as e:
        raise ValueError(f"date {value!r} does not match 'YYYY-MM-DD HH:MM:SS +ZZZZ'") from e


def format_post_date(value: datetime) -> str:
    return value.strftime(DATE_FORMAT)


def filename_date(name: str) -> date | None:
    """Return the date encoded as a 'YYYY-MM-DD-' file-name prefix, or None."""
    m = FILENAME_DATE_RE.match(name)
    if not m:
        return None
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def strip_date_prefix(stem: str) -> str:
    """Remove a leading 'YYYY-MM-DD-' from a file stem."""
    return FILENAME_DATE_RE.sub('', stem, count=1)


def to_utc_naive(value: datetime | None) -> datetime | None:
    """Normalize an aware timestamp to naive UTC for storage; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
