"""
Helper functions shared by the post model and its hosts.

This module contains the PHP date() formatter used to honour the site's
``date_format`` option, tag list normalization and slug generation.
"""

import calendar
import re
import unicodedata
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Union

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

SLUG_STRIP_PATTERN = re.compile(r"[^a-z0-9 _-]")
SLUG_DASH_PATTERN = re.compile(r"[\s-]+")


def _ordinal_suffix(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def _utc_offset(value: datetime) -> timedelta:
    offset = value.utcoffset()
    return offset if offset is not None else timedelta(0)


def _format_offset(value: datetime, separator: str) -> str:
    total = int(_utc_offset(value).total_seconds())
    sign = "-" if total < 0 else "+"
    hours, remainder = divmod(abs(total), 3600)
    return f"{sign}{hours:02d}{separator}{remainder // 60:02d}"


def _timezone_name(value: datetime) -> str:
    if value.tzinfo is None:
        return "UTC"
    return value.tzname() or _format_offset(value, ":")


def _epoch(value: datetime) -> int:
    if value.tzinfo is None:
        return calendar.timegm(value.timetuple())
    return int(value.timestamp())


def _hour12(value: datetime) -> int:
    return value.hour % 12 or 12


def _php_token(value: datetime, char: str) -> Optional[str]:
    """Render a single PHP date() format character, None if not a token."""
    iso_year, iso_week, iso_weekday = value.isocalendar()
    tokens = {
        # Day
        "d": lambda: f"{value.day:02d}",
        "D": lambda: DAY_NAMES[value.weekday()][:3],
        "j": lambda: str(value.day),
        "l": lambda: DAY_NAMES[value.weekday()],
        "N": lambda: str(iso_weekday),
        "S": lambda: _ordinal_suffix(value.day),
        "w": lambda: str(iso_weekday % 7),
        "z": lambda: str(value.timetuple().tm_yday - 1),
        # Week
        "W": lambda: f"{iso_week:02d}",
        # Month
        "F": lambda: MONTH_NAMES[value.month - 1],
        "m": lambda: f"{value.month:02d}",
        "M": lambda: MONTH_NAMES[value.month - 1][:3],
        "n": lambda: str(value.month),
        "t": lambda: str(calendar.monthrange(value.year, value.month)[1]),
        # Year
        "L": lambda: "1" if calendar.isleap(value.year) else "0",
        "o": lambda: str(iso_year),
        "Y": lambda: str(value.year),
        "y": lambda: f"{value.year % 100:02d}",
        # Time
        "a": lambda: "am" if value.hour < 12 else "pm",
        "A": lambda: "AM" if value.hour < 12 else "PM",
        "g": lambda: str(_hour12(value)),
        "G": lambda: str(value.hour),
        "h": lambda: f"{_hour12(value):02d}",
        "H": lambda: f"{value.hour:02d}",
        "i": lambda: f"{value.minute:02d}",
        "s": lambda: f"{value.second:02d}",
        "u": lambda: f"{value.microsecond:06d}",
        "v": lambda: f"{value.microsecond // 1000:03d}",
        # Timezone
        "e": lambda: _timezone_name(value),
        "T": lambda: _timezone_name(value),
        "P": lambda: _format_offset(value, ":"),
        "O": lambda: _format_offset(value, ""),
        "Z": lambda: str(int(_utc_offset(value).total_seconds())),
        # Full date/time
        "c": lambda: format_php_date(value, "Y-m-d\\TH:i:sP"),
        "r": lambda: format_php_date(value, "D, d M Y H:i:s O"),
        "U": lambda: str(_epoch(value)),
    }
    render = tokens.get(char)
    return render() if render else None


def format_php_date(value: datetime, fmt: str) -> str:
    """
    Format a datetime with a PHP date() format string.

    WordPress stores its ``date_format`` and ``time_format`` options in
    PHP syntax, so they cannot be handed to ``strftime`` directly.
    Characters that are not format tokens are copied as-is and a
    backslash escapes the character that follows it.

    Args:
        value: Datetime to render; naive values are treated as UTC
        fmt: PHP date() format, e.g. ``"F j, Y"``

    Returns:
        The formatted string

    Examples:
        >>> format_php_date(datetime(2024, 3, 1, 14, 5), "F j, Y g:i a")
        'March 1, 2024 2:05 pm'
        >>> format_php_date(datetime(2024, 3, 1), "D, jS M")
        'Fri, 1st Mar'
    """
    output: List[str] = []
    escaped = False
    for char in fmt:
        if escaped:
            output.append(char)
            escaped = False
            continue
        if char == "\\":
            escaped = True
            continue
        rendered = _php_token(value, char)
        output.append(char if rendered is None else rendered)
    return "".join(output)


def parse_tag_list(tags: Union[str, Iterable[str], None]) -> List[str]:
    """
    Normalize tags given as a comma separated string or a sequence.

    Entries are stripped and empty entries dropped.

    Examples:
        >>> parse_tag_list(" news, sports ,,weather")
        ['news', 'sports', 'weather']
    """
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    return [str(tag).strip() for tag in tags if str(tag).strip()]


def sanitize_title(title: Optional[str]) -> str:
    """
    Turn a title into a URL slug the way WordPress does.

    Accents are folded to ASCII, everything is lower-cased, characters
    other than letters, digits, underscores and dashes are removed and
    runs of whitespace or dashes collapse to a single dash.

    Examples:
        >>> sanitize_title("Hello, Wörld!  Again")
        'hello-world-again'
    """
    if not title:
        return ""
    folded = unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")
    slug = SLUG_STRIP_PATTERN.sub("", folded.lower())
    slug = SLUG_DASH_PATTERN.sub("-", slug)
    return slug.strip("-")
