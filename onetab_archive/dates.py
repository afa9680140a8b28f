"""Date helpers: epoch conversion, period keys and flexible range bounds.

All computations are done in UTC so period keys and rendered headings do not
depend on the host time zone.
"""

from __future__ import annotations

import calendar
import datetime as _dt
import math
import re
from typing import Optional

_EPOCH = _dt.datetime(1970, 1, 1, tzinfo=_dt.timezone.utc)
_MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

_YEAR_RE = re.compile(r"^\d{4}$")
_YEAR_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")
_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _format_iso(dt: _dt.datetime) -> str:
    dt = dt.astimezone(_dt.timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S") + f".{dt.microsecond // 1000:03d}Z"


def epoch_to_iso(epoch_ms: float) -> str:
    """Millisecond epoch -> `YYYY-MM-DDTHH:MM:SS.mmmZ`."""
    return _format_iso(_EPOCH + _dt.timedelta(milliseconds=int(epoch_ms)))


def now_iso() -> str:
    return _format_iso(_dt.datetime.now(_dt.timezone.utc))


def parse_iso(value: str) -> _dt.datetime:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    dt = _dt.datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=_dt.timezone.utc)
    return dt


def year_month(iso: str) -> str:
    return iso[:7]


def date_only(iso: str) -> str:
    return iso[:10]


def year_week(iso: str) -> str:
    """Simplified Sunday-start week key, `YYYY-Www`.

    week = ceil((day_of_year + jan1_weekday + 1) / 7) with a 0-based day of
    year and Sunday == 0. This is not ISO-8601 week numbering: week 01 always
    contains January 1st and late December can reach week 53 or 54.
    """
    dt = parse_iso(iso).astimezone(_dt.timezone.utc)
    jan1 = _dt.date(dt.year, 1, 1)
    day_of_year = (dt.date() - jan1).days
    jan1_weekday = (jan1.weekday() + 1) % 7
    week = math.ceil((day_of_year + jan1_weekday + 1) / 7)
    return f"{dt.year}-W{week:02d}"


def parse_flexible_date(value: str, end_of_period: bool = False) -> str:
    """Expand `YYYY`, `YYYY-MM`, `YYYY-MM-DD` or an ISO timestamp to an instant.

    Lone periods expand to their first millisecond, or to 23:59:59.999 of
    their last day when `end_of_period` is set (upper range bounds).
    """
    text = str(value or "").strip()
    if "T" in text:
        return text

    if _DAY_RE.match(text):
        _dt.date.fromisoformat(text)
        if end_of_period:
            return f"{text}T23:59:59.999Z"
        return f"{text}T00:00:00.000Z"

    if _YEAR_MONTH_RE.match(text):
        year, month = (int(part) for part in text.split("-"))
        # raises calendar.IllegalMonthError (a ValueError) for month 00 or 13+
        last_day = calendar.monthrange(year, month)[1]
        if end_of_period:
            return f"{text}-{last_day:02d}T23:59:59.999Z"
        return f"{text}-01T00:00:00.000Z"

    if _YEAR_RE.match(text):
        if end_of_period:
            return f"{text}-12-31T23:59:59.999Z"
        return f"{text}-01-01T00:00:00.000Z"

    try:
        return _format_iso(parse_iso(text))
    except ValueError:
        raise ValueError(f"Unrecognized date: {value!r} (use YYYY, YYYY-MM, YYYY-MM-DD or ISO 8601)") from None


def is_date_in_range(date_iso: str, from_iso: Optional[str] = None, to_iso: Optional[str] = None) -> bool:
    instant = parse_iso(date_iso)
    if from_iso and instant < parse_iso(from_iso):
        return False
    if to_iso and instant > parse_iso(to_iso):
        return False
    return True


def format_date_for_header(iso: str) -> str:
    """`Jun 15, 2025, 12:00 PM` in UTC."""
    dt = parse_iso(iso).astimezone(_dt.timezone.utc)
    hour12 = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{_MONTH_ABBR[dt.month - 1]} {dt.day}, {dt.year}, {hour12:02d}:{dt.minute:02d} {meridiem}"
