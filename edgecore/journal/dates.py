"""
Date and time normalization for spreadsheet cells.

Spreadsheet exports mix native date cells, serial day numbers and free text
typed by hand (05/03/24, 5-3-2024, 9:45 am ...). Everything is reduced to
canonical strings: YYYY-MM-DD for dates and HH:MM:SS for times.

Policy for ambiguous d/m vs m/d dates: day-first unless the second part
cannot be a month. This is lossy for dates where both parts are <= 12 and is
kept as-is so historical imports keep their interpretation.
"""

from datetime import date, datetime, time, timedelta
from typing import Any, Optional
import logging
import math
import numbers
import re
import warnings

import pandas as pd

logger = logging.getLogger(__name__)

# Spreadsheet serial day 0 (the Lotus 1-2-3 leap-year bug is baked into this epoch)
SERIAL_EPOCH = datetime(1899, 12, 30)
SECONDS_PER_DAY = 86400

DEFAULT_TIME = "09:30:00"

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"(\d{1,2}):(\d{2})(?::(\d{2}))?")
_LEADING_INT_RE = re.compile(r"\s*(\d+)")


def is_blank(value: Any) -> bool:
    """True for None, NaN/NaT and whitespace-only strings."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def expand_two_digit_year(year: int) -> int:
    """Two-digit years pivot at 50: 51..99 -> 19xx, 00..50 -> 20xx."""
    if year < 100:
        return 1900 + year if year > 50 else 2000 + year
    return year


def _format_ymd(year: int, month: int, day: int) -> Optional[str]:
    if not (1 <= month <= 12 and 1 <= day <= 31):
        return None
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def _int_parts(parts: list[str]) -> Optional[list[int]]:
    """Leading integer of each part ('05/03/2024 10:00' -> 5, 3, 2024), None if one has none."""
    numbers = []
    for part in parts:
        match = _LEADING_INT_RE.match(part)
        if not match:
            return None
        numbers.append(int(match.group(1)))
    return numbers


def serial_to_date(serial: float) -> str:
    """Convert a spreadsheet serial day number to YYYY-MM-DD."""
    moment = SERIAL_EPOCH + timedelta(seconds=round(serial * SECONDS_PER_DAY))
    return moment.date().isoformat()


def _parse_slash_date(raw: str) -> Optional[str]:
    parts = _int_parts(raw.split("/"))
    if parts is None:
        return _parse_fallback(raw)
    a, b, year = parts
    year = expand_two_digit_year(year)

    if a > 12 and b <= 12:
        day, month = a, b
    elif b > 12 and a <= 12:
        day, month = b, a
    else:
        # Both <= 12 (ambiguous) or both > 12 (invalid): day-first
        day, month = a, b
    return _format_ymd(year, month, day)


def _parse_dash_date(raw: str) -> Optional[str]:
    segments = raw.split("-")
    parts = _int_parts(segments)
    if parts is None:
        return _parse_fallback(raw)
    if len(segments[0].strip()) == 4:
        year, month, day = parts
    else:
        day, month, year = parts
        year = expand_two_digit_year(year)
    return _format_ymd(year, month, day)


def _parse_fallback(raw: str) -> Optional[str]:
    with warnings.catch_warnings():
        # pandas warns when it has to guess the format of a free-text date
        warnings.simplefilter("ignore", UserWarning)
        parsed = pd.to_datetime(raw, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.date().isoformat()


def parse_date(value: Any) -> Optional[str]:
    """
    Parse a spreadsheet date cell into YYYY-MM-DD.

    Tried in order, first match wins:
    1. Already YYYY-MM-DD
    2. Native date/datetime cell, or a numeric serial day count from 1899-12-30
    3. a/b/c with a day/month swap heuristic and two-digit year pivot
    4. a-b-c: YYYY-M-D when the first segment has 4 digits, else D-M-Y
    5. Generic date parse

    Args:
        value: Raw cell value

    Returns:
        Canonical date string, or None when the value cannot be parsed
    """
    if is_blank(value):
        return None

    if isinstance(value, str) and _ISO_DATE_RE.match(value.strip()):
        raw = value.strip()
        return _format_ymd(int(raw[:4]), int(raw[5:7]), int(raw[8:10]))

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    if is_number(value):
        if not math.isfinite(value):
            return None
        try:
            return serial_to_date(float(value))
        except OverflowError:
            return None

    raw = str(value).strip()
    if raw.count("/") == 2:
        return _parse_slash_date(raw)
    if raw.count("-") == 2:
        return _parse_dash_date(raw)
    return _parse_fallback(raw)


def _format_hms(hours: int, minutes: int, seconds: int = 0) -> str:
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def parse_time(value: Any) -> str:
    """
    Parse a spreadsheet time cell into HH:MM:SS.

    Numbers are fractions of a day rounded to the nearest minute (a full
    serial date-time keeps only its fractional part). Strings yield their
    first H:MM[:SS] match, adjusted for am/pm markers anywhere in the text.
    Anything else falls back to 09:30:00.
    """
    if is_blank(value):
        return DEFAULT_TIME

    if isinstance(value, datetime):
        return _format_hms(value.hour, value.minute, value.second)
    if isinstance(value, time):
        return _format_hms(value.hour, value.minute, value.second)

    if is_number(value):
        if not math.isfinite(value):
            return DEFAULT_TIME
        total_minutes = int(round(float(value) % 1 * 24 * 60)) % (24 * 60)
        return _format_hms(total_minutes // 60, total_minutes % 60)

    text = str(value)
    match = _TIME_RE.search(text)
    if not match:
        return DEFAULT_TIME

    hours = int(match.group(1))
    minutes = match.group(2)
    seconds = match.group(3) or "00"

    lowered = text.lower()
    is_pm = "pm" in lowered or "p.m" in lowered
    is_am = "am" in lowered or "a.m" in lowered
    if is_pm and hours < 12:
        hours += 12
    if is_am and hours == 12:
        hours = 0

    return f"{hours:02d}:{minutes}:{seconds}"
