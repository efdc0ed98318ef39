"""
Categorical and numeric field mapping for imported journal rows.

Every mapper is total: unrecognized input maps to a documented default
instead of failing, so each imported row contributes to the aggregates.
The one exception is the entry model, which keeps unrecognized text as-is.
"""

from typing import Any, Optional
import math
import re
import unicodedata

from edgecore.journal.dates import is_blank, is_number
from edgecore.journal.models import DayOfWeek, EntryModel, ResultType, TradeDirection

_BUY_WORDS = {"BUY", "LONG", "COMPRA"}
_SELL_WORDS = {"SELL", "SHORT", "VENTA"}

# First three letters (accents stripped) of Spanish and English weekday names
_DAY_PREFIXES = {
    "LUN": DayOfWeek.MONDAY,
    "MON": DayOfWeek.MONDAY,
    "MAR": DayOfWeek.TUESDAY,
    "TUE": DayOfWeek.TUESDAY,
    "MIE": DayOfWeek.WEDNESDAY,
    "WED": DayOfWeek.WEDNESDAY,
    "JUE": DayOfWeek.THURSDAY,
    "THU": DayOfWeek.THURSDAY,
    "VIE": DayOfWeek.FRIDAY,
    "FRI": DayOfWeek.FRIDAY,
}

_CURRENCY_CHARS_RE = re.compile(r"[$€£¥,\s]")
_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")


def strip_accents(text: str) -> str:
    """Remove diacritics (MIÉRCOLES -> MIERCOLES)."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def normalize_label(value: Any) -> str:
    """Trim, uppercase and strip accents. Blank values become ''."""
    if is_blank(value):
        return ""
    return strip_accents(str(value).strip().upper())


def map_direction(text: Any) -> str:
    """Map BUY/LONG/COMPRA to Buy and SELL/SHORT/VENTA to Sell. Default Buy."""
    value = normalize_label(text)
    if value in _BUY_WORDS:
        return TradeDirection.BUY.value
    if value in _SELL_WORDS:
        return TradeDirection.SELL.value
    return TradeDirection.BUY.value


def map_day_of_week(text: Any) -> str:
    """Map a Spanish/English weekday name or abbreviation. Default Monday."""
    value = normalize_label(text)
    return _DAY_PREFIXES.get(value[:3], DayOfWeek.MONDAY).value


def map_result_type(result_text: Any, pnl_amount: float) -> str:
    """
    Map a free-text result label to TP/SL/BE.

    Labels are checked for TP/WIN/PROFIT, then SL/LOSS/STOP, then BE/BREAK.
    Without a recognizable label the sign of the P&L decides (zero counts as TP).
    """
    value = normalize_label(result_text)
    if value:
        if "TP" in value or "WIN" in value or "PROFIT" in value:
            return ResultType.TAKE_PROFIT.value
        if "SL" in value or "LOSS" in value or "STOP" in value:
            return ResultType.STOP_LOSS.value
        if "BE" in value or "BREAK" in value:
            return ResultType.BREAK_EVEN.value
    return ResultType.TAKE_PROFIT.value if pnl_amount >= 0 else ResultType.STOP_LOSS.value


def map_entry_model(text: Any) -> str:
    """Canonicalize M1/M3/Continuation; pass any other text through unchanged."""
    if is_blank(text):
        return ""
    original = str(text)
    value = normalize_label(original)
    if "M1" in value:
        return EntryModel.M1
    if "M3" in value:
        return EntryModel.M3
    if value.startswith("CONT"):
        return EntryModel.CONTINUATION
    return original


def parse_monetary(value: Any) -> float:
    """Parse a P&L cell such as '$1,250.50' or '-75'. Invalid or empty -> 0."""
    if is_blank(value):
        return 0.0
    if is_number(value):
        number = float(value)
        return number if math.isfinite(number) else 0.0
    cleaned = _CURRENCY_CHARS_RE.sub("", str(value))
    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_optional_number(value: Any) -> Optional[float]:
    """
    Parse an optional numeric cell (max RR, drawdown).

    Returns None when the cell is empty or not a number, so that a missing
    value stays distinguishable from zero.
    """
    if is_blank(value):
        return None
    if is_number(value):
        number = float(value)
        return number if math.isfinite(number) else None
    cleaned = _NON_NUMERIC_RE.sub("", str(value))
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def week_of_month(day_of_month: int) -> int:
    """Week of the month (1-5) for a day number: ceil(day / 7)."""
    return math.ceil(day_of_month / 7)
