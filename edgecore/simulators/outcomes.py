"""
Trade outcomes fed to the simulators, and selection of outcomes from the journal.
"""

from datetime import date
from typing import Iterable, Optional, Union
import enum

from edgecore.journal.models import ResultType, Trade


class Outcome(str, enum.Enum):
    """Two-valued trade outcome consumed by both simulators."""

    TP = "TP"
    SL = "SL"

    @classmethod
    def coerce(cls, value: Union["Outcome", str]) -> "Outcome":
        """Accept an Outcome or a 'TP'/'SL' string. Anything else raises ValueError."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid outcome: {value!r}")
        return cls(value.strip().upper())


def parse_outcomes(text: str) -> list[Outcome]:
    """Parse a comma/space separated outcome list such as 'TP,TP,SL'."""
    tokens = text.replace(",", " ").split()
    return [Outcome.coerce(token) for token in tokens]


def _as_date(value: Union[date, str, None]) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    return date.fromisoformat(value)


def select_outcomes(
    trades: Iterable[Trade],
    entry_model: Optional[str] = None,
    result_type: Optional[str] = None,
    date_from: Union[date, str, None] = None,
    date_to: Union[date, str, None] = None,
    limit: Optional[int] = None,
) -> list[Outcome]:
    """
    Turn journal trades into a simulator outcome sequence.

    Only real trades (not no-trade-day placeholders) closed at TP or SL are
    used, ordered by date then entry time.

    Args:
        trades: Journal trades
        entry_model: Keep only this entry model
        result_type: Keep only TP or SL
        date_from: Inclusive lower date bound
        date_to: Inclusive upper date bound
        limit: Keep the first N after ordering

    Returns:
        Ordered list of outcomes
    """
    start = _as_date(date_from)
    end = _as_date(date_to)
    closed = {ResultType.TAKE_PROFIT.value, ResultType.STOP_LOSS.value}

    selected = []
    for trade in trades:
        if trade.no_trade_day or trade.result_type not in closed:
            continue
        if entry_model and trade.entry_model != entry_model:
            continue
        if result_type and trade.result_type != result_type:
            continue
        if start and trade.trade_date < start:
            continue
        if end and trade.trade_date > end:
            continue
        selected.append(trade)

    selected.sort(key=lambda t: (t.date, t.entry_time or ""))
    if limit is not None:
        selected = selected[:limit]

    return [Outcome(t.result_type) for t in selected]
