"""
Domain models for the trade journal.

Models:
- Trade: Normalized journal record (imported or entered manually)
- SkipReason: Why an imported spreadsheet row did not become a Trade
- Enums for direction, weekday, result type and entry model
"""

from dataclasses import dataclass, asdict, field
from datetime import date
from typing import Any, Optional
import enum


class TradeDirection(str, enum.Enum):
    """Trade direction enum."""

    BUY = "Buy"
    SELL = "Sell"


class DayOfWeek(str, enum.Enum):
    """Trading weekdays."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"


class ResultType(str, enum.Enum):
    """Trade result enum."""

    TAKE_PROFIT = "TP"
    STOP_LOSS = "SL"
    BREAK_EVEN = "BE"


class EntryModel:
    """Recognized entry model tags. Anything else is kept as free text."""

    M1 = "M1"
    M3 = "M3"
    CONTINUATION = "Continuation"

    ALL = (M1, M3, CONTINUATION)


class SkipKind(str, enum.Enum):
    """Categories for rows dropped during import."""

    NO_DATE = "no-date"
    TEST_DATA = "test-data"
    PARSE_ERROR = "parse-error"


@dataclass(frozen=True)
class SkipReason:
    """A row that was rejected by the row parser."""

    kind: SkipKind
    message: str
    row_index: Optional[int] = None


@dataclass
class Trade:
    """
    Normalized trade record.

    Dates and times are kept in canonical string form (YYYY-MM-DD, HH:MM:SS).
    When no_trade_day is set the record is a placeholder for a day without a
    trade and the direction/result/model fields carry no meaning.
    """

    date: str
    day_of_week: str
    week_of_month: int
    entry_time: str
    direction: str = TradeDirection.BUY.value
    entry_model: str = ""
    result_type: str = ResultType.TAKE_PROFIT.value
    result_amount: float = 0.0
    exit_time: Optional[str] = None
    had_news: bool = False
    news_description: Optional[str] = None
    max_rr: Optional[float] = None
    drawdown: Optional[float] = None
    image_link: Optional[str] = None
    no_trade_day: bool = False
    risk_percentage: float = 1.0
    id: Optional[str] = field(default=None, compare=False)
    account_id: Optional[str] = field(default=None, compare=False)

    @property
    def trade_date(self) -> date:
        return date.fromisoformat(self.date)

    @property
    def is_winner(self) -> bool:
        return self.result_type == ResultType.TAKE_PROFIT.value

    @property
    def is_loser(self) -> bool:
        return self.result_type == ResultType.STOP_LOSS.value

    @property
    def duration_minutes(self) -> Optional[int]:
        """Minutes between entry and exit, None without an exit time."""
        if not self.entry_time or not self.exit_time:
            return None
        entry_h, entry_m = (int(p) for p in self.entry_time.split(":")[:2])
        exit_h, exit_m = (int(p) for p in self.exit_time.split(":")[:2])
        return (exit_h * 60 + exit_m) - (entry_h * 60 + entry_m)

    def to_record(self) -> dict[str, Any]:
        """Flat dict for the persistence layer (id/account only when set)."""
        record = asdict(self)
        for key in ("id", "account_id"):
            if record[key] is None:
                record.pop(key)
        return record

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Trade":
        """Build a Trade from a stored record, ignoring unknown columns."""
        known = cls.__dataclass_fields__.keys()
        data = {k: v for k, v in record.items() if k in known}
        if isinstance(data.get("date"), date):
            data["date"] = data["date"].isoformat()
        return cls(**data)

    def __repr__(self):
        return (
            f"<Trade(date='{self.date}', direction='{self.direction}', "
            f"result='{self.result_type}', amount={self.result_amount})>"
        )
