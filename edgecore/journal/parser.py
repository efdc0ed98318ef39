"""
Row parser for imported journal spreadsheets.

Turns one raw spreadsheet row (a dict keyed by canonical column names) into a
normalized Trade, or a SkipReason explaining why the row was dropped.
"""

from typing import Any, Iterable, Optional, Union
import logging

from edgecore.journal.dates import is_blank, parse_date, parse_time
from edgecore.journal.fields import (
    map_day_of_week,
    map_direction,
    map_entry_model,
    map_result_type,
    normalize_label,
    parse_monetary,
    parse_optional_number,
    week_of_month,
)
from edgecore.journal.models import SkipKind, SkipReason, Trade

logger = logging.getLogger(__name__)

# Canonical column keys
COL_DATE = "date"
COL_DAY = "day"
COL_WEEK = "week"
COL_ENTRY_TIME = "entry_time"
COL_EXIT_TIME = "exit_time"
COL_EXIT_TIME_ALT = "exit_time_alt"
COL_NEWS = "news"
COL_MODEL = "model"
COL_DIRECTION = "direction"
COL_MAX_RR = "max_rr"
COL_DRAWDOWN = "drawdown"
COL_RESULT = "result"
COL_PNL = "pnl"
COL_LINK = "link"

# Normalized header spellings (uppercase, accents stripped), first match wins
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    COL_DATE: ("FECHA", "DATE"),
    COL_DAY: ("DIA", "DAY", "WEEKDAY"),
    COL_WEEK: ("SEMANA", "WEEK"),
    COL_ENTRY_TIME: ("HORA ENTRADA", "ENTRY TIME"),
    COL_EXIT_TIME: ("HORA SALIDA EN 1:2", "EXIT TIME"),
    COL_EXIT_TIME_ALT: ("HORA SALIDA",),
    COL_NEWS: ("NOTICIA", "NEWS"),
    COL_MODEL: ("MODELO", "MODEL"),
    COL_DIRECTION: ("TIPO", "DIRECTION", "SIDE"),
    COL_MAX_RR: ("RR MAXIMO", "MAX RR"),
    COL_DRAWDOWN: ("DRAWDOWN",),
    COL_RESULT: ("RESULTADO", "RESULT"),
    COL_PNL: ("P&L", "PNL"),
    COL_LINK: ("LINK M1 (EJECUCION)", "LINK", "CHART"),
}

MIN_YEAR = 2020
DEFAULT_NO_NEWS_MARKERS = frozenset({"NO NEWS"})


def _text_or_none(value: Any) -> Optional[str]:
    if is_blank(value):
        return None
    return str(value).strip()


class TradeRowParser:
    """Parse raw spreadsheet rows into Trade records."""

    def __init__(
        self,
        min_year: int = MIN_YEAR,
        risk_percentage: float = 1.0,
        no_news_markers: Optional[Iterable[str]] = None,
    ):
        """
        Initialize parser.

        Args:
            min_year: Rows dated before this year are treated as template/test data
            risk_percentage: Risk percentage stamped on every parsed trade
            no_news_markers: News cell values meaning "no news" (case-insensitive)
        """
        self.min_year = min_year
        self.risk_percentage = risk_percentage
        markers = no_news_markers if no_news_markers is not None else DEFAULT_NO_NEWS_MARKERS
        self.no_news_markers = frozenset(normalize_label(m) for m in markers)

    def parse(self, row: dict[str, Any], row_index: Optional[int] = None) -> Union[Trade, SkipReason]:
        """
        Parse one row.

        Args:
            row: Cell values keyed by canonical column name
            row_index: Position of the row in the batch (kept on parse errors)

        Returns:
            Trade, or SkipReason when the row has no valid date, looks like
            test data, or fails while mapping fields
        """
        trade_date = parse_date(row.get(COL_DATE))
        if trade_date is None:
            return SkipReason(SkipKind.NO_DATE, "no valid date", row_index)

        if int(trade_date[:4]) < self.min_year:
            return SkipReason(SkipKind.TEST_DATA, "looks like test data", row_index)

        try:
            return self._build_trade(row, trade_date)
        except Exception as e:
            logger.warning(f"Row {row_index}: processing error: {e}")
            return SkipReason(SkipKind.PARSE_ERROR, "row processing error", row_index)

    def _build_trade(self, row: dict[str, Any], trade_date: str) -> Trade:
        pnl = parse_monetary(row.get(COL_PNL))

        exit_cell = row.get(COL_EXIT_TIME)
        if is_blank(exit_cell):
            exit_cell = row.get(COL_EXIT_TIME_ALT)
        exit_time = None if is_blank(exit_cell) else parse_time(exit_cell)

        news = _text_or_none(row.get(COL_NEWS))
        had_news = news is not None and normalize_label(news) not in self.no_news_markers

        return Trade(
            date=trade_date,
            day_of_week=map_day_of_week(row.get(COL_DAY)),
            week_of_month=week_of_month(int(trade_date[8:10])),
            entry_time=parse_time(row.get(COL_ENTRY_TIME)),
            exit_time=exit_time,
            direction=map_direction(row.get(COL_DIRECTION)),
            entry_model=map_entry_model(row.get(COL_MODEL)),
            result_type=map_result_type(row.get(COL_RESULT), pnl),
            result_amount=pnl,
            had_news=had_news,
            news_description=news if had_news else None,
            max_rr=parse_optional_number(row.get(COL_MAX_RR)),
            drawdown=parse_optional_number(row.get(COL_DRAWDOWN)),
            image_link=_text_or_none(row.get(COL_LINK)),
            no_trade_day=False,
            risk_percentage=self.risk_percentage,
        )


def parse_row(row: dict[str, Any], row_index: Optional[int] = None, **kwargs: Any) -> Union[Trade, SkipReason]:
    """Parse a single row with a default-configured TradeRowParser."""
    return TradeRowParser(**kwargs).parse(row, row_index)
