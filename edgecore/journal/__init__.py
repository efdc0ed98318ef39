"""Trade journal: spreadsheet import and analytics."""

from edgecore.journal.models import SkipReason, Trade
from edgecore.journal.parser import TradeRowParser, parse_row
from edgecore.journal.ingest import IngestResult, SpreadsheetIngestor, import_trades

__all__ = [
    "Trade",
    "SkipReason",
    "TradeRowParser",
    "parse_row",
    "SpreadsheetIngestor",
    "IngestResult",
    "import_trades",
]
