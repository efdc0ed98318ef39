"""
Spreadsheet ingestion for the trade journal.

Supports:
- Excel workbooks (every sheet is scanned) and single-sheet CSV exports
- Header detection in the first rows of each sheet
- Cross-sheet de-duplication of identical rows
- Skip tallies (no date / test data / parse errors)
- Batched persistence with per-batch error isolation
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Protocol
import io
import logging
import re

import numpy as np
import pandas as pd

from edgecore.config import settings
from edgecore.errors import EmptyWorkbookError, ImportFormatError
from edgecore.journal.dates import is_blank
from edgecore.journal.fields import normalize_label
from edgecore.journal.models import SkipKind, SkipReason, Trade
from edgecore.journal.parser import COL_DATE, COLUMN_ALIASES, TradeRowParser

logger = logging.getLogger(__name__)

CSV_SHEET_NAME = "csv"
DEFAULT_BATCH_SIZE = 50
_NUMERIC_CELL_RE = re.compile(r"^\s*-?\d+(?:\.\d+)?\s*$")


@dataclass(frozen=True)
class SheetRow:
    """One data row lifted out of a sheet, keyed by canonical column."""

    sheet: str
    sheet_row: int  # 1-based row number as shown by spreadsheet apps
    cells: dict[str, Any]

    def key(self) -> tuple:
        """Structural identity used for duplicate detection."""
        return tuple(sorted(self.cells.items()))


@dataclass(frozen=True)
class SkipTally:
    """Count of rows skipped for one reason."""

    reason: str
    count: int


@dataclass(frozen=True)
class RowError:
    """A row that failed while mapping fields."""

    row_index: int
    sheet: str
    sheet_row: int
    message: str


@dataclass
class IngestResult:
    """Outcome of reading a workbook."""

    trades: list[Trade]
    skipped: list[SkipTally]
    errors: list[RowError] = field(default_factory=list)
    sheets_used: list[str] = field(default_factory=list)
    rows_read: int = 0
    duplicates_removed: int = 0

    def skipped_count(self, kind: SkipKind) -> int:
        for tally in self.skipped:
            if tally.reason == kind.value:
                return tally.count
        return 0

    @property
    def total_skipped(self) -> int:
        return sum(t.count for t in self.skipped)


class TradeSink(Protocol):
    """Persistence collaborator used by import_trades."""

    def insert_many(self, records: list[dict[str, Any]]) -> None:
        ...


@dataclass(frozen=True)
class BatchFailure:
    """A persistence batch that failed (1-based batch index and trade rows)."""

    batch_index: int
    first_row: int
    last_row: int
    error: str


@dataclass
class BatchImportReport:
    """Result of persisting parsed trades in batches."""

    imported: int = 0
    total_batches: int = 0
    failed_batches: list[BatchFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_batches

    @property
    def failed_rows(self) -> int:
        return sum(f.last_row - f.first_row + 1 for f in self.failed_batches)


def _clean_cell(value: Any) -> Any:
    if is_blank(value):
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, np.generic):
        return value.item()
    return value


def _csv_cell(value: Any) -> Any:
    """CSV cells arrive as text; give numeric ones (serial dates, day fractions) their number back."""
    if isinstance(value, str) and _NUMERIC_CELL_RE.match(value):
        return float(value)
    return value


def read_workbook(data: bytes, filename: Optional[str] = None) -> dict[str, pd.DataFrame]:
    """
    Read workbook bytes into raw (headerless) DataFrames, one per sheet.

    Args:
        data: File content
        filename: Original file name; a .csv suffix selects the CSV reader

    Returns:
        Mapping of sheet name to DataFrame

    Raises:
        ImportFormatError: If the content is not a readable spreadsheet
    """
    if not data:
        raise ImportFormatError("Workbook is empty", context={"filename": filename})

    try:
        if filename and filename.lower().endswith(".csv"):
            frame = pd.read_csv(
                io.BytesIO(data),
                header=None,
                dtype=object,
                keep_default_na=False,
                skip_blank_lines=False,
            )
            return {CSV_SHEET_NAME: frame.apply(lambda column: column.map(_csv_cell))}
        return pd.read_excel(io.BytesIO(data), sheet_name=None, header=None, dtype=object)
    except Exception as e:
        logger.error(f"Could not read workbook {filename or '<bytes>'}: {e}")
        raise ImportFormatError(
            f"Could not read spreadsheet: {e}", context={"filename": filename}
        ) from e


class SpreadsheetIngestor:
    """Turn workbook content into normalized Trade records."""

    def __init__(
        self,
        parser: Optional[TradeRowParser] = None,
        header_scan_rows: Optional[int] = None,
    ):
        """
        Initialize ingestor.

        Args:
            parser: Row parser (defaults to one configured from settings)
            header_scan_rows: How many leading rows to search for the header
        """
        self.parser = parser or TradeRowParser(
            min_year=settings.min_import_year,
            risk_percentage=settings.default_risk_percentage,
            no_news_markers=settings.no_news_markers,
        )
        self.header_scan_rows = header_scan_rows or settings.header_scan_rows

    def ingest(self, workbook: bytes, filename: Optional[str] = None) -> IngestResult:
        """
        Read and parse a workbook.

        Raises:
            ImportFormatError: Unreadable content
            EmptyWorkbookError: No relevant sheet, or zero usable trades
        """
        return self.ingest_frames(read_workbook(workbook, filename))

    def ingest_frames(self, frames: dict[str, pd.DataFrame]) -> IngestResult:
        """Parse already-loaded sheets (raw, headerless DataFrames)."""
        rows, sheets_used = self.extract_rows(frames)
        if not rows:
            raise EmptyWorkbookError(
                "Workbook is empty or has the wrong format (no sheet with a date column and data rows)",
                context={"sheets": list(frames)},
            )

        unique_rows = self.deduplicate(rows)
        duplicates = len(rows) - len(unique_rows)
        if duplicates:
            logger.info(f"Removed {duplicates} duplicate rows across sheets")

        trades: list[Trade] = []
        tallies: Counter = Counter()
        errors: list[RowError] = []

        for index, row in enumerate(unique_rows):
            parsed = self.parser.parse(row.cells, row_index=index)
            if isinstance(parsed, SkipReason):
                tallies[parsed.kind.value] += 1
                if parsed.kind == SkipKind.PARSE_ERROR:
                    errors.append(RowError(index, row.sheet, row.sheet_row, parsed.message))
                continue
            trades.append(parsed)

        skipped = [SkipTally(kind.value, tallies.get(kind.value, 0)) for kind in SkipKind]

        if not trades:
            raise EmptyWorkbookError(
                "Workbook is empty or has the wrong format (no usable trades)",
                skipped={t.reason: t.count for t in skipped},
                context={"sheets": sheets_used, "rows": len(unique_rows)},
            )

        logger.info(
            f"Parsed {len(trades)} trades from {len(unique_rows)} rows "
            f"({', '.join(f'{t.reason}={t.count}' for t in skipped)})"
        )
        return IngestResult(
            trades=trades,
            skipped=skipped,
            errors=errors,
            sheets_used=sheets_used,
            rows_read=len(rows),
            duplicates_removed=duplicates,
        )

    def find_header(self, frame: pd.DataFrame) -> Optional[tuple[int, dict[str, int]]]:
        """
        Locate the header row of a sheet.

        Returns:
            (row position, canonical column -> column position), or None when
            no row in the scan window exposes the date column
        """
        for r in range(min(len(frame), self.header_scan_rows)):
            labels: dict[str, int] = {}
            for c, cell in enumerate(frame.iloc[r].tolist()):
                label = normalize_label(cell)
                if label and label not in labels:
                    labels[label] = c

            if not any(alias in labels for alias in COLUMN_ALIASES[COL_DATE]):
                continue

            columns: dict[str, int] = {}
            for key, aliases in COLUMN_ALIASES.items():
                for alias in aliases:
                    if alias in labels:
                        columns[key] = labels[alias]
                        break
            return r, columns
        return None

    def extract_rows(self, frames: dict[str, pd.DataFrame]) -> tuple[list[SheetRow], list[str]]:
        """Collect data rows from every relevant sheet, in sheet order."""
        rows: list[SheetRow] = []
        sheets_used: list[str] = []

        for name, frame in frames.items():
            header = self.find_header(frame)
            if header is None:
                logger.debug(f"Sheet '{name}': no date column, ignored")
                continue

            header_row, columns = header
            sheets_used.append(name)
            sheet_rows = 0
            for r in range(header_row + 1, len(frame)):
                values = frame.iloc[r].tolist()
                cells = {
                    key: _clean_cell(values[columns[key]]) if key in columns else None
                    for key in COLUMN_ALIASES
                }
                if all(v is None for v in cells.values()):
                    continue
                rows.append(SheetRow(sheet=str(name), sheet_row=r + 1, cells=cells))
                sheet_rows += 1
            logger.info(f"Sheet '{name}': header at row {header_row + 1}, {sheet_rows} data rows")

        return rows, sheets_used

    @staticmethod
    def deduplicate(rows: Iterable[SheetRow]) -> list[SheetRow]:
        """Drop rows identical field-for-field to an earlier row, keeping order."""
        seen: set = set()
        unique: list[SheetRow] = []
        for row in rows:
            key = row.key()
            if key in seen:
                continue
            seen.add(key)
            unique.append(row)
        return unique


def import_trades(
    trades: list[Trade],
    store: TradeSink,
    batch_size: Optional[int] = None,
    owner_id: Optional[str] = None,
    account_id: Optional[str] = None,
) -> BatchImportReport:
    """
    Persist trades in fixed-size batches.

    A failing batch is recorded and logged; the remaining batches still run.

    Args:
        trades: Parsed trades
        store: Persistence collaborator with insert_many()
        batch_size: Trades per batch (defaults to settings, 50)
        owner_id: Owner stamped on every record
        account_id: Account stamped on every record (keeps a trade's own account if set)

    Returns:
        BatchImportReport with imported count and failed batches
    """
    size = batch_size or settings.import_batch_size or DEFAULT_BATCH_SIZE
    if size <= 0:
        raise ValueError(f"batch_size must be positive, got {size}")

    report = BatchImportReport()
    for start in range(0, len(trades), size):
        batch = trades[start:start + size]
        report.total_batches += 1
        records = []
        for trade in batch:
            record = trade.to_record()
            record["user_id"] = owner_id
            if account_id is not None or "account_id" not in record:
                record["account_id"] = account_id
            records.append(record)

        try:
            store.insert_many(records)
        except Exception as e:
            failure = BatchFailure(
                batch_index=report.total_batches,
                first_row=start + 1,
                last_row=start + len(batch),
                error=str(e),
            )
            report.failed_batches.append(failure)
            logger.warning(
                f"Batch {failure.batch_index} (rows {failure.first_row}-{failure.last_row}) failed: {e}"
            )
            continue

        report.imported += len(batch)

    logger.info(
        f"Imported {report.imported}/{len(trades)} trades in {report.total_batches} batches, "
        f"{len(report.failed_batches)} failed"
    )
    return report
