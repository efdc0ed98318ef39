"""Pytest configuration and fixtures."""

import io
import os
import tempfile
import uuid

import pytest


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Point the database at a temporary SQLite file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        os.environ["DATABASE_URL"] = f"sqlite:///{tmpdir}/test_journal.db"
        os.environ.pop("EDGECORE_OWNER_ID", None)

        from edgecore.db.models import reset_engine

        reset_engine()
        yield
        reset_engine()


@pytest.fixture
def owner_id():
    """Fresh owner id so tests sharing the database don't see each other's rows."""
    return f"test-{uuid.uuid4()}"


JOURNAL_HEADER = ["FECHA", "DIA", "HORA ENTRADA", "HORA SALIDA EN 1:2", "NOTICIA", "MODELO", "TIPO", "RESULTADO", "P&L"]


@pytest.fixture
def journal_header():
    return list(JOURNAL_HEADER)


@pytest.fixture
def journal_rows():
    """Rows as typed into a Spanish journal template (same column order as journal_header)."""
    return [
        ["05/03/2024", "Martes", "09:45", "10:15", "CPI", "M1", "Compra", "TP", "$200.00"],
        ["06/03/2024", "Miércoles", "10:00", None, "No news", "M3", "Venta", "SL", "-100"],
        ["07/03/2024", "Jueves", "9:50 am", "11:00", None, "Continuación", "Compra", "TP", "200"],
    ]


@pytest.fixture
def sample_row():
    """One raw row keyed by canonical column name."""
    return {
        "date": "05/03/2024",
        "day": "Martes",
        "entry_time": "09:45",
        "exit_time": "10:15",
        "news": "CPI",
        "model": "M1",
        "direction": "Compra",
        "max_rr": "3.5",
        "drawdown": "0.4",
        "result": "TP",
        "pnl": "$200.00",
        "link": "https://example.com/chart/1",
    }


@pytest.fixture
def make_workbook():
    """Build .xlsx bytes from {sheet name: list of rows}; the first row is written as data."""
    import pandas as pd

    def _make(sheets: dict) -> bytes:
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            for name, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=name, header=False, index=False)
        return buffer.getvalue()

    return _make


@pytest.fixture
def sample_trades():
    """Journal trades spanning two months and two accounts."""
    from edgecore.journal.models import Trade

    return [
        Trade(date="2024-03-05", day_of_week="Tuesday", week_of_month=1, entry_time="09:45:00",
              exit_time="10:15:00", entry_model="M1", result_type="TP", result_amount=200.0,
              had_news=True, news_description="CPI", max_rr=3.0, drawdown=0.2, account_id="acc-1"),
        Trade(date="2024-03-06", day_of_week="Wednesday", week_of_month=1, entry_time="10:00:00",
              exit_time="10:30:00", entry_model="M3", result_type="SL", result_amount=-100.0,
              max_rr=0.5, account_id="acc-2"),
        Trade(date="2024-03-07", day_of_week="Thursday", week_of_month=1, entry_time="09:50:00",
              entry_model="M1", result_type="TP", result_amount=200.0, drawdown=0.4, account_id="acc-1"),
        Trade(date="2024-04-15", day_of_week="Monday", week_of_month=3, entry_time="09:35:00",
              exit_time="09:55:00", entry_model="Continuation", result_type="SL", result_amount=-100.0),
        Trade(date="2024-04-16", day_of_week="Tuesday", week_of_month=3, entry_time="09:30:00",
              no_trade_day=True),
    ]
