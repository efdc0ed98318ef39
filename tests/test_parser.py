"""Tests for the journal row parser."""

import pytest

from edgecore.journal.models import SkipKind, SkipReason, Trade
from edgecore.journal.parser import TradeRowParser, parse_row


class TestParseRow:
    """Tests for turning a raw row into a Trade."""

    def test_full_row(self, sample_row):
        trade = parse_row(sample_row, row_index=0)

        assert isinstance(trade, Trade)
        assert trade.date == "2024-03-05"
        assert trade.day_of_week == "Tuesday"
        assert trade.week_of_month == 1
        assert trade.entry_time == "09:45:00"
        assert trade.exit_time == "10:15:00"
        assert trade.direction == "Buy"
        assert trade.entry_model == "M1"
        assert trade.result_type == "TP"
        assert trade.result_amount == 200.0
        assert trade.had_news is True
        assert trade.news_description == "CPI"
        assert trade.max_rr == 3.5
        assert trade.drawdown == 0.4
        assert trade.image_link == "https://example.com/chart/1"
        assert trade.no_trade_day is False
        assert trade.risk_percentage == 1.0

    def test_minimal_row_gets_defaults(self):
        trade = parse_row({"date": "2024-03-18"})

        assert isinstance(trade, Trade)
        assert trade.day_of_week == "Monday"
        assert trade.week_of_month == 3
        assert trade.entry_time == "09:30:00"
        assert trade.exit_time is None
        assert trade.direction == "Buy"
        assert trade.entry_model == ""
        assert trade.result_type == "TP"
        assert trade.result_amount == 0.0
        assert trade.had_news is False
        assert trade.news_description is None
        assert trade.max_rr is None
        assert trade.drawdown is None
        assert trade.image_link is None

    def test_result_label_wins_over_pnl_sign(self, sample_row):
        sample_row["result"] = "SL"
        sample_row["pnl"] = "50"

        trade = parse_row(sample_row)

        assert trade.result_type == "SL"
        assert trade.result_amount == 50.0

    def test_missing_result_uses_pnl_sign(self, sample_row):
        sample_row["result"] = None
        sample_row["pnl"] = "-120"

        assert parse_row(sample_row).result_type == "SL"

    def test_exit_time_falls_back_to_alternate_column(self, sample_row):
        sample_row["exit_time"] = None
        sample_row["exit_time_alt"] = "11:05"

        assert parse_row(sample_row).exit_time == "11:05:00"

    def test_risk_percentage_is_stamped(self, sample_row):
        trade = TradeRowParser(risk_percentage=0.5).parse(sample_row)
        assert trade.risk_percentage == 0.5


class TestNews:
    """Tests for the had_news / news_description pair."""

    @pytest.mark.parametrize("cell", ["No news", "NO NEWS", " no news "])
    def test_default_no_news_marker(self, sample_row, cell):
        sample_row["news"] = cell

        trade = parse_row(sample_row)

        assert trade.had_news is False
        assert trade.news_description is None

    def test_blank_news(self, sample_row):
        sample_row["news"] = "   "
        trade = parse_row(sample_row)
        assert trade.had_news is False
        assert trade.news_description is None

    def test_custom_markers(self, sample_row):
        parser = TradeRowParser(no_news_markers=["Sin noticia", "-"])

        sample_row["news"] = "SIN NOTICIA"
        assert parser.parse(sample_row).had_news is False

        sample_row["news"] = "-"
        assert parser.parse(sample_row).had_news is False

        sample_row["news"] = "FOMC"
        trade = parser.parse(sample_row)
        assert trade.had_news is True
        assert trade.news_description == "FOMC"


class TestSkips:
    """Tests for rows that do not become trades."""

    @pytest.mark.parametrize("cell", [None, "", "Notes", "TOTAL"])
    def test_no_date(self, sample_row, cell):
        sample_row["date"] = cell

        result = parse_row(sample_row, row_index=4)

        assert isinstance(result, SkipReason)
        assert result.kind == SkipKind.NO_DATE
        assert result.row_index == 4

    def test_template_year_is_test_data(self, sample_row):
        sample_row["date"] = "01/01/2019"

        result = parse_row(sample_row)

        assert isinstance(result, SkipReason)
        assert result.kind == SkipKind.TEST_DATA

    def test_min_year_is_configurable(self, sample_row):
        sample_row["date"] = "01/01/2019"
        assert isinstance(TradeRowParser(min_year=2015).parse(sample_row), Trade)

    def test_processing_error_is_captured(self, sample_row, monkeypatch):
        """An unexpected failure while mapping fields becomes a parse-error skip."""

        def explode(_):
            raise RuntimeError("boom")

        monkeypatch.setattr("edgecore.journal.parser.map_direction", explode)

        result = parse_row(sample_row, row_index=7)

        assert isinstance(result, SkipReason)
        assert result.kind == SkipKind.PARSE_ERROR
        assert result.message == "row processing error"
        assert result.row_index == 7

    def test_parser_is_pure(self, sample_row):
        """Parsing the same row twice yields equal trades."""
        assert parse_row(dict(sample_row)) == parse_row(dict(sample_row))
