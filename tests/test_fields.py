"""Tests for categorical and numeric field mapping."""

import pytest

from edgecore.journal.fields import (
    map_day_of_week,
    map_direction,
    map_entry_model,
    map_result_type,
    normalize_label,
    parse_monetary,
    parse_optional_number,
    strip_accents,
    week_of_month,
)


class TestDirection:
    """Tests for map_direction."""

    @pytest.mark.parametrize("text", ["BUY", "long", "Compra", " compra "])
    def test_buy_words(self, text):
        assert map_direction(text) == "Buy"

    @pytest.mark.parametrize("text", ["sell", "SHORT", "Venta"])
    def test_sell_words(self, text):
        assert map_direction(text) == "Sell"

    @pytest.mark.parametrize("text", [None, "", "???", "sideways"])
    def test_default_is_buy(self, text):
        assert map_direction(text) == "Buy"


class TestDayOfWeek:
    """Tests for map_day_of_week."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Lunes", "Monday"),
            ("martes", "Tuesday"),
            ("Miércoles", "Wednesday"),
            ("JUE", "Thursday"),
            ("Viernes", "Friday"),
            ("fri", "Friday"),
            ("Wednesday", "Wednesday"),
        ],
    )
    def test_spanish_and_english(self, text, expected):
        assert map_day_of_week(text) == expected

    @pytest.mark.parametrize("text", [None, "", "Sábado", "xyz"])
    def test_default_is_monday(self, text):
        assert map_day_of_week(text) == "Monday"


class TestResultType:
    """Tests for map_result_type."""

    @pytest.mark.parametrize("text", ["TP", "win", "Profit", "tp 1:2"])
    def test_take_profit_labels(self, text):
        assert map_result_type(text, -50) == "TP"

    @pytest.mark.parametrize("text", ["SL", "loss", "Stop"])
    def test_stop_loss_labels(self, text):
        assert map_result_type(text, 50) == "SL"

    @pytest.mark.parametrize("text", ["BE", "Break even"])
    def test_break_even_labels(self, text):
        assert map_result_type(text, 0) == "BE"

    def test_falls_back_to_pnl_sign(self):
        assert map_result_type(None, 120.0) == "TP"
        assert map_result_type("", -1.0) == "SL"
        assert map_result_type("???", 0.0) == "TP"


class TestEntryModel:
    """Tests for map_entry_model."""

    def test_recognized_models(self):
        assert map_entry_model("m1") == "M1"
        assert map_entry_model("M3 sweep") == "M3"
        assert map_entry_model("Continuación") == "Continuation"
        assert map_entry_model("cont") == "Continuation"

    def test_unrecognized_passes_through(self):
        assert map_entry_model("Breaker block") == "Breaker block"

    def test_blank_is_empty(self):
        assert map_entry_model(None) == ""
        assert map_entry_model("  ") == ""


class TestNumbers:
    """Tests for parse_monetary, parse_optional_number and week_of_month."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("$1,250.50", 1250.5),
            ("-75", -75.0),
            ("€ 30", 30.0),
            (12, 12.0),
            (-3.5, -3.5),
            ("abc", 0.0),
            ("", 0.0),
            (None, 0.0),
        ],
    )
    def test_parse_monetary(self, value, expected):
        assert parse_monetary(value) == expected

    def test_parse_monetary_rejects_infinity(self):
        assert parse_monetary(float("inf")) == 0.0

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("2.5R", 2.5),
            ("30%", 30.0),
            ("0", 0.0),
            (0.4, 0.4),
            ("-1.5", -1.5),
        ],
    )
    def test_parse_optional_number(self, value, expected):
        assert parse_optional_number(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", "-", "1.2.3"])
    def test_parse_optional_number_absent(self, value):
        """Absence stays distinguishable from zero."""
        assert parse_optional_number(value) is None

    @pytest.mark.parametrize("day,week", [(1, 1), (7, 1), (8, 2), (14, 2), (15, 3), (28, 4), (29, 5), (31, 5)])
    def test_week_of_month(self, day, week):
        assert week_of_month(day) == week


class TestLabels:
    """Tests for label normalization."""

    def test_strip_accents(self):
        assert strip_accents("MIÉRCOLES") == "MIERCOLES"

    def test_normalize_label(self):
        assert normalize_label("  Ejecución ") == "EJECUCION"
        assert normalize_label(None) == ""
