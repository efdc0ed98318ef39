"""Tests for outcome parsing and journal outcome selection."""

from datetime import date

import pytest

from edgecore.simulators.outcomes import Outcome, parse_outcomes, select_outcomes


class TestOutcome:
    """Tests for Outcome parsing."""

    def test_coerce(self):
        assert Outcome.coerce("tp") is Outcome.TP
        assert Outcome.coerce(" SL ") is Outcome.SL
        assert Outcome.coerce(Outcome.TP) is Outcome.TP

    @pytest.mark.parametrize("value", ["BE", "", 1, None])
    def test_coerce_rejects(self, value):
        with pytest.raises(ValueError):
            Outcome.coerce(value)

    def test_parse_outcomes(self):
        assert parse_outcomes("TP,tp, SL  sl") == [Outcome.TP, Outcome.TP, Outcome.SL, Outcome.SL]
        assert parse_outcomes("") == []

    def test_parse_outcomes_invalid_token(self):
        with pytest.raises(ValueError):
            parse_outcomes("TP,XX")


class TestSelectOutcomes:
    """Tests for select_outcomes."""

    def test_skips_no_trade_days(self, sample_trades):
        assert select_outcomes(sample_trades) == [Outcome.TP, Outcome.SL, Outcome.TP, Outcome.SL]

    def test_ordered_by_date(self, sample_trades):
        assert select_outcomes(list(reversed(sample_trades))) == select_outcomes(sample_trades)

    def test_filters(self, sample_trades):
        assert select_outcomes(sample_trades, entry_model="M1") == [Outcome.TP, Outcome.TP]
        assert select_outcomes(sample_trades, result_type="SL") == [Outcome.SL, Outcome.SL]
        assert select_outcomes(sample_trades, date_from="2024-04-01") == [Outcome.SL]
        assert select_outcomes(sample_trades, date_to=date(2024, 3, 6)) == [Outcome.TP, Outcome.SL]

    def test_limit(self, sample_trades):
        assert select_outcomes(sample_trades, limit=2) == [Outcome.TP, Outcome.SL]

    def test_break_even_is_excluded(self, sample_trades):
        sample_trades[0].result_type = "BE"
        assert select_outcomes(sample_trades) == [Outcome.SL, Outcome.TP, Outcome.SL]
