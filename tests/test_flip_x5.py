"""Tests for the Flip X5 simulator."""

import math

import pytest

from edgecore.errors import ConfigValidationError
from edgecore.simulators.flip_x5 import FlipConfig, simulate
from edgecore.simulators.outcomes import Outcome

TP, SL = Outcome.TP, Outcome.SL


class TestSimulate:
    """Tests for simulate with the default configuration."""

    def test_reference_scenario(self):
        result = simulate(FlipConfig(), [TP, TP, SL, TP])

        assert [r.cycle for r in result.trades] == [1, 1, 2, 2]
        assert [r.risk_traditional for r in result.trades] == [100.0] * 4
        assert [r.risk_leveraged for r in result.trades] == [100.0, 100.0, 420.0, 420.0]
        assert [r.pnl_leveraged for r in result.trades] == [200.0, 200.0, -420.0, 840.0]
        assert result.final_balance_traditional == pytest.approx(1500.0)
        assert result.final_balance_leveraged == pytest.approx(1820.0)
        assert result.total_profit_traditional == pytest.approx(500.0)
        assert result.total_profit_leveraged == pytest.approx(820.0)
        assert result.roi_traditional == pytest.approx(50.0)
        assert result.roi_leveraged == pytest.approx(82.0)
        assert result.total_tp == 3
        assert result.total_sl == 1
        assert result.win_rate == pytest.approx(75.0)

    def test_cycle_summaries(self):
        result = simulate(FlipConfig(), [TP, TP, SL, TP])

        assert [(c.cycle, c.tp_count, c.sl_count) for c in result.cycles] == [(1, 2, 0), (2, 1, 1)]
        assert result.cycles[0].profit_leveraged == pytest.approx(400.0)
        assert result.cycles[1].profit_leveraged == pytest.approx(420.0)

    def test_no_boost_after_losing_cycle(self):
        result = simulate(FlipConfig(), [SL, SL, TP, TP])

        assert [r.risk_leveraged for r in result.trades] == [100.0] * 4
        assert result.final_balance_leveraged == result.final_balance_traditional

    def test_boost_resets_after_losing_cycle(self):
        result = simulate(FlipConfig(), [TP, TP, SL, SL, TP, TP])

        assert [r.risk_leveraged for r in result.trades] == [100.0, 100.0, 420.0, 420.0, 100.0, 100.0]

    def test_boost_uses_previous_cycle_only(self):
        result = simulate(FlipConfig(), [TP, TP, TP, TP, TP, TP])

        # cycle 2 profit: 2 * 420 * 2 = 1680 -> cycle 3 risk 100 + 1680 * 0.8
        assert [r.risk_leveraged for r in result.trades[4:]] == pytest.approx([1444.0, 1444.0])

    def test_short_last_cycle(self):
        result = simulate(FlipConfig(), [TP, TP, TP])

        assert len(result.trades) == 3
        assert len(result.cycles) == 2
        assert result.cycles[1].tp_count == 1
        assert result.trades[2].cycle == 2
        assert result.trades[2].risk_leveraged == 420.0

    def test_trade_numbers_are_sequential(self):
        result = simulate(FlipConfig(cycle_size=3), [TP, SL, TP, SL, SL])
        assert [r.trade_number for r in result.trades] == [1, 2, 3, 4, 5]
        assert [r.cycle for r in result.trades] == [1, 1, 1, 2, 2]

    def test_balances_equal_account_plus_pnl(self):
        outcomes = [TP, SL, SL, TP, TP, TP, SL, TP, SL]
        config = FlipConfig(cycle_size=3, reinvest_percent=50)

        result = simulate(config, outcomes)

        assert result.final_balance_traditional == pytest.approx(
            config.account_size + sum(r.pnl_traditional for r in result.trades)
        )
        assert result.final_balance_leveraged == pytest.approx(
            config.account_size + sum(r.pnl_leveraged for r in result.trades)
        )
        assert result.trades[-1].balance_leveraged == pytest.approx(result.final_balance_leveraged)

    def test_deterministic(self):
        outcomes = [TP, SL, TP, TP, SL]
        assert simulate(FlipConfig(), outcomes) == simulate(FlipConfig(), outcomes)

    def test_empty_sequence(self):
        result = simulate(FlipConfig(), [])

        assert result.trades == ()
        assert result.cycles == ()
        assert result.final_balance_traditional == 1000.0
        assert result.final_balance_leveraged == 1000.0
        assert result.win_rate == 0.0

    def test_string_outcomes_are_accepted(self):
        result = simulate(FlipConfig(), ["tp", " SL "])
        assert [r.result for r in result.trades] == [TP, SL]

    def test_invalid_outcome(self):
        with pytest.raises(ValueError):
            simulate(FlipConfig(), [TP, "BE"])

    def test_zero_reinvest_matches_traditional(self):
        result = simulate(FlipConfig(reinvest_percent=0), [TP, TP, TP, SL])
        assert result.final_balance_leveraged == result.final_balance_traditional


class TestFixedDollars:
    """Tests for use_fixed_dollars."""

    def test_risk_per_cycle_is_per_trade_risk(self):
        config = FlipConfig(use_fixed_dollars=True)

        result = simulate(config, [TP, TP, SL])

        assert config.base_risk == 200.0
        assert [r.risk_traditional for r in result.trades] == [200.0] * 3
        # cycle 1 profit 800 -> 200 + 640
        assert result.trades[2].risk_leveraged == pytest.approx(840.0)


class TestValidation:
    """Tests for FlipConfig.validate."""

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"account_size": 0}, "account_size"),
            ({"account_size": -10}, "account_size"),
            ({"risk_per_cycle": 0}, "risk_per_cycle"),
            ({"rr_ratio": -1}, "rr_ratio"),
            ({"rr_ratio": math.nan}, "rr_ratio"),
            ({"account_size": math.inf}, "account_size"),
            ({"cycle_size": 0}, "cycle_size"),
            ({"cycle_size": 1.5}, "cycle_size"),
            ({"reinvest_percent": 101}, "reinvest_percent"),
            ({"reinvest_percent": -1}, "reinvest_percent"),
        ],
    )
    def test_rejected(self, overrides, field):
        with pytest.raises(ConfigValidationError) as exc_info:
            simulate(FlipConfig(**overrides), [TP])
        assert exc_info.value.field == field

    def test_validation_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            FlipConfig(cycle_size=0).validate()

    def test_boundaries_accepted(self):
        FlipConfig(reinvest_percent=0).validate()
        FlipConfig(reinvest_percent=100, cycle_size=1).validate()

    def test_from_settings_applies_overrides(self):
        config = FlipConfig.from_settings(cycle_size=5, rr_ratio=None)
        assert config.cycle_size == 5
        assert config.rr_ratio == 2.0
