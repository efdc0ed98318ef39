"""Tests for the rotational multi-account simulator."""

import pytest

from edgecore.errors import ConfigValidationError
from edgecore.simulators.outcomes import Outcome
from edgecore.simulators.rotational import (
    RotationalConfig,
    account_summaries,
    apply_batch,
    apply_trade,
    initialize,
    replay,
    summarize,
    undo_last,
)

TP, SL = Outcome.TP, Outcome.SL


@pytest.fixture
def config():
    return RotationalConfig(
        number_of_accounts=3,
        initial_balances=(100.0, 100.0, 100.0),
        risk_per_trade=10.0,
        risk_reward_ratio=1.0,
    )


class TestApplyTrade:
    """Tests for initialize and apply_trade."""

    def test_initial_state(self, config):
        state = initialize(config)

        assert state.accounts == (100.0, 100.0, 100.0)
        assert state.current_turn_index == 0
        assert state.trades == ()
        assert state.win_rate == 0.0

    def test_reference_scenario(self, config):
        state = replay(config, [TP, SL, TP])

        assert state.accounts == (110.0, 90.0, 110.0)
        assert state.current_turn_index == 0
        assert state.total_tp == 2
        assert state.total_sl == 1
        assert state.total_balance == 310.0
        assert state.win_rate == pytest.approx(66.6667, rel=1e-4)

    def test_ledger_entry(self, config):
        state = apply_trade(initialize(config), TP)

        entry = state.trades[0]
        assert entry.trade_number == 1
        assert entry.account_index == 0
        assert entry.amount == 10.0
        assert entry.balance_before == 100.0
        assert entry.balance_after == 110.0

    def test_reward_ratio_scales_wins_only(self):
        config = RotationalConfig.uniform(2, 1000.0, 100.0, risk_reward_ratio=2.5)

        state = replay(config, [TP, SL])

        assert state.accounts == (1250.0, 900.0)

    def test_round_robin(self, config):
        state = replay(config, [TP] * 7)

        assert [t.account_index for t in state.trades] == [0, 1, 2, 0, 1, 2, 0]
        assert state.current_turn_index == 1

    def test_negative_balance_keeps_its_turn(self):
        config = RotationalConfig(2, (5.0, 100.0), risk_per_trade=10.0)

        state = replay(config, [SL, SL, SL])

        assert state.accounts == (-15.0, 90.0)
        assert [t.account_index for t in state.trades] == [0, 1, 0]

    def test_states_are_immutable(self, config):
        start = initialize(config)
        after = apply_trade(start, TP)

        assert start.accounts == (100.0, 100.0, 100.0)
        assert start.trades == ()
        assert after is not start

    def test_invalid_outcome(self, config):
        with pytest.raises(ValueError):
            apply_trade(initialize(config), "BE")


class TestUndo:
    """Tests for undo_last."""

    def test_undo_is_inverse_of_apply(self, config):
        state = replay(config, [TP, SL])

        for outcome in (TP, SL):
            assert undo_last(apply_trade(state, outcome)) == state

    def test_undo_restores_turn(self, config):
        state = undo_last(replay(config, [TP, SL, TP]))

        assert state.current_turn_index == 2
        assert state.accounts == (110.0, 90.0, 100.0)
        assert len(state.trades) == 2

    def test_undo_to_start(self, config):
        state = replay(config, [TP, SL, TP, TP])
        for _ in range(4):
            state = undo_last(state)
        assert state == initialize(config)

    def test_undo_empty_is_noop(self, config):
        state = initialize(config)
        assert undo_last(state) is state


class TestBatch:
    """Tests for apply_batch."""

    def test_batch_equals_fold(self, config):
        outcomes = [TP, SL, SL, TP, TP, SL, TP]

        state = initialize(config)
        for outcome in outcomes:
            state = apply_trade(state, outcome)

        assert apply_batch(initialize(config), outcomes) == state

    def test_empty_batch(self, config):
        state = initialize(config)
        assert apply_batch(state, []) == state

    def test_batch_accepts_strings(self, config):
        state = apply_batch(initialize(config), ["tp", "sl"])
        assert [t.result for t in state.trades] == [TP, SL]


class TestSummaries:
    """Tests for account_summaries and summarize."""

    def test_account_summaries(self, config):
        summaries = account_summaries(replay(config, [TP, SL, TP, SL]))

        first = summaries[0]
        assert (first.trades, first.tp_count, first.sl_count) == (2, 1, 1)
        assert first.pnl == 0.0
        assert summaries[1].pnl == -10.0
        assert summaries[2].pnl == 10.0

    def test_summarize(self, config):
        summary = summarize(replay(config, [TP, SL, TP]))

        assert summary.total_initial == 300.0
        assert summary.total_pnl == 10.0
        assert summary.roi == pytest.approx(10.0 / 3)
        assert summary.total_trades == 3

    def test_zero_capital_roi(self):
        config = RotationalConfig.uniform(2, 0.0, 10.0)
        assert summarize(replay(config, [TP])).roi == 0.0

    def test_to_dict(self, config):
        data = replay(config, [TP]).to_dict()

        assert data["accounts"] == [110.0, 100.0, 100.0]
        assert data["current_turn_index"] == 1
        assert data["trades"][0]["result"] == "TP"


class TestValidation:
    """Tests for RotationalConfig.validate."""

    @pytest.mark.parametrize(
        "kwargs,field",
        [
            ({"number_of_accounts": 1, "initial_balances": (100.0,)}, "number_of_accounts"),
            ({"number_of_accounts": 3, "initial_balances": (100.0, 100.0)}, "initial_balances"),
            ({"number_of_accounts": 2, "initial_balances": (100.0, -1.0)}, "initial_balances"),
            ({"number_of_accounts": 2, "initial_balances": (100.0, 100.0), "risk_per_trade": 0}, "risk_per_trade"),
            (
                {"number_of_accounts": 2, "initial_balances": (100.0, 100.0), "risk_reward_ratio": -2},
                "risk_reward_ratio",
            ),
        ],
    )
    def test_rejected(self, kwargs, field):
        kwargs.setdefault("risk_per_trade", 10.0)

        with pytest.raises(ConfigValidationError) as exc_info:
            initialize(RotationalConfig(**kwargs))

        assert exc_info.value.field == field

    def test_uniform(self):
        config = RotationalConfig.uniform(4, 250.0, 25.0)

        assert config.initial_balances == (250.0, 250.0, 250.0, 250.0)
        assert config.risk_reward_ratio == 1.0
        config.validate()

    def test_balances_list_is_frozen_to_tuple(self):
        config = RotationalConfig(2, [10.0, 20.0], risk_per_trade=1.0)
        assert config.initial_balances == (10.0, 20.0)
