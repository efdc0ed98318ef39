"""
Rotational multi-account simulator.

Accounts take turns strictly round-robin: each outcome is booked on the
account whose turn it is, whatever its balance. States are immutable values;
every transition returns a new state and the trade ledger doubles as the
undo stack.
"""

from dataclasses import dataclass
from functools import reduce
from typing import Any, Iterable, Sequence, Union
import math

from edgecore.config import settings
from edgecore.errors import ConfigValidationError
from edgecore.simulators.outcomes import Outcome


@dataclass(frozen=True)
class RotationalConfig:
    """Rotational simulator configuration."""

    number_of_accounts: int
    initial_balances: tuple[float, ...]
    risk_per_trade: float
    risk_reward_ratio: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "initial_balances", tuple(self.initial_balances))

    @classmethod
    def uniform(
        cls,
        number_of_accounts: int,
        capital_per_account: float,
        risk_per_trade: float,
        risk_reward_ratio: float = 1.0,
    ) -> "RotationalConfig":
        """Config where every account starts with the same capital."""
        return cls(
            number_of_accounts=number_of_accounts,
            initial_balances=(capital_per_account,) * max(number_of_accounts, 0),
            risk_per_trade=risk_per_trade,
            risk_reward_ratio=risk_reward_ratio,
        )

    @classmethod
    def from_settings(cls, **overrides: Any) -> "RotationalConfig":
        """Uniform config from the configured defaults, with overrides applied."""
        values = settings.rotational_defaults
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.uniform(
            number_of_accounts=values.get("number_of_accounts", 3),
            capital_per_account=values.get("capital_per_account", 1000.0),
            risk_per_trade=values.get("risk_per_trade", 100.0),
            risk_reward_ratio=values.get("risk_reward_ratio", 2.0),
        )

    def validate(self) -> None:
        """
        Reject configurations outside their domain.

        Raises:
            ConfigValidationError: On the first invalid field
        """
        n = self.number_of_accounts
        if isinstance(n, bool) or not isinstance(n, int) or n < 2:
            raise ConfigValidationError(
                "number_of_accounts must be an integer >= 2", field="number_of_accounts", value=n
            )
        if len(self.initial_balances) != n:
            raise ConfigValidationError(
                f"initial_balances must have {n} entries, got {len(self.initial_balances)}",
                field="initial_balances",
                value=list(self.initial_balances),
            )
        for balance in self.initial_balances:
            if not _is_finite(balance) or balance < 0:
                raise ConfigValidationError(
                    "initial balances must be >= 0", field="initial_balances", value=balance
                )
        for name in ("risk_per_trade", "risk_reward_ratio"):
            value = getattr(self, name)
            if not _is_finite(value) or value <= 0:
                raise ConfigValidationError(f"{name} must be greater than 0", field=name, value=value)


@dataclass(frozen=True)
class RotationalTrade:
    """Ledger entry for one booked outcome."""

    trade_number: int
    result: Outcome
    account_index: int
    amount: float
    balance_before: float
    balance_after: float


@dataclass(frozen=True)
class RotationalState:
    """Balances, next turn and ledger. Counters are derived from the ledger."""

    config: RotationalConfig
    accounts: tuple[float, ...]
    current_turn_index: int
    trades: tuple[RotationalTrade, ...] = ()

    @property
    def total_balance(self) -> float:
        return sum(self.accounts)

    @property
    def total_tp(self) -> int:
        return sum(1 for t in self.trades if t.result == Outcome.TP)

    @property
    def total_sl(self) -> int:
        return sum(1 for t in self.trades if t.result == Outcome.SL)

    @property
    def win_rate(self) -> float:
        """Percent of booked trades that hit TP (0 with an empty ledger)."""
        if not self.trades:
            return 0.0
        return self.total_tp / len(self.trades) * 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "accounts": list(self.accounts),
            "current_turn_index": self.current_turn_index,
            "total_balance": self.total_balance,
            "total_tp": self.total_tp,
            "total_sl": self.total_sl,
            "win_rate": self.win_rate,
            "trades": [
                {
                    "trade_number": t.trade_number,
                    "result": t.result.value,
                    "account_index": t.account_index,
                    "amount": t.amount,
                    "balance_before": t.balance_before,
                    "balance_after": t.balance_after,
                }
                for t in self.trades
            ],
        }


@dataclass(frozen=True)
class AccountSummary:
    """Per-account view of a rotational run."""

    index: int
    initial_balance: float
    balance: float
    pnl: float
    trades: int
    tp_count: int
    sl_count: int


@dataclass(frozen=True)
class RotationalSummary:
    """Portfolio-level view of a rotational run."""

    total_initial: float
    total_balance: float
    total_pnl: float
    roi: float  # percent, 0 when no initial capital
    total_trades: int
    total_tp: int
    total_sl: int
    win_rate: float


def _is_finite(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def initialize(config: RotationalConfig) -> RotationalState:
    """
    Starting state: balances copied from the config, turn 0, empty ledger.

    Raises:
        ConfigValidationError: If the configuration is invalid
    """
    config.validate()
    return RotationalState(
        config=config,
        accounts=tuple(config.initial_balances),
        current_turn_index=0,
    )


def apply_trade(state: RotationalState, outcome: Union[Outcome, str]) -> RotationalState:
    """Book one outcome on the account whose turn it is and advance the turn."""
    result = Outcome.coerce(outcome)
    config = state.config

    if result == Outcome.TP:
        amount = config.risk_per_trade * config.risk_reward_ratio
    else:
        amount = -config.risk_per_trade

    index = state.current_turn_index
    before = state.accounts[index]
    after = before + amount

    accounts = list(state.accounts)
    accounts[index] = after

    entry = RotationalTrade(
        trade_number=len(state.trades) + 1,
        result=result,
        account_index=index,
        amount=amount,
        balance_before=before,
        balance_after=after,
    )
    return RotationalState(
        config=config,
        accounts=tuple(accounts),
        current_turn_index=(index + 1) % len(accounts),
        trades=state.trades + (entry,),
    )


def undo_last(state: RotationalState) -> RotationalState:
    """
    Revert the most recent trade.

    The acting account gets its recorded balance back and regains the turn.
    An empty ledger returns the state unchanged.
    """
    if not state.trades:
        return state

    last = state.trades[-1]
    accounts = list(state.accounts)
    accounts[last.account_index] = last.balance_before

    return RotationalState(
        config=state.config,
        accounts=tuple(accounts),
        current_turn_index=last.account_index,
        trades=state.trades[:-1],
    )


def apply_batch(state: RotationalState, outcomes: Iterable[Union[Outcome, str]]) -> RotationalState:
    """Left fold of apply_trade over the outcomes."""
    return reduce(apply_trade, outcomes, state)


def account_summaries(state: RotationalState) -> list[AccountSummary]:
    """Per-account balances and trade counts."""
    summaries = []
    for index, balance in enumerate(state.accounts):
        booked = [t for t in state.trades if t.account_index == index]
        initial = state.config.initial_balances[index]
        summaries.append(
            AccountSummary(
                index=index,
                initial_balance=initial,
                balance=balance,
                pnl=balance - initial,
                trades=len(booked),
                tp_count=sum(1 for t in booked if t.result == Outcome.TP),
                sl_count=sum(1 for t in booked if t.result == Outcome.SL),
            )
        )
    return summaries


def summarize(state: RotationalState) -> RotationalSummary:
    total_initial = sum(state.config.initial_balances)
    total_pnl = state.total_balance - total_initial
    return RotationalSummary(
        total_initial=total_initial,
        total_balance=state.total_balance,
        total_pnl=total_pnl,
        roi=(total_pnl / total_initial * 100) if total_initial > 0 else 0.0,
        total_trades=len(state.trades),
        total_tp=state.total_tp,
        total_sl=state.total_sl,
        win_rate=state.win_rate,
    )


def replay(config: RotationalConfig, outcomes: Sequence[Union[Outcome, str]]) -> RotationalState:
    """Initialize from config and apply the whole sequence."""
    return apply_batch(initialize(config), outcomes)
