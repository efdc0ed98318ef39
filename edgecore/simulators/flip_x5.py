"""
Flip X5 simulator.

Replays a TP/SL sequence in fixed-size cycles and compares two strategies:
- Traditional: every trade risks the same base amount
- Leveraged: after a cycle that closed with a positive leveraged profit, every
  trade of the next cycle adds a share of that profit to its risk

The simulation is a pure function of (config, outcomes).
"""

from dataclasses import dataclass
from typing import Any, Iterable, Union
import math

from edgecore.config import settings
from edgecore.errors import ConfigValidationError
from edgecore.simulators.outcomes import Outcome


@dataclass(frozen=True)
class FlipConfig:
    """Flip X5 configuration."""

    account_size: float = 1000.0
    cycle_size: int = 2
    risk_per_cycle: float = 200.0
    rr_ratio: float = 2.0
    reinvest_percent: float = 80.0
    use_fixed_dollars: bool = False  # risk_per_cycle is the per-trade risk

    @classmethod
    def from_settings(cls, **overrides: Any) -> "FlipConfig":
        """Build a config from the configured defaults, with overrides applied."""
        values = settings.flip_defaults
        values.update({k: v for k, v in overrides.items() if v is not None})
        known = cls.__dataclass_fields__.keys()
        return cls(**{k: v for k, v in values.items() if k in known})

    @property
    def base_risk(self) -> float:
        """Per-trade risk before any reinvestment."""
        if self.use_fixed_dollars:
            return self.risk_per_cycle
        return self.risk_per_cycle / self.cycle_size

    def validate(self) -> None:
        """
        Reject configurations outside their domain.

        Raises:
            ConfigValidationError: On the first invalid field
        """
        for name in ("account_size", "risk_per_cycle", "rr_ratio"):
            value = getattr(self, name)
            if not _is_finite(value) or value <= 0:
                raise ConfigValidationError(f"{name} must be greater than 0", field=name, value=value)

        if isinstance(self.cycle_size, bool) or not isinstance(self.cycle_size, int) or self.cycle_size <= 0:
            raise ConfigValidationError(
                "cycle_size must be a positive integer", field="cycle_size", value=self.cycle_size
            )

        if not _is_finite(self.reinvest_percent) or not 0 <= self.reinvest_percent <= 100:
            raise ConfigValidationError(
                "reinvest_percent must be between 0 and 100",
                field="reinvest_percent",
                value=self.reinvest_percent,
            )


@dataclass(frozen=True)
class FlipTradeRow:
    """One simulated trade, both strategies side by side."""

    trade_number: int
    cycle: int
    result: Outcome
    risk_traditional: float
    pnl_traditional: float
    balance_traditional: float
    risk_leveraged: float
    pnl_leveraged: float
    balance_leveraged: float


@dataclass(frozen=True)
class CycleSummary:
    """Per-cycle tally of the leveraged strategy."""

    cycle: int
    tp_count: int
    sl_count: int
    profit_leveraged: float


@dataclass(frozen=True)
class SimulationResult:
    """Full ledger and aggregates of a Flip X5 run."""

    trades: tuple[FlipTradeRow, ...]
    cycles: tuple[CycleSummary, ...]
    final_balance_traditional: float
    final_balance_leveraged: float
    total_profit_traditional: float
    total_profit_leveraged: float
    roi_traditional: float
    roi_leveraged: float
    total_tp: int
    total_sl: int
    win_rate: float  # percent


def _is_finite(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _pnl(outcome: Outcome, risk: float, rr_ratio: float) -> float:
    return risk * rr_ratio if outcome == Outcome.TP else -risk


def simulate(config: FlipConfig, outcomes: Iterable[Union[Outcome, str]]) -> SimulationResult:
    """
    Run the Flip X5 simulation.

    Args:
        config: Simulator configuration (validated before any step)
        outcomes: Ordered TP/SL sequence; the last cycle may be short

    Returns:
        SimulationResult with one row per outcome and one summary per cycle

    Raises:
        ConfigValidationError: If the configuration is invalid
    """
    config.validate()
    results = [Outcome.coerce(o) for o in outcomes]

    base_risk = config.base_risk
    balance_traditional = config.account_size
    balance_leveraged = config.account_size

    rows: list[FlipTradeRow] = []
    cycles: list[CycleSummary] = []
    previous_cycle_profit = 0.0

    for start in range(0, len(results), config.cycle_size):
        cycle = start // config.cycle_size + 1

        risk_leveraged = base_risk
        if cycle >= 2 and previous_cycle_profit > 0:
            risk_leveraged = base_risk + previous_cycle_profit * config.reinvest_percent / 100

        cycle_profit = 0.0
        tp_count = 0
        sl_count = 0

        for offset, outcome in enumerate(results[start:start + config.cycle_size]):
            pnl_traditional = _pnl(outcome, base_risk, config.rr_ratio)
            pnl_leveraged = _pnl(outcome, risk_leveraged, config.rr_ratio)
            balance_traditional += pnl_traditional
            balance_leveraged += pnl_leveraged
            cycle_profit += pnl_leveraged

            if outcome == Outcome.TP:
                tp_count += 1
            else:
                sl_count += 1

            rows.append(
                FlipTradeRow(
                    trade_number=start + offset + 1,
                    cycle=cycle,
                    result=outcome,
                    risk_traditional=base_risk,
                    pnl_traditional=pnl_traditional,
                    balance_traditional=balance_traditional,
                    risk_leveraged=risk_leveraged,
                    pnl_leveraged=pnl_leveraged,
                    balance_leveraged=balance_leveraged,
                )
            )

        cycles.append(CycleSummary(cycle, tp_count, sl_count, cycle_profit))
        previous_cycle_profit = cycle_profit

    total_tp = sum(1 for r in results if r == Outcome.TP)
    total_sl = len(results) - total_tp
    profit_traditional = balance_traditional - config.account_size
    profit_leveraged = balance_leveraged - config.account_size

    return SimulationResult(
        trades=tuple(rows),
        cycles=tuple(cycles),
        final_balance_traditional=balance_traditional,
        final_balance_leveraged=balance_leveraged,
        total_profit_traditional=profit_traditional,
        total_profit_leveraged=profit_leveraged,
        roi_traditional=profit_traditional / config.account_size * 100,
        roi_leveraged=profit_leveraged / config.account_size * 100,
        total_tp=total_tp,
        total_sl=total_sl,
        win_rate=(total_tp / len(results) * 100) if results else 0.0,
    )
