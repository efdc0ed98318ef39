"""
Descriptive journal analytics.

Computes:
- Win rate, average win/loss and expected value
- Profit factor and streaks
- Breakdowns by entry model, weekday, week of month and news
- Monthly and yearly results
- Equity curves (single account and all accounts)

No-trade-day placeholders are excluded everywhere.
"""

from collections import defaultdict
from dataclasses import asdict, dataclass
from typing import Any, Iterable, Mapping, Optional
import logging
import math

import numpy as np

from edgecore.journal.models import DayOfWeek, EntryModel, Trade

logger = logging.getLogger(__name__)

MIN_YEAR = 2020
WEEKS_OF_MONTH = (1, 2, 3, 4, 5)


@dataclass
class BucketStats:
    """Statistics for one group of trades."""

    label: str
    trades: int
    wins: int
    pnl: float
    win_rate: float  # percent


@dataclass
class PeriodStats:
    """Results for a month or a year."""

    trades: int = 0
    wins: int = 0
    pnl: float = 0.0

    @property
    def win_rate(self) -> float:
        return self.wins / self.trades * 100 if self.trades else 0.0


@dataclass
class JournalStats:
    """Overall journal statistics."""

    # Basic counts
    total_trades: int
    win_count: int
    loss_count: int
    breakeven_count: int
    win_rate: float  # percent

    # P&L metrics
    total_pnl: float
    avg_win: float
    avg_loss: float  # absolute value
    expected_value: float
    profit_factor: float
    largest_win: float
    largest_loss: float

    # Streak analysis
    max_win_streak: int
    max_loss_streak: int

    # Trade quality
    avg_duration_minutes: float
    avg_drawdown_tp: float
    avg_max_rr: float

    def to_dict(self) -> dict[str, Any]:
        """Plain dict with non-finite values (profit factor without losses) as None."""
        return {
            k: (None if isinstance(v, float) and not math.isfinite(v) else v)
            for k, v in asdict(self).items()
        }


@dataclass
class EquityPoint:
    """One point of a single-account equity curve."""

    trade: int
    date: str
    equity: float


@dataclass
class MultiAccountPoint:
    """One date of the all-accounts equity curve."""

    trade: int
    date: str
    balances: dict[str, float]
    total: float


def actual_trades(trades: Iterable[Trade]) -> list[Trade]:
    """Drop no-trade-day placeholders."""
    return [t for t in trades if not t.no_trade_day]


def _chronological(trades: Iterable[Trade]) -> list[Trade]:
    return sorted(trades, key=lambda t: (t.date, t.entry_time or ""))


def _mean(values: list[float]) -> float:
    return float(np.mean(values)) if values else 0.0


def compute_profit_factor(trades: list[Trade]) -> float:
    """
    Compute profit factor.

    Profit Factor = Gross Profit / Gross Loss

    Returns:
        Profit factor (> 1 is profitable), inf when there are wins but no losses
    """
    gross_profit = sum(t.result_amount for t in trades if t.result_amount > 0)
    gross_loss = abs(sum(t.result_amount for t in trades if t.result_amount < 0))

    if gross_loss == 0:
        return float("inf") if gross_profit > 0 else 0.0

    return round(gross_profit / gross_loss, 2)


def compute_streaks(trades: list[Trade]) -> tuple[int, int]:
    """Longest TP and SL streaks in chronological order. Break-even trades are ignored."""
    max_win_streak = 0
    max_loss_streak = 0
    win_streak = 0
    loss_streak = 0

    for trade in _chronological(trades):
        if trade.is_winner:
            win_streak += 1
            loss_streak = 0
            max_win_streak = max(max_win_streak, win_streak)
        elif trade.is_loser:
            loss_streak += 1
            win_streak = 0
            max_loss_streak = max(max_loss_streak, loss_streak)

    return max_win_streak, max_loss_streak


def journal_stats(trades: Iterable[Trade]) -> JournalStats:
    """
    Compute overall statistics.

    Win rate is TP trades over all real trades (break-even trades count in the
    denominator). Expected value = avg_win * wr - avg_loss * (1 - wr).

    Args:
        trades: Journal trades (placeholders are ignored)

    Returns:
        JournalStats
    """
    real = actual_trades(trades)
    winners = [t for t in real if t.is_winner]
    losers = [t for t in real if t.is_loser]

    total = len(real)
    win_rate = len(winners) / total if total else 0.0

    avg_win = _mean([t.result_amount for t in winners])
    avg_loss = abs(_mean([t.result_amount for t in losers]))
    expected_value = avg_win * win_rate - avg_loss * (1 - win_rate)

    durations = [t.duration_minutes for t in real if t.duration_minutes is not None]
    drawdowns = [t.drawdown for t in winners if t.drawdown is not None]
    max_rrs = [t.max_rr for t in real if t.max_rr is not None]
    pnls = [t.result_amount for t in real]

    max_win_streak, max_loss_streak = compute_streaks(real)

    return JournalStats(
        total_trades=total,
        win_count=len(winners),
        loss_count=len(losers),
        breakeven_count=total - len(winners) - len(losers),
        win_rate=round(win_rate * 100, 2),
        total_pnl=round(sum(pnls), 2),
        avg_win=round(avg_win, 2),
        avg_loss=round(avg_loss, 2),
        expected_value=round(expected_value, 2),
        profit_factor=compute_profit_factor(real),
        largest_win=max(pnls) if pnls and max(pnls) > 0 else 0.0,
        largest_loss=min(pnls) if pnls and min(pnls) < 0 else 0.0,
        max_win_streak=max_win_streak,
        max_loss_streak=max_loss_streak,
        avg_duration_minutes=round(_mean(durations), 1),
        avg_drawdown_tp=round(_mean(drawdowns), 4),
        avg_max_rr=round(_mean(max_rrs), 2),
    )


def _bucket(label: str, trades: list[Trade]) -> BucketStats:
    wins = sum(1 for t in trades if t.is_winner)
    return BucketStats(
        label=label,
        trades=len(trades),
        wins=wins,
        pnl=round(sum(t.result_amount for t in trades), 2),
        win_rate=round(wins / len(trades) * 100, 2) if trades else 0.0,
    )


def breakdown_by_model(trades: Iterable[Trade]) -> list[BucketStats]:
    """Stats per recognized entry model (M1, M3, Continuation)."""
    real = actual_trades(trades)
    return [_bucket(model, [t for t in real if t.entry_model == model]) for model in EntryModel.ALL]


def breakdown_by_day(trades: Iterable[Trade]) -> list[BucketStats]:
    """Stats per weekday, Monday to Friday."""
    real = actual_trades(trades)
    return [_bucket(day.value, [t for t in real if t.day_of_week == day.value]) for day in DayOfWeek]


def breakdown_by_week(trades: Iterable[Trade]) -> list[BucketStats]:
    """Stats per week of month, 1 to 5."""
    real = actual_trades(trades)
    return [_bucket(str(week), [t for t in real if t.week_of_month == week]) for week in WEEKS_OF_MONTH]


def news_stats(trades: Iterable[Trade]) -> BucketStats:
    """Stats for trades taken on news days."""
    return _bucket("news", [t for t in actual_trades(trades) if t.had_news])


def best_bucket(buckets: list[BucketStats]) -> Optional[BucketStats]:
    """Bucket with the highest P&L among those with trades."""
    traded = [b for b in buckets if b.trades]
    if not traded:
        return None
    return max(traded, key=lambda b: b.pnl)


def monthly_results(trades: Iterable[Trade], min_year: int = MIN_YEAR) -> dict[int, dict[int, PeriodStats]]:
    """
    Results per year and month (1-12), most recent year first.

    Years before min_year are ignored.
    """
    data: dict[int, dict[int, PeriodStats]] = defaultdict(dict)
    for trade in actual_trades(trades):
        year, month = int(trade.date[:4]), int(trade.date[5:7])
        if year < min_year:
            continue
        stats = data[year].setdefault(month, PeriodStats())
        stats.trades += 1
        stats.wins += 1 if trade.is_winner else 0
        stats.pnl += trade.result_amount

    return {year: dict(sorted(data[year].items())) for year in sorted(data, reverse=True)}


def yearly_totals(monthly: Mapping[int, Mapping[int, PeriodStats]]) -> dict[int, PeriodStats]:
    """Sum monthly results into one PeriodStats per year."""
    totals = {}
    for year, months in monthly.items():
        total = PeriodStats()
        for stats in months.values():
            total.trades += stats.trades
            total.wins += stats.wins
            total.pnl += stats.pnl
        totals[year] = total
    return totals


def equity_curve(trades: Iterable[Trade], initial_balance: float = 0.0) -> list[EquityPoint]:
    """Cumulative equity after each trade, in chronological order."""
    points = []
    equity = initial_balance
    for index, trade in enumerate(_chronological(actual_trades(trades)), start=1):
        equity += trade.result_amount
        points.append(EquityPoint(trade=index, date=trade.date, equity=round(equity, 2)))
    return points


def multi_account_equity(
    trades: Iterable[Trade],
    accounts: Mapping[str, float],
) -> list[MultiAccountPoint]:
    """
    All-accounts equity curve, one point per trading date.

    Each account starts at its initial balance and accumulates its own trades.
    The total is the sum of the account balances plus the P&L of trades that
    belong to no known account.

    Args:
        trades: Journal trades
        accounts: Account id -> initial balance
    """
    by_date: dict[str, list[Trade]] = defaultdict(list)
    for trade in actual_trades(trades):
        by_date[trade.date].append(trade)

    balances = {account_id: float(initial) for account_id, initial in accounts.items()}
    unassigned = 0.0

    points = []
    for index, day in enumerate(sorted(by_date), start=1):
        for trade in by_date[day]:
            if trade.account_id in balances:
                balances[trade.account_id] += trade.result_amount
            else:
                unassigned += trade.result_amount

        points.append(
            MultiAccountPoint(
                trade=index,
                date=day,
                balances={k: round(v, 2) for k, v in balances.items()},
                total=round(sum(balances.values()) + unassigned, 2),
            )
        )

    logger.debug(f"Equity curve: {len(points)} dates across {len(balances)} accounts")
    return points
