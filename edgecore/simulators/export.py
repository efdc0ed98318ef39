"""
CSV export of simulator runs.
"""

import csv
import io

from edgecore.simulators.flip_x5 import FlipConfig, SimulationResult
from edgecore.simulators.rotational import RotationalState, account_summaries, summarize

FLIP_TITLE = "EDGECORE X5 SIMULATOR - SIMULATION RESULTS"
ROTATIONAL_TITLE = "EDGECORE ROTATIONAL SIMULATOR - TRADE HISTORY"


def _money(value: float) -> str:
    return f"${value:.2f}"


def _percent(value: float) -> str:
    return f"{value:.2f}%"


def flip_result_to_csv(config: FlipConfig, result: SimulationResult) -> str:
    """
    Render a Flip X5 run as CSV text.

    Blocks: configuration, summary, traditional strategy, leveraged strategy,
    then the per-trade ledger.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow([FLIP_TITLE])
    writer.writerow([])

    writer.writerow(["=== CONFIGURATION ==="])
    writer.writerow(["Account Size", _money(config.account_size)])
    writer.writerow(["Cycle Size", f"{config.cycle_size} trades"])
    risk_label = "Risk per Trade" if config.use_fixed_dollars else "Risk per Cycle"
    writer.writerow([risk_label, _money(config.risk_per_cycle)])
    writer.writerow(["R:R Ratio", f"1:{config.rr_ratio:g}"])
    writer.writerow(["Reinvest", f"{config.reinvest_percent:g}%"])
    writer.writerow([])

    writer.writerow(["=== SUMMARY ==="])
    writer.writerow(["Total Trades", len(result.trades)])
    writer.writerow(["Total TP", result.total_tp])
    writer.writerow(["Total SL", result.total_sl])
    writer.writerow(["Win Rate", _percent(result.win_rate)])
    writer.writerow([])

    writer.writerow(["=== TRADITIONAL STRATEGY ==="])
    writer.writerow(["Final Balance", _money(result.final_balance_traditional)])
    writer.writerow(["Total Profit", _money(result.total_profit_traditional)])
    writer.writerow(["ROI", _percent(result.roi_traditional)])
    writer.writerow([])

    writer.writerow(["=== LEVERAGED STRATEGY ==="])
    writer.writerow(["Final Balance", _money(result.final_balance_leveraged)])
    writer.writerow(["Total Profit", _money(result.total_profit_leveraged)])
    writer.writerow(["ROI", _percent(result.roi_leveraged)])
    writer.writerow([])

    writer.writerow(["=== TRADES ==="])
    writer.writerow([
        "Trade", "Cycle", "Result",
        "Risk Trad.", "P&L Trad.", "Balance Trad.",
        "Risk Lev.", "P&L Lev.", "Balance Lev.",
    ])
    for row in result.trades:
        writer.writerow([
            row.trade_number,
            row.cycle,
            row.result.value,
            _money(row.risk_traditional),
            _money(row.pnl_traditional),
            _money(row.balance_traditional),
            _money(row.risk_leveraged),
            _money(row.pnl_leveraged),
            _money(row.balance_leveraged),
        ])

    return buffer.getvalue()


def rotational_history_to_csv(state: RotationalState) -> str:
    """Render a rotational run (accounts, summary and ledger) as CSV text."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    summary = summarize(state)

    writer.writerow([ROTATIONAL_TITLE])
    writer.writerow([])

    writer.writerow(["=== SUMMARY ==="])
    writer.writerow(["Accounts", state.config.number_of_accounts])
    writer.writerow(["Risk per Trade", _money(state.config.risk_per_trade)])
    writer.writerow(["R:R Ratio", f"1:{state.config.risk_reward_ratio:g}"])
    writer.writerow(["Initial Capital", _money(summary.total_initial)])
    writer.writerow(["Total Balance", _money(summary.total_balance)])
    writer.writerow(["Total P&L", _money(summary.total_pnl)])
    writer.writerow(["ROI", _percent(summary.roi)])
    writer.writerow(["Total TP", summary.total_tp])
    writer.writerow(["Total SL", summary.total_sl])
    writer.writerow(["Win Rate", _percent(summary.win_rate)])
    writer.writerow([])

    writer.writerow(["=== ACCOUNTS ==="])
    writer.writerow(["Account", "Initial", "Balance", "P&L", "Trades", "TP", "SL"])
    for account in account_summaries(state):
        writer.writerow([
            account.index + 1,
            _money(account.initial_balance),
            _money(account.balance),
            _money(account.pnl),
            account.trades,
            account.tp_count,
            account.sl_count,
        ])
    writer.writerow([])

    writer.writerow(["=== TRADES ==="])
    writer.writerow(["Trade", "Account", "Result", "Amount", "Balance Before", "Balance After"])
    for trade in state.trades:
        writer.writerow([
            trade.trade_number,
            trade.account_index + 1,
            trade.result.value,
            _money(trade.amount),
            _money(trade.balance_before),
            _money(trade.balance_after),
        ])

    return buffer.getvalue()
