"""
EdgeCore Journal CLI Application.

Command-line interface for the trading journal and simulators.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from edgecore.config import CONFIG_FILE, get_default_config, get_default_owner_id, load_config, save_config, settings
from edgecore.db.models import init_db
from edgecore.errors import EdgecoreError
from edgecore.logging_utils import configure_logging

# Initialize CLI app
app = typer.Typer(
    name="edgecore",
    help="EdgeCore Journal - trade journal with spreadsheet import and what-if simulators",
    add_completion=False,
)

# Sub-command groups
trade_app = typer.Typer(help="Trade journal commands")
account_app = typer.Typer(help="Account commands")
stats_app = typer.Typer(help="Statistics and analytics commands")
sim_app = typer.Typer(help="Flip X5 and rotational simulators")
config_app = typer.Typer(help="Configuration commands")

app.add_typer(trade_app, name="trade")
app.add_typer(account_app, name="account")
app.add_typer(stats_app, name="stats")
app.add_typer(sim_app, name="sim")
app.add_typer(config_app, name="config")

console = Console()

# Configure logging
configure_logging(settings.log_level)


def init():
    """Initialize database and settings."""
    init_db()


def _store():
    from edgecore.db.store import TradeStore

    return TradeStore()


def _money(value: float) -> str:
    return f"${value:+,.2f}"


def _style(value: float) -> str:
    return "green" if value >= 0 else "red"


# ==================== TRADE COMMANDS ====================


@trade_app.command("import")
def trade_import(
    path: Path = typer.Argument(..., help="Path to .xlsx/.xls/.csv workbook"),
    account: Optional[str] = typer.Option(None, "--account", "-a", help="Account id to assign"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Parse only, store nothing"),
):
    """Import trades from a journal spreadsheet."""
    from edgecore.journal.ingest import SpreadsheetIngestor, import_trades

    if not path.exists():
        console.print(f"[red]File not found: {path}[/red]")
        raise typer.Exit(1)

    try:
        result = SpreadsheetIngestor().ingest(path.read_bytes(), path.name)
    except EdgecoreError as e:
        console.print(f"[red]Import failed: {e}[/red]")
        raise typer.Exit(1)

    skipped = "\n".join(f"  {t.reason}: {t.count}" for t in result.skipped)
    lines = [
        f"Sheets: {', '.join(result.sheets_used)}",
        f"Rows read: {result.rows_read} (duplicates removed: {result.duplicates_removed})",
        f"Parsed trades: {len(result.trades)}",
        f"Skipped:\n{skipped}",
    ]

    if dry_run:
        console.print(Panel("\n".join(lines), title="Import Preview (dry run)", border_style="yellow"))
        return

    init()
    report = import_trades(result.trades, _store(), owner_id=get_default_owner_id(), account_id=account)
    lines.append(f"\n[bold]Imported: {report.imported}[/bold] in {report.total_batches} batches")
    if report.failed_batches:
        lines.append(f"[red]Failed batches: {len(report.failed_batches)}[/red]")

    console.print(
        Panel("\n".join(lines), title="Spreadsheet Import", border_style="blue" if report.ok else "red")
    )

    for failure in report.failed_batches:
        console.print(
            f"  [red]- batch {failure.batch_index} (rows {failure.first_row}-{failure.last_row}): "
            f"{failure.error}[/red]"
        )
    for error in result.errors[:10]:
        console.print(f"  [yellow]- {error.sheet} row {error.sheet_row}: {error.message}[/yellow]")

    if not report.ok:
        raise typer.Exit(1)


@trade_app.command("list")
def trade_list(
    limit: int = typer.Option(20, "--limit", "-l", help="Number of trades to show"),
    account: Optional[str] = typer.Option(None, "--account", "-a", help="Filter by account id"),
):
    """List the most recent trades."""
    init()

    trades = _store().list_trades(get_default_owner_id(), account)[-limit:]
    if not trades:
        console.print("[yellow]No trades found[/yellow]")
        return

    table = Table(title="Recent Trades")
    table.add_column("ID", style="dim")
    table.add_column("Date")
    table.add_column("Day")
    table.add_column("Entry")
    table.add_column("Dir")
    table.add_column("Model", style="cyan")
    table.add_column("Result")
    table.add_column("P&L", justify="right")

    for t in trades:
        style = _style(t.result_amount)
        table.add_row(
            (t.id or "")[:8],
            t.date,
            t.day_of_week[:3],
            t.entry_time[:5],
            t.direction,
            t.entry_model or "-",
            t.result_type,
            f"[{style}]{_money(t.result_amount)}[/{style}]",
        )

    console.print(table)


# ==================== ACCOUNT COMMANDS ====================


@account_app.command("add")
def account_add(
    name: str = typer.Argument(..., help="Account name"),
    balance: float = typer.Option(0.0, "--balance", "-b", help="Initial balance"),
    broker: Optional[str] = typer.Option(None, "--broker", help="Broker or prop firm"),
):
    """Create an account."""
    init()
    account = _store().create_account(name, balance, broker=broker, owner_id=get_default_owner_id())
    console.print(f"[green]Created account {account['name']} ({account['id']})[/green]")


@account_app.command("list")
def account_list():
    """List accounts."""
    init()
    accounts = _store().list_accounts(get_default_owner_id())
    if not accounts:
        console.print("[yellow]No accounts found[/yellow]")
        return

    table = Table(title="Accounts")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Broker")
    table.add_column("Initial Balance", justify="right")
    for a in accounts:
        table.add_row(a["id"], a["name"], a["broker"] or "-", f"${a['initial_balance']:,.2f}")
    console.print(table)


@account_app.command("delete")
def account_delete(account_id: str = typer.Argument(..., help="Account id")):
    """Delete an account (its trades are kept)."""
    init()
    if not _store().delete_account(account_id):
        console.print(f"[red]Account not found: {account_id}[/red]")
        raise typer.Exit(1)
    console.print("[green]Account deleted[/green]")


# ==================== STATS COMMANDS ====================


@stats_app.command("summary")
def stats_summary(
    account: Optional[str] = typer.Option(None, "--account", "-a", help="Filter by account id"),
):
    """Show overall performance summary with breakdowns."""
    init()

    from edgecore.journal.analytics import (
        breakdown_by_day,
        breakdown_by_model,
        breakdown_by_week,
        journal_stats,
        news_stats,
    )

    trades = _store().list_trades(get_default_owner_id(), account)
    stats = journal_stats(trades)
    if not stats.total_trades:
        console.print("[yellow]No trades in the journal[/yellow]")
        return

    console.print(
        Panel(
            f"Total Trades: {stats.total_trades}\n"
            f"TP: {stats.win_count} | SL: {stats.loss_count} | BE: {stats.breakeven_count}\n"
            f"Win Rate: {stats.win_rate:.1f}%\n"
            f"\n"
            f"[bold]Total P&L: [{_style(stats.total_pnl)}]{_money(stats.total_pnl)}[/][/bold]\n"
            f"Avg Win: ${stats.avg_win:,.2f} | Avg Loss: ${stats.avg_loss:,.2f}\n"
            f"Expected Value: {_money(stats.expected_value)}\n"
            f"Profit Factor: {stats.profit_factor:.2f}\n"
            f"Streaks: {stats.max_win_streak} TP / {stats.max_loss_streak} SL\n"
            f"Avg Duration: {stats.avg_duration_minutes:.0f} min | "
            f"Avg Max RR: {stats.avg_max_rr:.2f} | "
            f"Avg Drawdown (TP): {stats.avg_drawdown_tp:.0%}",
            title="Performance Summary",
            border_style="blue",
        )
    )

    news = news_stats(trades)
    groups = [
        ("Entry Model", breakdown_by_model(trades)),
        ("Day of Week", breakdown_by_day(trades)),
        ("Week of Month", breakdown_by_week(trades)),
        ("News", [news]),
    ]
    for title, buckets in groups:
        table = Table(title=title)
        table.add_column("Group", style="cyan")
        table.add_column("Trades", justify="right")
        table.add_column("Win Rate", justify="right")
        table.add_column("P&L", justify="right")
        for b in buckets:
            table.add_row(b.label, str(b.trades), f"{b.win_rate:.1f}%", f"[{_style(b.pnl)}]{_money(b.pnl)}[/]")
        console.print(table)


@stats_app.command("monthly")
def stats_monthly(
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Only this year"),
):
    """Show results per month."""
    init()

    from edgecore.journal.analytics import monthly_results, yearly_totals

    monthly = monthly_results(_store().list_trades(get_default_owner_id()))
    if year is not None:
        monthly = {y: m for y, m in monthly.items() if y == year}
    if not monthly:
        console.print("[yellow]No results[/yellow]")
        return

    totals = yearly_totals(monthly)
    for y, months in monthly.items():
        table = Table(title=f"{y}  (total {_money(totals[y].pnl)}, win rate {totals[y].win_rate:.1f}%)")
        table.add_column("Month")
        table.add_column("Trades", justify="right")
        table.add_column("Win Rate", justify="right")
        table.add_column("P&L", justify="right")
        for month, s in months.items():
            table.add_row(f"{month:02d}", str(s.trades), f"{s.win_rate:.1f}%", f"[{_style(s.pnl)}]{_money(s.pnl)}[/]")
        console.print(table)


# ==================== SIMULATOR COMMANDS ====================


def _resolve_outcomes(outcomes: str, from_journal: bool, model: Optional[str], limit: Optional[int]):
    from edgecore.simulators.outcomes import parse_outcomes, select_outcomes

    if from_journal:
        init()
        trades = _store().list_trades(get_default_owner_id())
        return select_outcomes(trades, entry_model=model, limit=limit)

    try:
        return parse_outcomes(outcomes)
    except ValueError as e:
        console.print(f"[red]Invalid outcomes (use TP/SL): {e}[/red]")
        raise typer.Exit(1)


@sim_app.command("flip")
def sim_flip(
    outcomes: str = typer.Argument("", help="Comma-separated outcomes, e.g. TP,TP,SL"),
    account_size: Optional[float] = typer.Option(None, "--account-size", help="Starting balance"),
    cycle_size: Optional[int] = typer.Option(None, "--cycle-size", help="Trades per cycle"),
    risk: Optional[float] = typer.Option(None, "--risk", help="Risk per cycle"),
    rr: Optional[float] = typer.Option(None, "--rr", help="Reward:risk ratio"),
    reinvest: Optional[float] = typer.Option(None, "--reinvest", help="Percent of cycle profit reinvested"),
    fixed_dollars: bool = typer.Option(False, "--fixed-dollars", help="Risk is a fixed amount per trade"),
    from_journal: bool = typer.Option(False, "--from-journal", help="Use TP/SL trades from the journal"),
    model: Optional[str] = typer.Option(None, "--model", help="Journal entry model filter"),
    limit: Optional[int] = typer.Option(None, "--limit", help="First N journal trades"),
    csv_path: Optional[Path] = typer.Option(None, "--csv", help="Write the results to a CSV file"),
    save: Optional[str] = typer.Option(None, "--save", help="Save the run under this name"),
):
    """Run the Flip X5 simulator."""
    from edgecore.simulators.export import flip_result_to_csv
    from edgecore.simulators.flip_x5 import FlipConfig, simulate

    sequence = _resolve_outcomes(outcomes, from_journal, model, limit)
    config = FlipConfig.from_settings(
        account_size=account_size,
        cycle_size=cycle_size,
        risk_per_cycle=risk,
        rr_ratio=rr,
        reinvest_percent=reinvest,
        use_fixed_dollars=fixed_dollars,
    )

    try:
        result = simulate(config, sequence)
    except EdgecoreError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Flip X5 Trades")
    for column in ("#", "Cycle", "Result", "Risk Trad.", "P&L Trad.", "Balance Trad.", "Risk Lev.", "P&L Lev.", "Balance Lev."):
        table.add_column(column, justify="right")
    for row in result.trades:
        table.add_row(
            str(row.trade_number),
            str(row.cycle),
            f"[{_style(row.pnl_traditional)}]{row.result.value}[/]",
            f"${row.risk_traditional:,.2f}",
            _money(row.pnl_traditional),
            f"${row.balance_traditional:,.2f}",
            f"${row.risk_leveraged:,.2f}",
            _money(row.pnl_leveraged),
            f"${row.balance_leveraged:,.2f}",
        )
    console.print(table)

    console.print(
        Panel(
            f"Trades: {len(result.trades)} | TP: {result.total_tp} | SL: {result.total_sl} | "
            f"Win Rate: {result.win_rate:.1f}%\n\n"
            f"[bold]Traditional[/bold]: ${result.final_balance_traditional:,.2f} "
            f"({_money(result.total_profit_traditional)}, ROI {result.roi_traditional:.2f}%)\n"
            f"[bold]Leveraged[/bold]:   ${result.final_balance_leveraged:,.2f} "
            f"({_money(result.total_profit_leveraged)}, ROI {result.roi_leveraged:.2f}%)",
            title="Flip X5 Summary",
            border_style="blue",
        )
    )

    if csv_path:
        csv_path.write_text(flip_result_to_csv(config, result), encoding="utf-8")
        console.print(f"[green]Results written to {csv_path}[/green]")

    if save:
        init()
        simulation_id = _store().save_simulation(save, config, sequence, owner_id=get_default_owner_id())
        console.print(f"[green]Saved simulation '{save}' ({simulation_id})[/green]")


@sim_app.command("saved")
def sim_saved():
    """List saved Flip X5 simulations."""
    init()
    simulations = _store().list_simulations(get_default_owner_id())
    if not simulations:
        console.print("[yellow]No saved simulations[/yellow]")
        return

    table = Table(title="Saved Simulations")
    table.add_column("Name", style="cyan")
    table.add_column("Trades", justify="right")
    table.add_column("Risk/Cycle", justify="right")
    table.add_column("R:R", justify="right")
    table.add_column("Reinvest", justify="right")
    table.add_column("Outcomes")
    for s in simulations:
        config = s["config"]
        sequence = ",".join(o.value for o in s["outcomes"])
        table.add_row(
            s["name"],
            str(len(s["outcomes"])),
            f"${config.risk_per_cycle:,.2f}",
            f"1:{config.rr_ratio:g}",
            f"{config.reinvest_percent:g}%",
            sequence[:40],
        )
    console.print(table)


@sim_app.command("rotational")
def sim_rotational(
    outcomes: str = typer.Argument("", help="Comma-separated outcomes, e.g. TP,SL,TP"),
    accounts: Optional[int] = typer.Option(None, "--accounts", "-n", help="Number of accounts"),
    balance: Optional[float] = typer.Option(None, "--balance", "-b", help="Starting balance per account"),
    risk: Optional[float] = typer.Option(None, "--risk", help="Risk per trade"),
    rr: Optional[float] = typer.Option(None, "--rr", help="Reward:risk ratio"),
    from_journal: bool = typer.Option(False, "--from-journal", help="Use TP/SL trades from the journal"),
    model: Optional[str] = typer.Option(None, "--model", help="Journal entry model filter"),
    limit: Optional[int] = typer.Option(None, "--limit", help="First N journal trades"),
    csv_path: Optional[Path] = typer.Option(None, "--csv", help="Write the history to a CSV file"),
):
    """Run the rotational multi-account simulator."""
    from edgecore.simulators.export import rotational_history_to_csv
    from edgecore.simulators.rotational import RotationalConfig, account_summaries, replay, summarize

    sequence = _resolve_outcomes(outcomes, from_journal, model, limit)
    config = RotationalConfig.from_settings(
        number_of_accounts=accounts,
        capital_per_account=balance,
        risk_per_trade=risk,
        risk_reward_ratio=rr,
    )

    try:
        state = replay(config, sequence)
    except EdgecoreError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Accounts")
    table.add_column("Account")
    table.add_column("Balance", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("Trades", justify="right")
    table.add_column("TP/SL", justify="right")
    for a in account_summaries(state):
        marker = " <- next" if a.index == state.current_turn_index else ""
        table.add_row(
            f"#{a.index + 1}{marker}",
            f"${a.balance:,.2f}",
            f"[{_style(a.pnl)}]{_money(a.pnl)}[/]",
            str(a.trades),
            f"{a.tp_count}/{a.sl_count}",
        )
    console.print(table)

    summary = summarize(state)
    console.print(
        Panel(
            f"Trades: {summary.total_trades} | TP: {summary.total_tp} | SL: {summary.total_sl} | "
            f"Win Rate: {summary.win_rate:.1f}%\n"
            f"Total Balance: ${summary.total_balance:,.2f} "
            f"({_money(summary.total_pnl)}, ROI {summary.roi:.2f}%)",
            title="Rotational Summary",
            border_style="blue",
        )
    )

    if csv_path:
        csv_path.write_text(rotational_history_to_csv(state), encoding="utf-8")
        console.print(f"[green]History written to {csv_path}[/green]")


# ==================== CONFIG COMMANDS ====================


@config_app.command("show")
def config_show():
    """Show current configuration."""
    config = load_config()

    console.print(Panel("[bold]Configuration[/bold]", border_style="blue"))
    console.print(f"  Config file: [green]{CONFIG_FILE}[/green] ({'found' if CONFIG_FILE.exists() else 'defaults'})")
    for section, values in config.items():
        console.print(f"\n[bold cyan]{section}[/bold cyan]")
        if isinstance(values, dict):
            for key, value in values.items():
                console.print(f"  {key}: {value}")
        else:
            console.print(f"  {values}")


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config.yaml"),
):
    """Initialize the database and write a default config.yaml."""
    init()
    console.print("[green]Database initialized[/green]")

    if CONFIG_FILE.exists() and not force:
        console.print(f"[yellow]{CONFIG_FILE} already exists (use --force to overwrite)[/yellow]")
        return

    save_config(get_default_config())
    settings.reload()
    console.print(f"[green]Wrote {CONFIG_FILE}[/green]")


# ==================== WEB SERVER ====================


@app.command("web")
def run_web(
    host: str = typer.Option("127.0.0.1", "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
):
    """Start the web API."""
    init()

    console.print(
        Panel(
            f"[bold]EdgeCore Journal API[/bold]\n\n"
            f"Docs: [cyan]http://{host}:{port}/docs[/cyan]\n\n"
            f"Press Ctrl+C to stop the server",
            title="Web Server",
            border_style="green",
        )
    )

    from edgecore.web.server import run_server

    run_server(host=host, port=port)


if __name__ == "__main__":
    app()
