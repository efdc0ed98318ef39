"""
Trade API routes.

Handles listing, statistics, equity curves and deletion.
"""

import asyncio
import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from edgecore.db.store import TradeStore
from edgecore.journal.analytics import (
    best_bucket,
    breakdown_by_day,
    breakdown_by_model,
    breakdown_by_week,
    equity_curve,
    journal_stats,
    monthly_results,
    multi_account_equity,
    news_stats,
    yearly_totals,
)
from edgecore.web.schemas import success_response
from edgecore.web.utils import get_owner_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trades", tags=["trades"])


def _bucket_list(buckets) -> list[dict]:
    return [asdict(b) for b in buckets]


def _period(stats) -> dict:
    return {"trades": stats.trades, "wins": stats.wins, "pnl": round(stats.pnl, 2), "win_rate": round(stats.win_rate, 2)}


@router.get("")
async def list_trades(request: Request, account_id: Optional[str] = None, limit: Optional[int] = None):
    """List trades of the current owner, oldest first."""
    owner_id = get_owner_id(request)
    trades = await asyncio.to_thread(TradeStore().list_trades, owner_id, account_id)
    if limit is not None:
        trades = trades[-limit:] if limit > 0 else []
    return JSONResponse(success_response(data=[t.to_record() for t in trades]))


@router.get("/stats")
async def trade_stats(request: Request, account_id: Optional[str] = None):
    """Journal statistics with breakdowns and monthly results."""
    owner_id = get_owner_id(request)
    trades = await asyncio.to_thread(TradeStore().list_trades, owner_id, account_id)

    by_model = breakdown_by_model(trades)
    by_day = breakdown_by_day(trades)
    by_week = breakdown_by_week(trades)
    monthly = monthly_results(trades)

    best = {
        "model": best_bucket(by_model),
        "day": best_bucket(by_day),
        "week": best_bucket(by_week),
    }

    data = {
        "summary": journal_stats(trades).to_dict(),
        "by_model": _bucket_list(by_model),
        "by_day": _bucket_list(by_day),
        "by_week": _bucket_list(by_week),
        "news": asdict(news_stats(trades)),
        "best": {k: (v.label if v else None) for k, v in best.items()},
        "monthly": {
            str(year): {str(month): _period(stats) for month, stats in months.items()}
            for year, months in monthly.items()
        },
        "yearly": {str(year): _period(stats) for year, stats in yearly_totals(monthly).items()},
    }
    return JSONResponse(success_response(data=data))


@router.get("/equity")
async def trade_equity(request: Request, account_id: Optional[str] = None):
    """
    Equity curve.

    With account_id: that account's curve starting at its initial balance.
    Without: one point per date with every account plus the total.
    """
    owner_id = get_owner_id(request)

    def _load():
        store = TradeStore()
        return store.list_trades(owner_id), store.list_accounts(owner_id)

    trades, accounts = await asyncio.to_thread(_load)

    if account_id:
        account = next((a for a in accounts if a["id"] == account_id), None)
        if account is None:
            raise HTTPException(status_code=404, detail="Account not found")
        account_trades = [t for t in trades if t.account_id == account_id]
        points = equity_curve(account_trades, account["initial_balance"])
        return JSONResponse(success_response(data=[asdict(p) for p in points]))

    balances = {a["id"]: a["initial_balance"] for a in accounts}
    points = multi_account_equity(trades, balances)
    return JSONResponse(
        success_response(
            data={
                "accounts": [{"id": a["id"], "name": a["name"]} for a in accounts],
                "points": [asdict(p) for p in points],
            }
        )
    )


@router.delete("/{trade_id}")
async def delete_trade(trade_id: str):
    """Delete a trade."""
    deleted = await asyncio.to_thread(TradeStore().delete_trade, trade_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Trade not found")
    logger.info(f"Deleted trade {trade_id}")
    return JSONResponse(success_response(message="Trade deleted"))
