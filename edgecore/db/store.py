"""
Data access for trades, accounts and saved simulations.

Rows are scoped by owner: a None owner only sees rows without an owner.
"""

from dataclasses import asdict
from datetime import date
from typing import Any, Iterable, Optional
import logging

from edgecore.db.models import Account, FlipSimulation, TradeRecord, get_session, init_db, new_id
from edgecore.journal.models import Trade
from edgecore.simulators.flip_x5 import FlipConfig
from edgecore.simulators.outcomes import Outcome

logger = logging.getLogger(__name__)

_TRADE_COLUMNS = {c.name for c in TradeRecord.__table__.columns}


def _owner_filter(column, owner_id: Optional[str]):
    return column.is_(None) if owner_id is None else column == owner_id


def _to_columns(record: dict[str, Any]) -> dict[str, Any]:
    values = {k: v for k, v in record.items() if k in _TRADE_COLUMNS}
    if isinstance(values.get("date"), str):
        values["date"] = date.fromisoformat(values["date"])
    return values


def _row_to_trade(row: TradeRecord) -> Trade:
    return Trade.from_record({c: getattr(row, c) for c in _TRADE_COLUMNS})


def _account_dict(account: Account) -> dict[str, Any]:
    return {
        "id": account.id,
        "name": account.name,
        "broker": account.broker,
        "initial_balance": account.initial_balance,
        "created_at": account.created_at.isoformat() if account.created_at else None,
    }


class TradeStore:
    """SQLAlchemy-backed persistence for the journal."""

    def __init__(self, create_tables: bool = True):
        if create_tables:
            init_db()

    # Trades

    def insert_many(self, records: Iterable[dict[str, Any]]) -> list[str]:
        """
        Insert trade records in one transaction.

        Args:
            records: Flat trade dicts (Trade.to_record() plus user_id/account_id)

        Returns:
            Ids of the inserted rows

        Raises:
            Exception: Any database error, after rolling back the whole call
        """
        session = get_session()
        try:
            rows = []
            for record in records:
                values = _to_columns(record)
                values.setdefault("id", new_id())
                rows.append(TradeRecord(**values))
            session.add_all(rows)
            session.commit()
            return [row.id for row in rows]

        except Exception as e:
            session.rollback()
            logger.error(f"Failed to insert trades: {e}")
            raise

        finally:
            session.close()

    def upsert(self, record: dict[str, Any]) -> str:
        """Insert a trade, or update it when its id already exists."""
        session = get_session()
        try:
            values = _to_columns(record)
            trade_id = values.get("id") or new_id()
            values["id"] = trade_id

            row = session.get(TradeRecord, trade_id)
            if row is None:
                session.add(TradeRecord(**values))
            else:
                for key, value in values.items():
                    setattr(row, key, value)
            session.commit()
            return trade_id

        except Exception as e:
            session.rollback()
            logger.error(f"Failed to upsert trade: {e}")
            raise

        finally:
            session.close()

    def list_trades(self, owner_id: Optional[str] = None, account_id: Optional[str] = None) -> list[Trade]:
        """Trades of an owner (optionally one account), oldest first."""
        session = get_session()
        try:
            query = session.query(TradeRecord).filter(_owner_filter(TradeRecord.user_id, owner_id))
            if account_id is not None:
                query = query.filter(TradeRecord.account_id == account_id)
            rows = query.order_by(TradeRecord.date, TradeRecord.entry_time).all()
            return [_row_to_trade(row) for row in rows]
        finally:
            session.close()

    def get_trade(self, trade_id: str) -> Optional[Trade]:
        session = get_session()
        try:
            row = session.get(TradeRecord, trade_id)
            return _row_to_trade(row) if row else None
        finally:
            session.close()

    def update_trade(self, trade_id: str, **fields: Any) -> Optional[Trade]:
        """Update a trade. Unknown fields are ignored; returns None if missing."""
        session = get_session()
        try:
            row = session.get(TradeRecord, trade_id)
            if not row:
                return None

            for key, value in _to_columns(fields).items():
                if key != "id":
                    setattr(row, key, value)

            session.commit()
            session.refresh(row)
            return _row_to_trade(row)

        except Exception as e:
            session.rollback()
            logger.error(f"Failed to update trade: {e}")
            raise

        finally:
            session.close()

    def delete_trade(self, trade_id: str) -> bool:
        """Delete a trade."""
        session = get_session()
        try:
            row = session.get(TradeRecord, trade_id)
            if not row:
                return False

            session.delete(row)
            session.commit()
            return True

        except Exception as e:
            session.rollback()
            logger.error(f"Failed to delete trade: {e}")
            raise

        finally:
            session.close()

    # Accounts

    def create_account(
        self,
        name: str,
        initial_balance: float = 0.0,
        broker: Optional[str] = None,
        owner_id: Optional[str] = None,
    ) -> dict[str, Any]:
        session = get_session()
        try:
            account = Account(
                id=new_id(),
                user_id=owner_id,
                name=name,
                broker=broker,
                initial_balance=initial_balance,
            )
            session.add(account)
            session.commit()
            session.refresh(account)
            logger.info(f"Created account '{name}'")
            return _account_dict(account)

        except Exception as e:
            session.rollback()
            logger.error(f"Failed to create account: {e}")
            raise

        finally:
            session.close()

    def list_accounts(self, owner_id: Optional[str] = None) -> list[dict[str, Any]]:
        session = get_session()
        try:
            rows = (
                session.query(Account)
                .filter(_owner_filter(Account.user_id, owner_id))
                .order_by(Account.created_at)
                .all()
            )
            return [_account_dict(a) for a in rows]
        finally:
            session.close()

    def delete_account(self, account_id: str) -> bool:
        """Delete an account. Its trades are kept and detached from it."""
        session = get_session()
        try:
            account = session.get(Account, account_id)
            if not account:
                return False

            session.query(TradeRecord).filter(TradeRecord.account_id == account_id).update(
                {TradeRecord.account_id: None}
            )
            session.delete(account)
            session.commit()
            return True

        except Exception as e:
            session.rollback()
            logger.error(f"Failed to delete account: {e}")
            raise

        finally:
            session.close()

    # Saved simulations

    def save_simulation(
        self,
        name: str,
        config: FlipConfig,
        outcomes: Iterable[Outcome],
        owner_id: Optional[str] = None,
    ) -> str:
        session = get_session()
        try:
            simulation = FlipSimulation(
                id=new_id(),
                user_id=owner_id,
                name=name,
                outcomes=[Outcome.coerce(o).value for o in outcomes],
                **asdict(config),
            )
            session.add(simulation)
            session.commit()
            return simulation.id

        except Exception as e:
            session.rollback()
            logger.error(f"Failed to save simulation: {e}")
            raise

        finally:
            session.close()

    def list_simulations(self, owner_id: Optional[str] = None) -> list[dict[str, Any]]:
        """Saved simulations, newest first, with their config rebuilt."""
        session = get_session()
        try:
            rows = (
                session.query(FlipSimulation)
                .filter(_owner_filter(FlipSimulation.user_id, owner_id))
                .order_by(FlipSimulation.created_at.desc())
                .all()
            )
            return [
                {
                    "id": row.id,
                    "name": row.name,
                    "config": FlipConfig(
                        account_size=row.account_size,
                        cycle_size=row.cycle_size,
                        risk_per_cycle=row.risk_per_cycle,
                        rr_ratio=row.rr_ratio,
                        reinvest_percent=row.reinvest_percent,
                        use_fixed_dollars=bool(row.use_fixed_dollars),
                    ),
                    "outcomes": [Outcome(o) for o in row.outcomes or []],
                    "created_at": row.created_at.isoformat() if row.created_at else None,
                }
                for row in rows
            ]
        finally:
            session.close()
