"""Database layer for the journal."""

from edgecore.db.models import get_engine, get_session, init_db
from edgecore.db.store import TradeStore

__all__ = ["get_engine", "get_session", "init_db", "TradeStore"]
