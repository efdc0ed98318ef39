"""
SQLAlchemy models for the journal database.

Models:
- Account: Brokerage/prop accounts trades can belong to
- TradeRecord: Stored journal trades
- FlipSimulation: Saved Flip X5 simulator runs
"""

from datetime import datetime
import uuid

from sqlalchemy import (
    create_engine,
    Column,
    Integer,
    Float,
    String,
    DateTime,
    Date,
    Boolean,
    Text,
    JSON,
    ForeignKey,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from edgecore.config import get_database_url

Base = declarative_base()


def new_id() -> str:
    """Opaque identifier for new rows."""
    return str(uuid.uuid4())


class Account(Base):
    """Trading account."""

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(64), index=True)
    name = Column(String(100), nullable=False)
    broker = Column(String(100))
    initial_balance = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Account(name='{self.name}', initial_balance={self.initial_balance})>"


class TradeRecord(Base):
    """Stored journal trade."""

    __tablename__ = "trades"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(64), index=True)
    account_id = Column(String(36), ForeignKey("accounts.id", ondelete="SET NULL"), index=True)

    # When
    date = Column(Date, nullable=False, index=True)
    day_of_week = Column(String(10), nullable=False)
    week_of_month = Column(Integer, nullable=False)
    entry_time = Column(String(8), nullable=False)
    exit_time = Column(String(8))

    # What
    direction = Column(String(4), nullable=False, default="Buy")
    entry_model = Column(Text, default="")
    result_type = Column(String(2), nullable=False, default="TP")
    result_amount = Column(Float, nullable=False, default=0.0)
    risk_percentage = Column(Float, default=1.0)

    # Context
    had_news = Column(Boolean, default=False)
    news_description = Column(Text)
    max_rr = Column(Float)
    drawdown = Column(Float)
    image_link = Column(Text)
    no_trade_day = Column(Boolean, default=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<TradeRecord(date='{self.date}', result='{self.result_type}', amount={self.result_amount})>"


class FlipSimulation(Base):
    """Saved Flip X5 simulation (config plus outcome sequence)."""

    __tablename__ = "flip_simulations"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(64), index=True)
    name = Column(String(100), nullable=False)

    account_size = Column(Float, nullable=False)
    cycle_size = Column(Integer, nullable=False)
    risk_per_cycle = Column(Float, nullable=False)
    rr_ratio = Column(Float, nullable=False)
    reinvest_percent = Column(Float, nullable=False)
    use_fixed_dollars = Column(Boolean, default=False)
    outcomes = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<FlipSimulation(name='{self.name}', trades={len(self.outcomes or [])})>"


# Database setup
_engine = None
_SessionLocal = None


def get_engine():
    """Get or create database engine."""
    global _engine
    if _engine is None:
        db_url = get_database_url()
        # Web routes hit the database from worker threads
        connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
        _engine = create_engine(db_url, echo=False, connect_args=connect_args)
    return _engine


def init_db() -> None:
    """Initialize database and create tables."""
    engine = get_engine()
    Base.metadata.create_all(engine)


def get_session() -> Session:
    """Get a new database session."""
    global _SessionLocal
    if _SessionLocal is None:
        engine = get_engine()
        _SessionLocal = sessionmaker(bind=engine)
    return _SessionLocal()


def reset_engine() -> None:
    """Dispose the cached engine so the next call re-reads DATABASE_URL."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None
