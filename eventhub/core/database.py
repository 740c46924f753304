# Database layer - engine, sessions and schema helpers (SQLAlchemy)

from typing import Iterable
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from .config import settings

# FastAPI runs sync routes in a threadpool, SQLite connections must be shareable
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    pool_pre_ping=True,
    echo=False,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Declarative base shared by users, events, tags and media
Base = declarative_base()


def one_of(column: str, values: Iterable[str]) -> str:
    """SQL check expression restricting a string column to a fixed set of values"""
    return f"{column} IN ({', '.join(repr(v) for v in values)})"


def get_db() -> Session:
    """
    Request-scoped session, closed once the response is sent.
    Use as `db: Session = Depends(get_db)`
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """Create the event, user, tag and media tables if missing"""
    from eventhub import models  # noqa: F401  (registers models on Base)
    Base.metadata.create_all(bind=engine)


def drop_tables():
    """Drop every EventHub table, data included"""
    from eventhub import models  # noqa: F401
    Base.metadata.drop_all(bind=engine)
