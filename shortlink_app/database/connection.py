"""
SQLAlchemy engine and session setup for the record store.

No engine is created at import time; the store factory builds one from
``settings.database_url`` when the SQL backend is selected.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def build_engine(database_url: str) -> Engine:
    """
    Create an engine for ``database_url``.

    SQLite needs ``check_same_thread=False`` because sessions are opened from
    request handlers and background visit tasks alike. An in-memory SQLite
    database is pinned to a single connection, otherwise every new
    connection would see an empty database.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url.rstrip("/") == "sqlite:":
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    """Session factory; objects stay readable after commit."""
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
