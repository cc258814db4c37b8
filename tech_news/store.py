"""
store.py
========
Database gateway for the saved-articles cache.

It does three things:
1) Creates a connection "engine" for an on-device SQLite file.
2) Brings the schema to the current version (see migrations.py).
3) Provides a helper to open a database "Session" (a unit of work/transaction).

Nothing here is a module-level singleton: whoever composes the application
creates the engine and hands it to the backend that needs it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, create_engine

from .logging_setup import get_logger
from .migrations import SCHEMA_VERSION, migrate

logger = get_logger("tech_news.store")


def make_engine(db_url: str = "sqlite:///tech_news.db", echo: bool = False) -> Engine:
    """
    Create the engine (connection factory + pool) for `db_url`.

    The mirror worker writes from its own thread, so SQLite connections are
    allowed to cross threads. echo=True logs every SQL statement.
    """
    if not db_url.startswith("sqlite"):
        return create_engine(db_url, echo=echo)

    engine = create_engine(db_url, echo=echo, connect_args={"check_same_thread": False})

    # pysqlite only opens a transaction before DML; take over BEGIN so schema
    # migrations (DROP/CREATE + copy) commit or roll back as one unit.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


def init_db(engine: Engine, now: Optional[datetime] = None) -> int:
    """
    Create or upgrade the schema and return the resulting version.

    Safe to call on every startup: an up-to-date database is left alone.
    `now` is the backfill time used by migrations for rows that never
    recorded a publication time (defaults to the current UTC time).
    """
    # Import models so SQLModel.metadata knows about every table before create_all().
    from . import models  # noqa: F401

    version = migrate(engine, now=now)
    logger.info("SCHEMA_READY", extra={"version": version, "target": SCHEMA_VERSION})
    return version


def get_session(engine: Engine) -> Session:
    """
    Open a database Session bound to `engine`.

    Usage pattern:
      with get_session(engine) as session:
          session.add(obj)
          session.commit()
    """
    return Session(engine)
