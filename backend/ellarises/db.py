from __future__ import annotations

import sqlite3
from collections.abc import Generator
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ellarises.config import get_settings


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


@event.listens_for(Engine, "connect")
def _set_sqlite_pragmas(dbapi_connection, connection_record):
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()
    # Built-in lower() only folds ASCII; search tokens are folded with str.lower()
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def _make_engine() -> Engine:
    settings = get_settings()
    if settings.is_sqlite:
        return create_engine(
            settings.db_url,
            echo=settings.db_echo,
            connect_args={"check_same_thread": False},
        )
    return create_engine(settings.db_url, echo=settings.db_echo, pool_pre_ping=True)


engine = _make_engine()


def create_db_and_tables() -> None:
    settings = get_settings()
    if settings.is_sqlite and settings.db_url.startswith("sqlite:///"):
        db_path = settings.db_url.removeprefix("sqlite:///")
        if db_path and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(engine)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
