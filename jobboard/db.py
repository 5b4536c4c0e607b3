from __future__ import annotations

from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, event, make_url
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

SessionLocal = sessionmaker(autoflush=False, autocommit=False)

_engine: Optional[Engine] = None


class Base(DeclarativeBase):
    pass


def _set_sqlite_pragmas(dbapi_connection, connection_record):
    # WAL + NORMAL sync trade a little durability for write throughput
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_engine(database_url: str) -> Engine:
    """Create the engine for ``database_url`` and bind ``SessionLocal`` to it."""
    global _engine

    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        db_file = make_url(database_url).database
        if db_file and db_file != ":memory:":
            Path(db_file).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(database_url, echo=False, pool_pre_ping=True, connect_args=connect_args)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _set_sqlite_pragmas)

    if _engine is not None:
        _engine.dispose()
    _engine = engine
    SessionLocal.configure(bind=engine)
    return engine


def get_engine() -> Engine:
    if _engine is None:
        raise RuntimeError("Database engine is not initialized; call init_engine() first")
    return _engine


def init_db(engine: Optional[Engine] = None) -> None:
    """Create the users and jobs tables (and their indexes) if absent."""
    from jobboard import models  # noqa: F401

    Base.metadata.create_all(engine or get_engine())


def sqlite_path(engine: Engine) -> Optional[Path]:
    """Return the database file behind a SQLite engine, or None."""
    if engine.dialect.name != "sqlite":
        return None
    database = engine.url.database
    if not database or database == ":memory:":
        return None
    return Path(database)
