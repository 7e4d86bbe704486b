"""Database engine and session factory."""

from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from cardops.config import get_settings


def build_engine(database_url: str, **kwargs: Any) -> Engine:
    """Create an engine; SQLite connections get explicit BEGIN so SAVEPOINTs nest correctly."""

    engine = create_engine(database_url, future=True, **kwargs)
    if engine.dialect.name == "sqlite":

        @event.listens_for(engine, "connect")
        def _disable_pysqlite_transactions(dbapi_connection, _connection_record) -> None:
            dbapi_connection.isolation_level = None

        @event.listens_for(engine, "begin")
        def _emit_begin(connection) -> None:
            connection.exec_driver_sql("BEGIN")

    return engine


engine = build_engine(get_settings().database_url, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
