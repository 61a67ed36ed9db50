from collections.abc import Generator
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from usage_ledger.core.config import settings

Base: Any = declarative_base()


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on foreign key enforcement for every new SQLite connection."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()


class Database:
    """Owns the engine and session factory for the lifetime of the service.

    Created when the application starts and disposed when it shuts down.
    """

    def __init__(self, dsn: str | None = None, engine: Engine | None = None):
        if engine is None:
            dsn = dsn or settings.APP_DATABASE_DSN
            engine = create_engine(
                dsn,
                connect_args=({"check_same_thread": False} if "sqlite" in dsn else {}),
            )
        if engine.dialect.name == "sqlite":
            enable_sqlite_foreign_keys(engine)
        self.engine = engine
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def session(self) -> Generator[Session, None, None]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def create_all(self) -> None:
        """Initialize database tables."""
        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    database: Database = request.app.state.database
    yield from database.session()
