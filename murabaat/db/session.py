from __future__ import annotations

from collections.abc import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from murabaat.core.config import settings


def _make_engine():
    connect_args = {}
    is_sqlite = settings.database_url.startswith("sqlite")
    if is_sqlite:
        connect_args = {"check_same_thread": False}
    eng = create_engine(settings.database_url, echo=False, future=True, connect_args=connect_args)

    if is_sqlite:
        # SQLite ignores ON DELETE clauses unless foreign keys are switched on per connection.
        @event.listens_for(eng, "connect")
        def _enable_fk(dbapi_connection, _record) -> None:
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return eng


engine = _make_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True, expire_on_commit=True)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
