from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from compensation.core.config import settings


def enable_sqlite_savepoints(sqlite_engine: Engine) -> None:
    """Let SQLAlchemy emit BEGIN itself on a pysqlite engine.

    pysqlite defers BEGIN until the first write, so a SAVEPOINT issued
    before that would open (and on release, commit) the outer transaction.
    A connection shared between sessions may already be inside one, in
    which case no second BEGIN is sent.
    """

    @event.listens_for(sqlite_engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):  # type: ignore[no-untyped-def]
        dbapi_connection.isolation_level = None

    @event.listens_for(sqlite_engine, "begin")
    def _emit_begin(conn):  # type: ignore[no-untyped-def]
        if not conn.connection.dbapi_connection.in_transaction:
            conn.exec_driver_sql("BEGIN")


engine = create_engine(
    settings.APP_DATABASE_DSN,
    connect_args=({"check_same_thread": False} if "sqlite" in settings.APP_DATABASE_DSN else {}),
)
if engine.dialect.name == "sqlite":
    enable_sqlite_savepoints(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base: Any = declarative_base()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def compensation_session() -> Iterator[Session]:
    """Open a session whose transaction runs at the compensation isolation level.

    Commits when the block exits cleanly and rolls back otherwise. The
    isolation level must be pinned before the first statement of the
    transaction, so nothing may query through the session beforehand.
    """
    db = SessionLocal()
    try:
        db.connection(
            execution_options={"isolation_level": settings.COMPENSATION_ISOLATION_LEVEL}
        )
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_compensation_db() -> Generator[Session, None, None]:
    """FastAPI dependency wrapping :func:`compensation_session`."""
    with compensation_session() as db:
        yield db
