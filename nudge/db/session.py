from __future__ import annotations

import contextlib
import dataclasses
import logging
from collections.abc import Iterator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from nudge.core.errors import StoreError
from nudge.core.settings import Settings
from nudge.db.ledger import MigrationLedger

logger = logging.getLogger(__name__)


def _disable_driver_transactions(dbapi_connection, connection_record) -> None:
    # pysqlite only opens transactions before DML; take over so DDL is transactional too.
    dbapi_connection.isolation_level = None


def _emit_begin(conn) -> None:
    conn.exec_driver_sql("BEGIN")


def build_engine(database_url: str, *, timeout: float = 5.0) -> Engine:
    connect_args = {"check_same_thread": False, "timeout": timeout}
    engine = create_engine(database_url, future=True, echo=False, connect_args=connect_args)
    event.listen(engine, "connect", _disable_driver_transactions)
    event.listen(engine, "begin", _emit_begin)
    return engine


@contextlib.contextmanager
def transaction_scope(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """
    One logical command, one transaction.

    Commits on normal exit and rolls back on any exception. Engine failures are
    logged and re-raised as StoreError; everything else propagates unchanged.
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("SQLite error: %s", exc)
        raise StoreError(str(exc)) from exc
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@dataclasses.dataclass
class Store:
    engine: Engine
    session_factory: sessionmaker[Session]

    def transaction(self) -> contextlib.AbstractContextManager[Session]:
        return transaction_scope(self.session_factory)

    def close(self) -> None:
        self.engine.dispose()


def open_store(settings: Settings, ledger: MigrationLedger | None = None) -> Store:
    """Open the database file and bring its schema up to date before handing it out."""
    try:
        engine = build_engine(settings.database_url, timeout=settings.sqlite_timeout_seconds)
    except SQLAlchemyError as exc:
        raise StoreError(f"{settings.database_path}: {exc}") from exc

    session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    store = Store(engine=engine, session_factory=session_factory)
    ledger = ledger or MigrationLedger(
        label=str(settings.database_path),
        trace_queries=settings.trace_migration_queries,
    )
    try:
        with store.transaction() as session:
            ledger.apply(session)
    except Exception:
        store.close()
        raise
    return store
