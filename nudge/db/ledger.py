from __future__ import annotations

import logging
import sqlite3
from collections.abc import Sequence

from sqlalchemy import insert, literal_column, select
from sqlalchemy.orm import Session

from nudge.core.errors import SchemaDriftError
from nudge.db.migrations import LEDGER_TABLE_DDL, MIGRATIONS
from nudge.models.migration import migrations_table

logger = logging.getLogger(__name__)


def split_statements(script: str) -> list[str]:
    """Split a migration into complete SQL statements.

    pysqlite refuses more than one statement per ``execute`` and ``executescript``
    commits the running transaction, so statements are cut at the points SQLite
    itself considers complete and executed one at a time.
    """
    statements: list[str] = []
    buffer = ""
    for line in script.splitlines(keepends=True):
        buffer += line
        if sqlite3.complete_statement(buffer):
            statements.append(buffer.strip())
            buffer = ""
    if buffer.strip():
        statements.append(buffer.strip())
    return statements


class MigrationLedger:
    def __init__(
        self,
        migrations: Sequence[str] = MIGRATIONS,
        *,
        label: str = "database",
        trace_queries: bool = False,
    ) -> None:
        self._migrations = tuple(migrations)
        self._label = label
        self._trace_queries = trace_queries

    def applied(self, session: Session) -> list[str]:
        stmt = select(migrations_table.c.query).order_by(literal_column("rowid"))
        return list(session.scalars(stmt).all())

    def verify(self, applied: Sequence[str]) -> None:
        for index, found in enumerate(applied):
            if index >= len(self._migrations):
                raise SchemaDriftError(
                    f"{self._label}: database schema is too new, it has more migrations applied "
                    f"({len(applied)}) than this build knows ({len(self._migrations)}). Update the application."
                )
            expected = self._migrations[index]
            if found != expected:
                raise SchemaDriftError(
                    f"{self._label}: invalid database schema, mismatch in migration {index}:\n"
                    f"EXPECTED: {expected}\n"
                    f"FOUND: {found}"
                )

    def apply(self, session: Session) -> int:
        """Verify the stored ledger and run every pending migration.

        Runs inside the caller's transaction: either every pending migration and its
        ledger row are committed together or none are. Returns how many were applied.
        """
        connection = session.connection()
        connection.exec_driver_sql(LEDGER_TABLE_DDL)

        applied = self.applied(session)
        self.verify(applied)

        pending = self._migrations[len(applied) :]
        for index, query in enumerate(pending, start=len(applied)):
            logger.info("%s: applying migration %s", self._label, index)
            if self._trace_queries:
                logger.info("%s", query)
            for statement in split_statements(query):
                connection.exec_driver_sql(statement)
            session.execute(insert(migrations_table).values(query=query))

        if not pending:
            logger.debug("%s: schema is up to date (%s migrations)", self._label, len(applied))
        return len(pending)
