from datetime import datetime

import pytest
from sqlalchemy import func, insert, inspect, select

from nudge.core.errors import SchemaDriftError, StoreError
from nudge.db.ledger import MigrationLedger, split_statements
from nudge.db.migrations import LEDGER_TABLE_DDL, MIGRATIONS
from nudge.db.session import build_engine, open_store
from nudge.models.migration import migrations_table
from nudge.models.notification import Notification


def _table_names(settings) -> set[str]:
    engine = build_engine(settings.database_url)
    try:
        return set(inspect(engine).get_table_names())
    finally:
        engine.dispose()


def _seed_ledger(settings, queries: list[str]) -> None:
    engine = build_engine(settings.database_url)
    try:
        with engine.begin() as conn:
            conn.exec_driver_sql(LEDGER_TABLE_DDL)
            for query in queries:
                conn.execute(insert(migrations_table).values(query=query))
    finally:
        engine.dispose()


def test_fresh_database_gets_every_migration(store) -> None:
    with store.transaction() as session:
        applied = MigrationLedger().applied(session)

    assert applied == list(MIGRATIONS)


def test_second_apply_is_a_noop(store) -> None:
    ledger = MigrationLedger()
    with store.transaction() as session:
        assert ledger.apply(session) == 0
        count = session.scalar(select(func.count()).select_from(migrations_table))

    assert count == len(MIGRATIONS)


def test_tampered_ledger_is_rejected_before_anything_runs(settings) -> None:
    tampered = MIGRATIONS[0].replace("id INTEGER", "Id INTEGER", 1)
    assert tampered != MIGRATIONS[0]
    _seed_ledger(settings, [tampered])

    with pytest.raises(SchemaDriftError, match="mismatch in migration 0"):
        open_store(settings)

    assert _table_names(settings) == {"Migrations"}
    engine = build_engine(settings.database_url)
    try:
        with engine.connect() as conn:
            stored = conn.execute(select(migrations_table.c.query)).scalars().all()
    finally:
        engine.dispose()
    assert stored == [tampered]


def test_database_newer_than_application_is_rejected(store) -> None:
    older = MigrationLedger(MIGRATIONS[:2])

    with pytest.raises(SchemaDriftError, match="too new"):
        with store.transaction() as session:
            older.apply(session)


def test_failing_migration_rolls_back_whole_apply(settings) -> None:
    broken = MIGRATIONS + (
        "CREATE TABLE Extra (\n"
        "    id INTEGER PRIMARY KEY\n"
        ");\n"
        "INSERT INTO Missing VALUES (1);\n",
    )

    with pytest.raises(StoreError):
        open_store(settings, ledger=MigrationLedger(broken))

    assert _table_names(settings) == set()


def test_old_notifications_are_copied_forward(settings) -> None:
    partial = open_store(settings, ledger=MigrationLedger(MIGRATIONS[:2]))
    with partial.transaction() as session:
        session.connection().exec_driver_sql(
            "INSERT INTO Notifications (title, created_at) VALUES ('water plants', '2026-02-20 08:00:00')"
        )
    partial.close()

    upgraded = open_store(settings)
    try:
        with upgraded.transaction() as session:
            rows = session.scalars(select(Notification)).all()
            assert [(row.id, row.title, row.reminder_id) for row in rows] == [(1, "water plants", None)]
            assert rows[0].created_at == datetime(2026, 2, 20, 8, 0)
            assert MigrationLedger().applied(session) == list(MIGRATIONS)
    finally:
        upgraded.close()


def test_split_statements_keeps_statement_boundaries() -> None:
    statements = split_statements(MIGRATIONS[2])

    assert len(statements) == 4
    assert statements[0] == "ALTER TABLE Notifications RENAME TO Notifications_old;"
    assert statements[-1] == "DROP TABLE Notifications_old;"
