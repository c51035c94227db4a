from sqlalchemy import Column, Table, Text, func

from nudge.db.base import Base, Timestamp

# The ledger has no primary key; rows are ordered by SQLite's implicit rowid.
migrations_table = Table(
    "Migrations",
    Base.metadata,
    Column("applied_at", Timestamp, nullable=False, server_default=func.current_timestamp()),
    Column("query", Text, nullable=False),
)
