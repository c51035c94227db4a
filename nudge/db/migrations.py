"""Schema migrations known to this build.

Each entry is recorded verbatim in the ``Migrations`` table once applied and the
ledger compares stored entries to these strings byte for byte. Never edit or
reorder an entry that has shipped; append a new one instead.
"""

LEDGER_TABLE_DDL = (
    "CREATE TABLE IF NOT EXISTS Migrations (\n"
    "    applied_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,\n"
    "    query TEXT NOT NULL\n"
    ");\n"
)

MIGRATIONS: tuple[str, ...] = (
    # initial schema
    "CREATE TABLE IF NOT EXISTS Notifications (\n"
    "    id INTEGER PRIMARY KEY ASC,\n"
    "    title TEXT NOT NULL,\n"
    "    created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,\n"
    "    dismissed_at DATETIME DEFAULT NULL\n"
    ");\n",
    "CREATE TABLE IF NOT EXISTS Reminders (\n"
    "    id INTEGER PRIMARY KEY ASC,\n"
    "    title TEXT NOT NULL,\n"
    "    created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,\n"
    "    scheduled_at DATE NOT NULL,\n"
    "    period TEXT DEFAULT NULL,\n"
    "    finished_at DATETIME DEFAULT NULL\n"
    ");\n",
    # link notifications to the reminder that fired them
    "ALTER TABLE Notifications RENAME TO Notifications_old;\n"
    "CREATE TABLE IF NOT EXISTS Notifications (\n"
    "    id INTEGER PRIMARY KEY ASC,\n"
    "    title TEXT NOT NULL,\n"
    "    created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,\n"
    "    dismissed_at DATETIME DEFAULT NULL,\n"
    "    reminder_id INTEGER DEFAULT NULL,\n"
    "    FOREIGN KEY (reminder_id) REFERENCES Reminders(id)\n"
    ");\n"
    "INSERT INTO Notifications (id, title, created_at, dismissed_at)\n"
    "SELECT id, title, created_at, dismissed_at FROM Notifications_old;\n"
    "DROP TABLE Notifications_old;\n",
)
