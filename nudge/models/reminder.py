from datetime import datetime

from sqlalchemy import Text, func
from sqlalchemy.orm import Mapped, mapped_column

from nudge.db.base import Base, Timestamp


class Reminder(Base):
    __tablename__ = "Reminders"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(Timestamp, nullable=False, server_default=func.current_timestamp())
    # Kept as text: only the dddd-dd-dd shape is validated, calendar validity is left to SQLite.
    scheduled_at: Mapped[str] = mapped_column(Text, nullable=False)
    # SQLite date modifier such as "+7 days"; NULL for one-shot reminders.
    period: Mapped[str | None] = mapped_column(Text, nullable=True)
    finished_at: Mapped[datetime | None] = mapped_column(Timestamp, nullable=True)
