from datetime import datetime

from sqlalchemy import ColumnElement, ForeignKey, Text, func
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import Mapped, mapped_column

from nudge.db.base import Base, Timestamp


def group_id_for(notification_id: int, reminder_id: int | None) -> int:
    """Group key of a notification: the reminder id, or the negated own id for ad hoc ones.

    Reminder-linked groups are positive and ad hoc groups are negative, which only
    holds while both id sequences stay >= 1.
    """
    if notification_id < 1:
        raise ValueError(f"notification id must be positive, got {notification_id}")
    if reminder_id is None:
        return -notification_id
    if reminder_id < 1:
        raise ValueError(f"reminder id must be positive, got {reminder_id}")
    return reminder_id


class Notification(Base):
    __tablename__ = "Notifications"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(Timestamp, nullable=False, server_default=func.current_timestamp())
    dismissed_at: Mapped[datetime | None] = mapped_column(Timestamp, nullable=True)
    reminder_id: Mapped[int | None] = mapped_column(ForeignKey("Reminders.id"), nullable=True)

    @hybrid_property
    def group_id(self) -> int:
        return group_id_for(self.id, self.reminder_id)

    @group_id.inplace.expression
    @classmethod
    def _group_id_expression(cls) -> ColumnElement[int]:
        return func.coalesce(cls.reminder_id, -cls.id)
