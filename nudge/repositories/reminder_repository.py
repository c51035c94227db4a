from datetime import date, datetime

from sqlalchemy import func, insert, literal, select, update
from sqlalchemy.orm import Session

from nudge.db.base import Timestamp
from nudge.models.notification import Notification
from nudge.models.reminder import Reminder


class ReminderRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_one(
        self,
        title: str,
        scheduled_at: str,
        period: str | None,
        created_at: datetime,
    ) -> Reminder:
        stmt = insert(Reminder).returning(Reminder)
        result = self._session.execute(
            stmt,
            {
                "title": title,
                "scheduled_at": scheduled_at,
                "period": period,
                "created_at": created_at,
            },
        )
        return result.scalar_one()

    def list_active(self) -> list[Reminder]:
        stmt = (
            select(Reminder)
            .where(Reminder.finished_at.is_(None))
            .order_by(Reminder.scheduled_at.desc(), Reminder.id.desc())
        )
        return list(self._session.scalars(stmt).all())

    def finish(self, reminder_id: int, finished_at: datetime) -> int:
        stmt = (
            update(Reminder)
            .where(Reminder.id == reminder_id, Reminder.finished_at.is_(None))
            .values(finished_at=finished_at)
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(stmt)
        self._session.expire_all()
        return result.rowcount or 0

    def fire_due(self, today: date, created_at: datetime) -> int:
        """Insert one notification per due reminder. Must run before the reminders are updated."""
        due = select(Reminder.title, Reminder.id, literal(created_at, Timestamp)).where(
            Reminder.finished_at.is_(None),
            Reminder.scheduled_at <= today.isoformat(),
        )
        stmt = insert(Notification.__table__).from_select(["title", "reminder_id", "created_at"], due)
        result = self._session.execute(stmt)
        return result.rowcount or 0

    def finish_due_one_shot(self, today: date, finished_at: datetime) -> int:
        stmt = (
            update(Reminder)
            .where(
                Reminder.finished_at.is_(None),
                Reminder.scheduled_at <= today.isoformat(),
                Reminder.period.is_(None),
            )
            .values(finished_at=finished_at)
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(stmt)
        self._session.expire_all()
        return result.rowcount or 0

    def reschedule_due_periodic(self, today: date) -> int:
        # Advance from the current scheduled_at, not from today, to keep the reminder's phase.
        stmt = (
            update(Reminder)
            .where(
                Reminder.finished_at.is_(None),
                Reminder.scheduled_at <= today.isoformat(),
                Reminder.period.is_not(None),
            )
            .values(scheduled_at=func.date(Reminder.scheduled_at, Reminder.period))
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(stmt)
        self._session.expire_all()
        return result.rowcount or 0
