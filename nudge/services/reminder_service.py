from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from nudge.core.clock import normalize_utc
from nudge.core.errors import ValidationError
from nudge.models.reminder import Reminder
from nudge.repositories.reminder_repository import ReminderRepository
from nudge.schemas.commands import Period, ReminderInput, validate_input


@dataclass(slots=True)
class ReminderListItem:
    id: int
    title: str
    scheduled_at: str
    period: str | None


class ReminderService:
    def __init__(self, repository: ReminderRepository) -> None:
        self._repository = repository

    @classmethod
    def for_session(cls, session: Session) -> "ReminderService":
        return cls(ReminderRepository(session))

    def create_reminder(
        self,
        title: str,
        scheduled_at: str,
        period: Period | str | None = None,
        now: datetime | None = None,
    ) -> Reminder:
        # Only the dddd-dd-dd shape is checked; "2024-13-40" is accepted and left to SQLite.
        data = validate_input(ReminderInput, title=title, scheduled_at=scheduled_at, period=period)
        return self._repository.create_one(
            title=data.title,
            scheduled_at=data.scheduled_at,
            period=data.period.modifier if data.period is not None else None,
            created_at=normalize_utc(now),
        )

    def list_active(self) -> list[ReminderListItem]:
        return [
            ReminderListItem(
                id=item.id,
                title=item.title,
                scheduled_at=item.scheduled_at,
                period=item.period,
            )
            for item in self._repository.list_active()
        ]

    def remove_reminder(self, reminder_id: int, now: datetime | None = None) -> int:
        """Finish an active reminder without deleting it. Returns 0 if it was not active."""
        return self._repository.finish(reminder_id, finished_at=normalize_utc(now))

    def remove_by_index(self, index: int, now: datetime | None = None) -> ReminderListItem:
        items = self.list_active()
        if not 0 <= index < len(items):
            raise ValidationError(f"{index} is not a valid index of a reminder")
        item = items[index]
        self.remove_reminder(item.id, now=now)
        return item
