from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.orm import Session

from nudge.core.clock import normalize_utc
from nudge.core.errors import ValidationError
from nudge.models.notification import Notification, group_id_for
from nudge.repositories.notification_repository import NotificationRepository
from nudge.schemas.commands import NotificationInput, validate_input


@dataclass(slots=True)
class NotificationItem:
    id: int
    title: str
    created_at: datetime
    dismissed_at: datetime | None
    reminder_id: int | None
    group_id: int

    @classmethod
    def from_model(cls, item: Notification) -> "NotificationItem":
        return cls(
            id=item.id,
            title=item.title,
            created_at=item.created_at,
            dismissed_at=item.dismissed_at,
            reminder_id=item.reminder_id,
            group_id=item.group_id,
        )


@dataclass(slots=True)
class GroupedNotification:
    notification: NotificationItem
    group_id: int
    group_count: int

    @property
    def title(self) -> str:
        return self.notification.title

    @property
    def created_at(self) -> datetime:
        return self.notification.created_at


@dataclass(slots=True)
class DismissResult:
    dismissed_count: int = 0
    invalid_indices: list[int] = field(default_factory=list)


class NotificationService:
    def __init__(self, repository: NotificationRepository) -> None:
        self._repository = repository

    @classmethod
    def for_session(cls, session: Session) -> "NotificationService":
        return cls(NotificationRepository(session))

    def create_notification(self, title: str, now: datetime | None = None) -> NotificationItem:
        data = validate_input(NotificationInput, title=title)
        created = self._repository.create_one(title=data.title, created_at=normalize_utc(now))
        return NotificationItem.from_model(created)

    def load_by_id(self, notification_id: int) -> NotificationItem | None:
        item = self._repository.get(notification_id)
        return NotificationItem.from_model(item) if item is not None else None

    def list_active(self) -> list[GroupedNotification]:
        """
        Undismissed notifications collapsed into groups, oldest first.

        Positions in the returned list are only meaningful until the next write;
        index based commands must list and act inside the same transaction.
        """
        grouped: list[GroupedNotification] = []
        for item, group_id, group_count in self._repository.list_active_groups():
            if group_id != group_id_for(item.id, item.reminder_id):
                raise AssertionError(f"group id mismatch for notification {item.id}: {group_id}")
            if group_count < 1:
                raise AssertionError(f"empty group {group_id} in active listing")
            grouped.append(
                GroupedNotification(
                    notification=NotificationItem.from_model(item),
                    group_id=group_id,
                    group_count=group_count,
                )
            )
        return grouped

    def expand_group(self, group_id: int) -> list[NotificationItem]:
        return [NotificationItem.from_model(item) for item in self._repository.list_active_in_group(group_id)]

    def expand_by_index(self, index: int) -> list[NotificationItem]:
        groups = self.list_active()
        if not 0 <= index < len(groups):
            raise ValidationError(f"{index} is not a valid index of an active notification")
        return self.expand_group(groups[index].group_id)

    def dismiss_group(self, group_id: int, now: datetime | None = None) -> int:
        return self._repository.dismiss_group(group_id, dismissed_at=normalize_utc(now))

    def dismiss_by_indices(self, indices: Iterable[int], now: datetime | None = None) -> DismissResult:
        groups = self.list_active()
        now = normalize_utc(now)
        result = DismissResult()
        for index in indices:
            if not 0 <= index < len(groups):
                result.invalid_indices.append(index)
                continue
            result.dismissed_count += self.dismiss_group(groups[index].group_id, now=now)
        return result
