from pydantic import BaseModel

from nudge.core.clock import format_local
from nudge.services.notification_service import GroupedNotification, NotificationItem
from nudge.services.reminder_service import ReminderListItem


class NotificationView(BaseModel):
    id: int
    title: str
    created_at: str
    dismissed_at: str | None
    reminder_id: int | None
    group_id: int

    @classmethod
    def from_item(cls, item: NotificationItem) -> "NotificationView":
        return cls(
            id=item.id,
            title=item.title,
            created_at=format_local(item.created_at),
            dismissed_at=format_local(item.dismissed_at) or None,
            reminder_id=item.reminder_id,
            group_id=item.group_id,
        )


class GroupView(BaseModel):
    index: int
    notification: NotificationView
    group_id: int
    group_count: int


class ReminderView(BaseModel):
    index: int
    id: int
    title: str
    scheduled_at: str
    period: str | None


class IndexView(BaseModel):
    notifications: list[GroupView]
    reminders: list[ReminderView]

    @classmethod
    def build(cls, groups: list[GroupedNotification], reminders: list[ReminderListItem]) -> "IndexView":
        return cls(
            notifications=[
                GroupView(
                    index=index,
                    notification=NotificationView.from_item(group.notification),
                    group_id=group.group_id,
                    group_count=group.group_count,
                )
                for index, group in enumerate(groups)
            ],
            reminders=[
                ReminderView(
                    index=index,
                    id=item.id,
                    title=item.title,
                    scheduled_at=item.scheduled_at,
                    period=item.period,
                )
                for index, item in enumerate(reminders)
            ],
        )


class VersionView(BaseModel):
    name: str
    version: str
    sqlite_version: str
