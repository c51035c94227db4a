from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import Row, func, insert, select, update
from sqlalchemy.orm import Session

from nudge.models.notification import Notification


class NotificationRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_one(self, title: str, created_at: datetime, reminder_id: int | None = None) -> Notification:
        stmt = insert(Notification).returning(Notification)
        result = self._session.execute(
            stmt,
            {
                "title": title,
                "created_at": created_at,
                "reminder_id": reminder_id,
            },
        )
        return result.scalar_one()

    def get(self, notification_id: int) -> Notification | None:
        stmt = select(Notification).where(Notification.id == notification_id)
        return self._session.scalars(stmt).one_or_none()

    def list_active_groups(self) -> Sequence[Row[tuple[Notification, int, int]]]:
        """One row per group of undismissed notifications, represented by its lowest id."""
        groups = (
            select(
                Notification.group_id.label("group_id"),
                func.count().label("group_count"),
                func.min(Notification.id).label("representative_id"),
            )
            .where(Notification.dismissed_at.is_(None))
            .group_by(Notification.group_id)
            .subquery()
        )
        stmt = (
            select(Notification, groups.c.group_id, groups.c.group_count)
            .join(groups, Notification.id == groups.c.representative_id)
            .order_by(Notification.created_at.asc(), Notification.id.asc())
        )
        return self._session.execute(stmt).all()

    def list_active_in_group(self, group_id: int) -> list[Notification]:
        stmt = (
            select(Notification)
            .where(Notification.dismissed_at.is_(None), Notification.group_id == group_id)
            .order_by(Notification.created_at.asc(), Notification.id.asc())
        )
        return list(self._session.scalars(stmt).all())

    def dismiss_group(self, group_id: int, dismissed_at: datetime) -> int:
        stmt = (
            update(Notification)
            .where(Notification.dismissed_at.is_(None), Notification.group_id == group_id)
            .values(dismissed_at=dismissed_at)
            .execution_options(synchronize_session=False)
        )
        result = self._session.execute(stmt)
        self._session.expire_all()
        return result.rowcount or 0
