from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol

from sqlalchemy.orm import Session

from nudge.core.clock import local_today, normalize_utc
from nudge.repositories.reminder_repository import ReminderRepository

logger = logging.getLogger(__name__)


class DueReminderRepository(Protocol):
    def fire_due(self, today: date, created_at: datetime) -> int: ...

    def finish_due_one_shot(self, today: date, finished_at: datetime) -> int: ...

    def reschedule_due_periodic(self, today: date) -> int: ...


@dataclass(slots=True)
class FireResult:
    fired: int
    finished: int
    rescheduled: int


def fire_due_with_repository(
    *,
    repository: DueReminderRepository,
    today: date | None = None,
    now: datetime | None = None,
) -> FireResult:
    """
    Turn every due reminder into a notification, then retire or advance it.

    Due means active with scheduled_at on or before ``today`` (local calendar day).
    The notifications are inserted first so each due reminder fires exactly once
    per call. A periodic reminder with a zero-length period is not advanced and
    fires again on the next call.
    """
    today = today or local_today()
    now = normalize_utc(now)

    fired = repository.fire_due(today, created_at=now)
    finished = repository.finish_due_one_shot(today, finished_at=now)
    rescheduled = repository.reschedule_due_periodic(today)
    return FireResult(fired=fired, finished=finished, rescheduled=rescheduled)


def fire_due_reminders(session: Session, today: date | None = None, now: datetime | None = None) -> FireResult:
    result = fire_due_with_repository(repository=ReminderRepository(session), today=today, now=now)
    if result.fired:
        logger.info(
            "Due reminders fired: count=%s finished=%s rescheduled=%s",
            result.fired,
            result.finished,
            result.rescheduled,
        )
    return result
