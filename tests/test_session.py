import pytest
from sqlalchemy import text

from nudge.core.errors import StoreError
from nudge.db.session import open_store
from nudge.services.notification_service import NotificationService


def _titles(store) -> list[str]:
    with store.transaction() as session:
        return [g.title for g in NotificationService.for_session(session).list_active()]


def test_engine_error_rolls_back_and_becomes_store_error(store, morning) -> None:
    with store.transaction() as session:
        NotificationService.for_session(session).create_notification("kept", now=morning)

    with pytest.raises(StoreError):
        with store.transaction() as session:
            NotificationService.for_session(session).create_notification("lost", now=morning)
            session.execute(text("SELECT * FROM NoSuchTable"))

    assert _titles(store) == ["kept"]


def test_other_errors_propagate_unchanged_and_roll_back(store, morning) -> None:
    with pytest.raises(RuntimeError, match="boom"):
        with store.transaction() as session:
            NotificationService.for_session(session).create_notification("lost", now=morning)
            raise RuntimeError("boom")

    assert _titles(store) == []


def test_reopening_keeps_data(settings, morning) -> None:
    first = open_store(settings)
    with first.transaction() as session:
        NotificationService.for_session(session).create_notification("persisted", now=morning)
    first.close()

    second = open_store(settings)
    try:
        assert _titles(second) == ["persisted"]
    finally:
        second.close()
