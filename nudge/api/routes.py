import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from nudge.core.errors import StoreError
from nudge.core.version import package_version, sqlite_version
from nudge.db.session import Store
from nudge.schemas.views import IndexView, NotificationView, VersionView
from nudge.services.notification_service import NotificationService
from nudge.services.reminder_service import ReminderService

router = APIRouter()
logger = logging.getLogger(__name__)


def get_store(request: Request) -> Store:
    return request.app.state.store


@router.get("/healthz")
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/")
def index(store: Store = Depends(get_store)) -> IndexView:
    # Read only: the viewer never fires reminders.
    try:
        with store.transaction() as session:
            groups = NotificationService.for_session(session).list_active()
            reminders = ReminderService.for_session(session).list_active()
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal Server Error") from exc
    return IndexView.build(groups, reminders)


@router.get("/notif/{notif_id}")
def notification_page(notif_id: int, store: Store = Depends(get_store)) -> NotificationView:
    try:
        with store.transaction() as session:
            item = NotificationService.for_session(session).load_by_id(notif_id)
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal Server Error") from exc
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return NotificationView.from_item(item)


@router.get("/version")
def version_page(request: Request) -> VersionView:
    return VersionView(
        name=request.app.state.settings.app_name,
        version=package_version(),
        sqlite_version=sqlite_version(),
    )
