from datetime import date, datetime, timezone


def utc_now() -> datetime:
    # Stored timestamps are naive UTC, same shape as SQLite's CURRENT_TIMESTAMP.
    return datetime.now(timezone.utc).replace(tzinfo=None, microsecond=0)


def normalize_utc(value: datetime | None) -> datetime:
    if value is None:
        return utc_now()
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.replace(microsecond=0)


def local_today() -> date:
    return datetime.now().astimezone().date()


def to_local(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc).astimezone().replace(tzinfo=None)


def format_local(value: datetime | None) -> str:
    local = to_local(value)
    return local.strftime("%Y-%m-%d %H:%M:%S") if local is not None else ""
