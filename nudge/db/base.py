from sqlalchemy.dialects.sqlite import DATETIME
from sqlalchemy.orm import DeclarativeBase

# Matches CURRENT_TIMESTAMP so rows written by SQL defaults and by Python sort together.
Timestamp = DATETIME(
    storage_format="%(year)04d-%(month)02d-%(day)02d %(hour)02d:%(minute)02d:%(second)02d",
)


class Base(DeclarativeBase):
    pass
