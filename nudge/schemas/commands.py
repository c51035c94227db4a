from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from nudge.core.errors import ValidationError

DATE_PATTERN = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"
_PERIOD_TEXT = re.compile(r"^([0-9]+)(.*)$")


class PeriodUnit(str, Enum):
    day = "d"
    week = "w"
    month = "m"
    year = "y"

    @property
    def plural(self) -> str:
        return {"d": "days", "w": "weeks", "m": "months", "y": "years"}[self.value]


class Period(BaseModel):
    model_config = ConfigDict(frozen=True)

    length: int = Field(ge=0)
    unit: PeriodUnit

    @classmethod
    def parse(cls, text: str) -> Period:
        """Parse the command-line form ``<N><unit>``, e.g. ``3d`` or ``1w``."""
        match = _PERIOD_TEXT.match(text.strip())
        if match is None:
            examples = "\n".join(f"    {n}{unit.value} - means every {n} {unit.plural}" for n, unit in zip((1, 2, 3, 1), PeriodUnit))
            raise ValidationError(f"Invalid period `{text}`. Expected something like\n{examples}")
        length = int(match.group(1))
        modifier = match.group(2)
        try:
            unit = PeriodUnit(modifier)
        except ValueError:
            expected = "\n".join(f"    {length}{unit.value}  - means every {length} {unit.plural}" for unit in PeriodUnit)
            raise ValidationError(f"Unknown period modifier `{modifier}`. Expected modifiers are\n{expected}") from None
        return cls(length=length, unit=unit)

    @property
    def modifier(self) -> str:
        """SQLite date modifier stored in ``Reminders.period``."""
        if self.unit is PeriodUnit.day:
            return f"+{self.length} days"
        if self.unit is PeriodUnit.week:
            return f"+{self.length * 7} days"
        if self.unit is PeriodUnit.month:
            return f"+{self.length} months"
        return f"+{self.length} years"

    def __str__(self) -> str:
        return f"{self.length}{self.unit.value}"


class NotificationInput(BaseModel):
    title: str = Field(min_length=1)


class ReminderInput(BaseModel):
    title: str = Field(min_length=1)
    scheduled_at: str = Field(pattern=DATE_PATTERN)
    period: Period | None = None

    @field_validator("period", mode="before")
    @classmethod
    def parse_period_text(cls, value):
        if isinstance(value, str):
            return Period.parse(value)
        return value


def validate_input(model: type[BaseModel], **data) -> BaseModel:
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        details = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors())
        raise ValidationError(details) from exc
