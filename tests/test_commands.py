import pytest

from nudge.core.errors import ValidationError
from nudge.schemas.commands import Period, PeriodUnit, ReminderInput, validate_input


@pytest.mark.parametrize(
    ("text", "length", "unit", "modifier"),
    [
        ("1d", 1, PeriodUnit.day, "+1 days"),
        ("3w", 3, PeriodUnit.week, "+21 days"),
        ("12m", 12, PeriodUnit.month, "+12 months"),
        ("2y", 2, PeriodUnit.year, "+2 years"),
        ("0d", 0, PeriodUnit.day, "+0 days"),
    ],
)
def test_period_parse(text: str, length: int, unit: PeriodUnit, modifier: str) -> None:
    period = Period.parse(text)

    assert period.length == length
    assert period.unit is unit
    assert period.modifier == modifier
    assert str(period) == text


def test_unknown_modifier_lists_the_expected_ones() -> None:
    with pytest.raises(ValidationError) as exc_info:
        Period.parse("5x")

    message = str(exc_info.value)
    assert "Unknown period modifier `x`" in message
    assert "5d  - means every 5 days" in message
    assert "5y  - means every 5 years" in message


def test_reminder_input_accepts_parsed_and_textual_period() -> None:
    parsed = validate_input(ReminderInput, title="t", scheduled_at="2026-02-21", period=Period.parse("1m"))
    textual = validate_input(ReminderInput, title="t", scheduled_at="2026-02-21", period="1m")

    assert parsed.period == textual.period


def test_validation_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        validate_input(ReminderInput, title="", scheduled_at="2026-02-21")
