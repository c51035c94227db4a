from typer.testing import CliRunner

from nudge.cli import build_cli

runner = CliRunner()


def _invoke(settings, *args: str):
    return runner.invoke(build_cli(), ["--database", str(settings.database_path), *args])


def test_noti_new_joins_words_and_lists(settings) -> None:
    result = _invoke(settings, "noti:new", "buy", "more", "coffee")

    assert result.exit_code == 0
    assert "0: buy more coffee (" in result.output


def test_remi_new_rejects_malformed_date(settings) -> None:
    result = _invoke(settings, "remi:new", "dentist", "next-week")

    assert result.exit_code == 1
    assert "ERROR" in result.output
    assert "scheduled_at" in result.output


def test_remi_new_requires_a_date_with_a_title(settings) -> None:
    result = _invoke(settings, "remi:new", "dentist")

    assert result.exit_code == 1
    assert "ERROR: expected scheduled_at" in result.output


def test_remi_new_lists_periodic_reminder(settings) -> None:
    result = _invoke(settings, "remi:new", "backup", "2030-01-01", "2w")

    assert result.exit_code == 0
    assert "0: backup (Scheduled at 2030-01-01 every +14 days)" in result.output


def test_default_command_fires_due_reminders(settings) -> None:
    assert _invoke(settings, "remi:new", "pay rent", "2020-01-01").exit_code == 0

    result = _invoke(settings)

    assert result.exit_code == 0
    assert "0: pay rent (" in result.output
    listed = _invoke(settings, "remi")
    assert "pay rent" not in listed.output


def test_noti_dismiss_reports_count_and_bad_indices(settings) -> None:
    _invoke(settings, "noti:new", "first")
    _invoke(settings, "noti:new", "second")

    result = _invoke(settings, "noti:dismiss", "0", "5")

    assert result.exit_code == 0
    assert "WARNING: 5 is not a valid index of an active notification" in result.output
    assert "0: second (" in result.output
    assert "Dismissed 1 notifications" in result.output


def test_remi_dismiss_out_of_range(settings) -> None:
    result = _invoke(settings, "remi:dismiss", "3")

    assert result.exit_code == 1
    assert "ERROR: 3 is not a valid index of a reminder" in result.output


def test_version_shows_sqlite(settings) -> None:
    result = _invoke(settings, "version")

    assert result.exit_code == 0
    assert "SQLite " in result.output
