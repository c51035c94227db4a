import logging
from datetime import datetime

import pytest

from nudge.core.settings import Settings
from nudge.db.session import Store, open_store


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database_path=tmp_path / "nudge.db", log_level="DEBUG", _env_file=None)


@pytest.fixture
def store(settings: Settings):
    opened: Store = open_store(settings)
    yield opened
    opened.close()


@pytest.fixture
def morning() -> datetime:
    return datetime(2026, 2, 21, 9, 0)


@pytest.fixture(autouse=True)
def _drop_cli_log_handlers():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_nudge_handler", False):
            root.removeHandler(handler)
