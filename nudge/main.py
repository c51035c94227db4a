import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from nudge.api.routes import router as api_router
from nudge.core.settings import Settings, get_settings
from nudge.db.session import open_store
from nudge.observability.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    configure_logging(settings.log_level)
    app.state.store = open_store(settings)
    logger.info("Viewer started: database=%s", settings.database_path)
    try:
        yield
    finally:
        app.state.store.close()
        logger.info("Viewer stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.include_router(api_router)
    return app
