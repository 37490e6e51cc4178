import logging

from fastapi import FastAPI

from vizgen.api import router as api_router
from vizgen.core.config import settings


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.log_level)
    logger = logging.getLogger("vizgen")
    logger.info("Starting %s (%s)", settings.app_name, settings.env)

    app = FastAPI(title=settings.app_name)
    app.include_router(api_router)
    return app


app = create_app()
