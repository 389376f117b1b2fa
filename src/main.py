from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from src.api import main_router
from src.cache.client import cache
from src.common.exception_handlers import add_exception_handlers
from src.common.logging import configure_logging
from src.config import settings
import src.models  # noqa: F401


logger = configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Подключает кэш на старте и закрывает его при остановке."""
    logger.info('Старт %s', app.title)
    await cache.connect()
    try:
        yield
    finally:
        await cache.close()
        logger.info('Остановка %s', app.title)


def create_app() -> FastAPI:
    application = FastAPI(title=settings.app.TITLE, lifespan=lifespan)
    add_exception_handlers(application)
    application.include_router(main_router)
    return application


app = create_app()
