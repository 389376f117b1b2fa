from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.config import settings


def build_engine(url: str) -> AsyncEngine:
    """Движок PostgreSQL с пулом из DatabaseSettings.

    Соединения работают в UTC и подписаны названием приложения
    (видно в pg_stat_activity).
    """
    db = settings.database
    return create_async_engine(
        url,
        pool_size=db.POOL_SIZE,
        max_overflow=db.MAX_OVERFLOW,
        pool_timeout=db.POOL_TIMEOUT,
        pool_recycle=db.POOL_RECYCLE,
        pool_pre_ping=db.POOL_PING,
        echo=db.ECHO_SQL,
        connect_args={
            'server_settings': {
                'timezone': 'UTC',
                'application_name': settings.app.TITLE,
            },
        },
    )


engine = build_engine(settings.database.URL)

AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Сессия на время запроса. Незавершенная транзакция откатывается."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """Сессия вне HTTP-запроса, например в задачах Celery."""
    async with AsyncSessionLocal() as session:
        yield session
