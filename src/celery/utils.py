"""Вспомогательные функции для воркера Celery."""

import asyncio
from typing import Any, Coroutine
from urllib.parse import urlsplit, urlunsplit


_runner: asyncio.Runner | None = None


def build_redis_url(base_url: str, password: str | None, db: int) -> str:
    """URL Redis с паролем и номером базы (брокер и бэкенд Celery).

    Номер базы из base_url заменяется на db, пароль из настроек
    имеет приоритет над указанным в URL.
    """
    parts = urlsplit(base_url or 'redis://localhost:6379')
    netloc = f'{parts.hostname or "localhost"}:{parts.port or 6379}'
    secret = password or parts.password
    if secret:
        netloc = f':{secret}@{netloc}'
    return urlunsplit((parts.scheme or 'redis', netloc, f'/{db}', '', ''))


def run_async(coro: Coroutine[Any, Any, Any]) -> Any:
    """Выполняет корутину задачи в общем event loop процесса.

    Пул соединений SQLAlchemy привязан к loop, поэтому loop один
    на весь процесс воркера и не закрывается между задачами.
    """
    global _runner
    if _runner is None:
        _runner = asyncio.Runner()
    return _runner.run(coro)
