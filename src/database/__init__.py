from src.database.base import Base
from src.database.service import DatabaseService
from src.database.sessions import (
    AsyncSessionLocal,
    engine,
    get_async_session,
    session_scope,
)


__all__ = [
    'AsyncSessionLocal',
    'Base',
    'DatabaseService',
    'engine',
    'get_async_session',
    'session_scope',
]
