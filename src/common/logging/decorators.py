import functools
import inspect
from typing import Any, Callable

from src.common.logging.config import logger


# Сессии, клиенты и ORM-объекты в лог не попадают
SKIPPED_ARGS = frozenset({'session', 'cache', 'crud', 'booking', 'room', 'rows'})
# Персональные данные гостя
MASKED_FIELDS = frozenset({'email', 'phone', 'id_number'})


def _loggable(kwargs: dict[str, Any]) -> dict[str, Any]:
    """Именованные аргументы вызова в виде, пригодном для лога.

    Pydantic-схемы раскрываются в словарь, персональные поля маскируются.
    """
    params: dict[str, Any] = {}
    for name, value in kwargs.items():
        if name in SKIPPED_ARGS:
            continue
        if hasattr(value, 'model_dump'):
            value = {
                field: '[FILTERED]' if field in MASKED_FIELDS else item
                for field, item in value.model_dump(exclude_none=True).items()
            }
        params[name] = value
    return params


class _ActionLog:
    """Сообщения о старте, успехе и неудаче одного действия."""

    def __init__(self, action: str, component: str, quiet: bool) -> None:
        self.action = action
        self.extra = {'component': component}
        self.quiet = quiet

    def started(self, kwargs: dict[str, Any]) -> None:
        if self.quiet:
            return
        params = _loggable(kwargs)
        if params:
            logger.info(
                'Запуск 🚀 %s | параметры: %s',
                self.action,
                params,
                extra=self.extra,
            )
        else:
            logger.info('Запуск 🚀 %s', self.action, extra=self.extra)

    def succeeded(self) -> None:
        if not self.quiet:
            logger.info('Успешно ✅ %s', self.action, extra=self.extra)

    def failed(self, error: Exception) -> None:
        logger.error(
            'Неудача ❌ %s | %s',
            self.action,
            error,
            extra=self.extra,
        )


def log_action(
    action: str,
    component: str = 'BOOKING',
    only_errors: bool = False,
) -> Callable:
    """Декоратор логирования операций сервисного слоя.

    Пишет запуск (с параметрами вызова), успех и неудачу. Исключение
    после записи пробрасывается дальше. Работает с обычными функциями
    и с корутинами.

    Args:
        action: Описание действия для лога
        component: Компонент системы для колонки лога
        only_errors: Писать только неудачи

    Example:
        @log_action('Заселение гостя')
        async def check_in_booking(session, *, booking):
            ...

    """

    def decorator(func: Callable) -> Callable:
        log = _ActionLog(action, component, only_errors)

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                log.started(kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception as exc:
                    log.failed(exc)
                    raise
                log.succeeded()
                return result

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            log.started(kwargs)
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                log.failed(exc)
                raise
            log.succeeded()
            return result

        return wrapper

    return decorator
