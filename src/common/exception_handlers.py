# src/common/exception_handlers.py
"""Обработчики исключений для FastAPI приложения."""
from http import HTTPStatus
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DatabaseError, IntegrityError

from src.common.exceptions import (
    AppException,
    ConflictException,
    NotFoundException,
    ServiceUnavailableException,
    ValidationErrorException,
)
from src.common.schemas import CustomErrorResponse


logger = logging.getLogger('app')


def _error_response(status_code: int, message: str) -> JSONResponse:
    """Собирает JSON-ответ об ошибке в едином формате."""
    body = CustomErrorResponse(code=status_code, message=message).model_dump()
    return JSONResponse(status_code=status_code, content=body)


def add_exception_handlers(app: FastAPI) -> None:
    """Добавляет обработчики Кастомных исключений в наше приложение."""
    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request,
        exc: AppException,
    ) -> JSONResponse:
        # Универсальный обработчик наших кастомных исключений
        return _error_response(exc.code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        # 400 - если в запрос пришел невалидный JSON
        # 422 - если JSON валиден, но не проходит валидацию по схеме
        errors = exc.errors()
        is_json_decode_error = any(
            err.get('type') in ('json_invalid', 'value_error.jsondecode')
            for err in errors
        )

        if is_json_decode_error:
            return _error_response(
                HTTPStatus.BAD_REQUEST.value,
                'Ошибка в параметрах запроса, проверьте JSON',
            )

        first = errors[0] if errors else {}
        location = '.'.join(
            str(part) for part in first.get('loc', ()) if part != 'body'
        )
        message = 'Ошибка валидации данных'
        if first.get('msg'):
            message += f': {location} {first["msg"]}'.rstrip()
        return _error_response(HTTPStatus.UNPROCESSABLE_ENTITY.value, message)


def handle_view_exception(
    e: Exception,
    action: str,
    extra: dict[str, str] | None = None,
) -> None:
    """Централизованная обработка исключений в эндпоинтах.

    Переводит исключения сервисного слоя и БД в AppException,
    который отдается клиенту в формате {code, message}.

    Args:
        e: Возникшее исключение.
        action: Действие для лога (например, 'создании номера').
        extra: Идентификаторы сущностей для лога.

    """
    extra = extra or {}

    if isinstance(e, AppException):
        logger.warning(
            'Ошибка при %s: %s',
            action,
            e.message,
            extra=extra,
        )
        raise e

    if isinstance(e, ValueError):
        logger.warning(
            'Ошибка валидации при %s: %s',
            action,
            str(e),
            extra=extra,
        )
        raise ValidationErrorException(str(e)) from e

    if isinstance(e, LookupError):
        logger.warning('Не найдено при %s: %s', action, str(e), extra=extra)
        raise NotFoundException(str(e)) from e

    if isinstance(e, IntegrityError):
        logger.error(
            'Ошибка целостности данных при %s: %s',
            action,
            str(e),
            extra=extra,
        )
        raise ConflictException(
            'Конфликт данных: возможно, дублирующая запись или '
            'нарушение ограничений.',
        ) from e

    if isinstance(e, DatabaseError):
        logger.error(
            'Ошибка базы данных при %s: %s',
            action,
            str(e),
            extra=extra,
        )
        raise ServiceUnavailableException() from e

    logger.critical(
        'Неожиданная ошибка при %s: %s',
        action,
        str(e),
        extra=extra,
        exc_info=True,
    )
    raise ServiceUnavailableException('Внутренняя ошибка сервера.') from e
