# src/common/exceptions.py
"""Исключения прикладного уровня.

Каждое исключение знает свой HTTP-статус и текст по умолчанию,
обработчик в exception_handlers превращает его в ответ {code, message}.
"""
from http import HTTPStatus


class AppException(Exception):
    """Базовое исключение приложения."""

    status_code: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message: str = 'Внутренняя ошибка сервера.'

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def code(self) -> int:
        return int(self.status_code)


class NotFoundException(AppException):
    """Объект не найден (404)."""

    status_code = HTTPStatus.NOT_FOUND
    default_message = 'Данные не найдены'


class ConflictException(AppException):
    """Операция противоречит текущему состоянию данных (409)."""

    status_code = HTTPStatus.CONFLICT
    default_message = 'Конфликт данных или нарушение ограничений'


class ValidationErrorException(AppException):
    """Данные не прошли проверку бизнес-правил (422)."""

    status_code = HTTPStatus.UNPROCESSABLE_ENTITY
    default_message = 'Ошибка валидации данных'


class ServiceUnavailableException(AppException):
    """Временная ошибка базы данных (500)."""

    default_message = 'Временная ошибка базы данных. Попробуйте позже.'
