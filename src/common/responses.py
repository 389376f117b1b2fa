"""Стандартные ответы API.

Содержит предопределенные ответы для различных HTTP статус кодов,
используемые в эндпоинтах API для обеспечения консистентности.
"""

from http import HTTPStatus
from typing import Any, Dict, Type

from pydantic import BaseModel

from src.common.schemas import CustomErrorResponse


Responses = Dict[int | str, Dict[str, Any]]


def error_response(status_code: HTTPStatus, description: str) -> Responses:
    """Создает шаблон ответа об ошибке с заданным статусом и описанием."""
    return {
        status_code.value: {
            'description': description,
            'model': CustomErrorResponse,
        },
    }


def success_response(
    status_code: HTTPStatus,
    schema: Type[BaseModel],
) -> Responses:
    """Создает шаблон успешного ответа со схемой."""
    return {
        status_code.value: {
            'description': 'Успешно',
            'model': schema,
        },
    }


OK_RESPONSES: Responses = {
    HTTPStatus.OK.value: {'description': 'Успешно'},
}

NO_CONTENT_RESPONSES: Responses = {
    HTTPStatus.NO_CONTENT.value: {'description': 'Успешно'},
}

# --- Базовые ошибки ---
ERROR_400 = error_response(
    HTTPStatus.BAD_REQUEST,
    'Ошибка в параметрах запроса',
)
ERROR_404 = error_response(
    HTTPStatus.NOT_FOUND,
    'Данные не найдены',
)
ERROR_409 = error_response(
    HTTPStatus.CONFLICT,
    'Конфликт с текущим состоянием данных',
)
ERROR_422 = error_response(
    HTTPStatus.UNPROCESSABLE_ENTITY,
    'Ошибка валидации данных',
)


def list_responses() -> Responses:
    """Ответы для эндпоинтов получения списка."""
    return {**OK_RESPONSES, **ERROR_422}


def create_responses(schema: Type[BaseModel]) -> Responses:
    """Ответы для эндпоинтов создания объекта."""
    return {
        **success_response(HTTPStatus.CREATED, schema),
        **ERROR_400,
        **ERROR_404,
        **ERROR_409,
        **ERROR_422,
    }


def retrieve_responses() -> Responses:
    """Ответы для эндпоинтов получения/обновления объекта по ID."""
    return {**OK_RESPONSES, **ERROR_400, **ERROR_404, **ERROR_422}


def action_responses() -> Responses:
    """Ответы для эндпоинтов смены статуса (заселение, выселение и т.д.)."""
    return {**OK_RESPONSES, **ERROR_404, **ERROR_409, **ERROR_422}


def delete_responses() -> Responses:
    """Ответы для эндпоинтов мягкого удаления."""
    return {**NO_CONTENT_RESPONSES, **ERROR_404, **ERROR_409}
