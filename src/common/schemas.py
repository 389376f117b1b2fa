from datetime import datetime, timezone
from uuid import UUID

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
)


class BaseRead(BaseModel):
    """Базовая схема для чтения объектов.

    Содержит общие поля, которые есть у всех моделей.
    """

    id: UUID
    is_active: bool = Field(
        # Стыковка с моделью (active) и с данными из кэша (is_active)
        validation_alias=AliasChoices('active', 'is_active'),
    )
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer('created_at', 'updated_at')
    def serialize_datetime(self, value: datetime) -> str:
        """Сериализовать дату и время в ISO-формат с Z (UTC)."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        return value.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'


class CustomErrorResponse(BaseModel):
    """Схема для пользовательских ошибок."""

    code: int
    message: str

    model_config = ConfigDict(from_attributes=True)
