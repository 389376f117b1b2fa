from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.common.schemas import BaseRead
from src.config import MAX_NAME_LENGTH


class PropertyBase(BaseModel):
    """Общая схема полей объекта размещения."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=MAX_NAME_LENGTH,
        description='Название объекта размещения',
    )

    model_config = ConfigDict(extra='forbid', str_strip_whitespace=True)


class PropertyCreate(PropertyBase):
    """Схема создания объекта размещения."""


class PropertyUpdate(BaseModel):
    """Схема для обновления объекта размещения."""

    name: str | None = Field(
        None,
        min_length=1,
        max_length=MAX_NAME_LENGTH,
    )
    active: bool | None = Field(None, alias='is_active')

    model_config = ConfigDict(
        extra='forbid',
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    @model_validator(mode='after')
    def forbid_nulls(self) -> Self:
        """Валидация явных Null в обновлении объекта."""
        for field in ('name', 'active'):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f'Поле {field} не может быть null')
        return self


class PropertyInfo(BaseRead):
    """Схема полной информации об объекте размещения."""

    name: str

