from typing import Self
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.common.schemas import BaseRead
from src.config import MAX_ROOM_NO_LENGTH
from src.rooms.constants import RoomStatus


class RoomCreate(BaseModel):
    """Схема создания номера.

    Статус не передается: новый номер всегда свободен.
    """

    property_id: UUID = Field(..., description='ID объекта размещения')
    room_no: str = Field(
        ...,
        min_length=1,
        max_length=MAX_ROOM_NO_LENGTH,
        description='Номер комнаты',
    )

    model_config = ConfigDict(extra='forbid', str_strip_whitespace=True)


class RoomUpdate(BaseModel):
    """Схема для обновления номера."""

    room_no: str | None = Field(
        None,
        min_length=1,
        max_length=MAX_ROOM_NO_LENGTH,
    )
    status: RoomStatus | None = None
    active: bool | None = Field(None, alias='is_active')

    model_config = ConfigDict(
        extra='forbid',
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    @model_validator(mode='after')
    def forbid_nulls(self) -> Self:
        """Валидация явных Null в обновлении объекта."""
        for field in self.model_fields_set:
            if getattr(self, field) is None:
                raise ValueError(f'Поле {field} не может быть null')
        return self


class RoomInfo(BaseRead):
    """Схема полной информации о номере."""

    property_id: UUID
    room_no: str
    status: RoomStatus


class RoomCheckIn(BaseModel):
    """Схема заселения брони в номер."""

    booking_id: UUID

    model_config = ConfigDict(extra='forbid')
