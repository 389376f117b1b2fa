from datetime import date
from typing import List
from uuid import UUID

from pydantic import BaseModel, Field

from src.bookings.schemas import BookingInfo, BookingWithType
from src.rooms.schemas import RoomInfo


class RoomOccupancy(BaseModel):
    """Занятость одного номера на дату."""

    room: RoomInfo
    is_available: bool = Field(
        description='Номер можно предложить новому гостю на эту дату',
    )
    bookings: List[BookingWithType] = Field(default_factory=list)


class OccupancyInfo(BaseModel):
    """Занятость номеров объекта размещения на дату."""

    date: date
    property_id: UUID
    rooms: List[RoomOccupancy]
    unassigned: List[BookingInfo] = Field(
        default_factory=list,
        description='Брони без номера, которые можно назначить',
    )
