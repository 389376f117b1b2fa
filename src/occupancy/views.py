import asyncio
from collections import defaultdict
from datetime import date
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.bookings.constants import BookingType
from src.bookings.crud import BookingCRUD
from src.bookings.models import Booking
from src.bookings.schemas import BookingInfo, BookingWithType
from src.bookings.services import bookings_for_date
from src.common.dates import today_local
from src.common.exception_handlers import handle_view_exception
from src.common.exceptions import NotFoundException
from src.common.responses import retrieve_responses
from src.database.sessions import get_async_session
from src.occupancy.logic import is_room_free_on
from src.occupancy.schemas import OccupancyInfo, RoomOccupancy
from src.rooms.crud import room_crud
from src.rooms.schemas import RoomInfo


router = APIRouter()

logger = logging.getLogger('app')


@router.get(
    '',
    response_model=OccupancyInfo,
    summary='Занятость номеров на дату',
    description=(
        'Для каждого активного номера объекта: брони на дату с типом '
        'checkin/checkout/stay и признак доступности. Дополнительно '
        'возвращаются брони без номера для назначения.'
    ),
    responses=retrieve_responses(),
)
async def get_occupancy(
    property_id: UUID = Query(..., description='ID объекта размещения'),
    day: Optional[date] = Query(
        None,
        alias='date',
        description='Дата (YYYY-MM-DD), по умолчанию сегодня.',
    ),
    session: AsyncSession = Depends(get_async_session),
) -> OccupancyInfo:
    """Собирает занятость номеров объекта на дату."""
    extra = {'property_id': str(property_id)}
    try:
        crud = BookingCRUD(session)
        if await crud.get_property(property_id) is None:
            raise NotFoundException('Объект размещения не найден.')

        selected = day or today_local()
        rooms = await room_crud.list_rooms(session, property_id=property_id)

        by_room: dict[UUID, list[tuple[Booking, BookingType]]] = (
            defaultdict(list)
        )
        for booking, booking_type in await bookings_for_date(
            crud,
            selected,
            property_id,
        ):
            if booking.room_id is not None:
                by_room[booking.room_id].append((booking, booking_type))

        room_items = []
        for room in rooms:
            items = by_room.get(room.id, [])
            room_items.append(
                RoomOccupancy(
                    room=RoomInfo.model_validate(room),
                    is_available=is_room_free_on(
                        (b for b, _ in items),
                        selected,
                    ),
                    bookings=[
                        BookingWithType.from_booking(b, t) for b, t in items
                    ],
                ),
            )

        unassigned = await crud.list_unassigned(property_id)

        logger.info(
            'GET /occupancy: %d номеров, %d без номера на %s',
            len(room_items),
            len(unassigned),
            selected,
            extra=extra,
        )
        return OccupancyInfo(
            date=selected,
            property_id=property_id,
            rooms=room_items,
            unassigned=[BookingInfo.model_validate(b) for b in unassigned],
        )

    except asyncio.CancelledError:
        raise

    except Exception as e:
        handle_view_exception(e, 'получении занятости', extra)
