from datetime import date
import logging
from uuid import UUID

from src.bookings.constants import BookingStatus
from src.bookings.crud import BookingCRUD
from src.bookings.models import Booking
from src.common.exceptions import (
    ConflictException,
    NotFoundException,
    ValidationErrorException,
)
from src.occupancy.logic import (
    STAY_DATES_ERROR,
    can_transition,
    stay_dates_valid,
    stays_conflict,
)
from src.properties.models import Property
from src.rooms.models import Room


logger = logging.getLogger('app.booking')


async def validate_property_active(
    crud: BookingCRUD,
    property_id: UUID,
) -> Property:
    """Проверяет, что объект размещения существует и активен."""
    obj = await crud.get_property(property_id)
    if obj is None:
        raise NotFoundException('Объект размещения не найден.')
    return obj


async def validate_room_belongs(
    crud: BookingCRUD,
    *,
    room_id: UUID,
    property_id: UUID,
) -> Room:
    """Проверяет, что номер существует, активен и относится к объекту."""
    room = await crud.get_room(room_id)
    if room is None:
        raise NotFoundException('Номер не найден.')
    if room.property_id != property_id:
        raise ConflictException(
            'Номер относится к другому объекту размещения.',
        )
    return room


async def validate_room_free_for_stay(
    crud: BookingCRUD,
    *,
    room: Room,
    check_in: date,
    check_out: date,
    exclude_booking_id: UUID | None = None,
) -> None:
    """Проверяет, что ночи проживания не пересекаются с другими бронями."""
    others = await crud.list_room_open_bookings(
        room.id,
        exclude_booking_id=exclude_booking_id,
    )
    for other in others:
        if stays_conflict(
            check_in,
            check_out,
            other.check_in_date,
            other.check_out_date,
        ):
            logger.info(
                'Номер %s занят бронью %s (%s - %s)',
                room.room_no,
                other.id,
                other.check_in_date,
                other.check_out_date,
            )
            raise ConflictException(
                f'Номер {room.room_no} занят на даты '
                f'{other.check_in_date} - {other.check_out_date}.',
            )


def validate_stay_dates(check_in: date, check_out: date) -> None:
    """422, если даты нарушают stay_dates_valid."""
    if not stay_dates_valid(check_in, check_out):
        raise ValidationErrorException(STAY_DATES_ERROR)


def validate_transition(booking: Booking, target: BookingStatus) -> None:
    """Проверяет, что переход статуса брони допустим."""
    if not can_transition(booking.status, target):
        raise ConflictException(
            f'Недопустимый переход статуса: {booking.status.value} -> '
            f'{target.value}.',
        )


def validate_assignable(booking: Booking) -> None:
    """Номер можно менять только у открытых броней."""
    if booking.status in (BookingStatus.CANCEL, BookingStatus.CHECKOUT):
        raise ConflictException(
            'Нельзя назначить номер отмененной или завершенной брони.',
        )
