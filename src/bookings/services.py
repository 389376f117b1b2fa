"""Сценарии работы с бронями.

Функции меняют объекты в сессии, но не делают commit: транзакцией
управляет эндпоинт, чтобы бронь и номер менялись вместе.
"""

from datetime import date
import logging
from typing import Sequence
from uuid import UUID

from src.bookings.constants import BookingStatus, BookingType
from src.bookings.crud import OPEN_STATUSES, BookingCRUD
from src.bookings.models import Booking
from src.bookings.schemas import BookingCreate, BookingUpdate
from src.bookings.validators import (
    validate_assignable,
    validate_property_active,
    validate_room_belongs,
    validate_room_free_for_stay,
    validate_stay_dates,
    validate_transition,
)
from src.common.exceptions import ConflictException, NotFoundException
from src.common.logging import log_action
from src.occupancy.logic import classify_booking
from src.rooms.models import Room


logger = logging.getLogger('app.booking')


async def _validate_and_create(
    crud: BookingCRUD,
    data: BookingCreate,
) -> Booking:
    """Проверяет объект и номер, затем создает бронь без commit."""
    await validate_property_active(crud, data.property_id)

    if data.room_id is not None:
        room = await validate_room_belongs(
            crud,
            room_id=data.room_id,
            property_id=data.property_id,
        )
        await validate_room_free_for_stay(
            crud,
            room=room,
            check_in=data.check_in_date,
            check_out=data.check_out_date,
        )

    return await crud.create_booking(data)


@log_action('Создание брони')
async def create_booking(
    crud: BookingCRUD,
    *,
    data: BookingCreate,
) -> Booking:
    """Создает бронь в статусе booked."""
    return await _validate_and_create(crud, data)


@log_action('Массовое создание броней')
async def bulk_create_bookings(
    crud: BookingCRUD,
    *,
    rows: Sequence[BookingCreate],
) -> tuple[list[Booking], list[str]]:
    """Создает брони из разобранной выгрузки одной транзакцией.

    Строки, чей reservation_id уже есть у того же объекта размещения
    (в БД или выше в этой же выгрузке), пропускаются.

    Returns:
        Созданные брони и reservation_id пропущенных строк

    """
    seen = await crud.existing_reservations(
        (row.property_id, row.reservation_id)
        for row in rows
        if row.reservation_id
    )

    created: list[Booking] = []
    skipped: list[str] = []
    for row in rows:
        if row.reservation_id:
            key = (row.property_id, row.reservation_id)
            if key in seen:
                skipped.append(row.reservation_id)
                continue
            seen.add(key)
        created.append(await _validate_and_create(crud, row))

    logger.info(
        'Выгрузка: создано %d, пропущено %d',
        len(created),
        len(skipped),
    )
    return created, skipped


@log_action('Обновление брони')
async def update_booking(
    crud: BookingCRUD,
    *,
    booking: Booking,
    data: BookingUpdate,
) -> Booking:
    """Частично обновляет бронь.

    Даты проверяются вместе с сохраненными значениями, а если у брони
    есть номер, то и на пересечение с другими бронями этого номера.
    """
    payload = data.model_dump(exclude_unset=True)
    check_in = payload.get('check_in_date', booking.check_in_date)
    check_out = payload.get('check_out_date', booking.check_out_date)
    validate_stay_dates(check_in, check_out)

    dates_changed = (
        check_in != booking.check_in_date
        or check_out != booking.check_out_date
    )
    if (
        dates_changed
        and booking.room is not None
        and booking.status in OPEN_STATUSES
    ):
        await validate_room_free_for_stay(
            crud,
            room=booking.room,
            check_in=check_in,
            check_out=check_out,
            exclude_booking_id=booking.id,
        )

    return await crud.update(
        crud.db,
        db_obj=booking,
        obj_in=payload,
        commit=False,
    )


@log_action('Назначение номера')
async def assign_room(
    crud: BookingCRUD,
    *,
    booking: Booking,
    room_id: UUID | None,
) -> Booking:
    """Назначает брони номер или снимает назначение (room_id=None).

    Если гость уже заселен, он переезжает: старый номер освобождается,
    новый занимается.
    """
    validate_assignable(booking)

    if room_id is None:
        if booking.status == BookingStatus.CHECKIN:
            raise ConflictException(
                'Нельзя снять номер с брони заселенного гостя.',
            )
        booking.room = None
        return booking

    room = await validate_room_belongs(
        crud,
        room_id=room_id,
        property_id=booking.property_id,
    )
    await validate_room_free_for_stay(
        crud,
        room=room,
        check_in=booking.check_in_date,
        check_out=booking.check_out_date,
        exclude_booking_id=booking.id,
    )

    if booking.status == BookingStatus.CHECKIN and booking.room is not room:
        if booking.room is not None:
            booking.room.release()
        room.occupy()

    booking.room = room
    return booking


async def _ensure_room_vacant(crud: BookingCRUD, room: Room) -> None:
    """В номере не должен числиться другой заселенный гость."""
    if await crud.count_checked_in(room.id):
        raise ConflictException(
            f'В номере {room.room_no} еще проживает другой гость.',
        )


@log_action('Заселение гостя')
async def check_in_booking(
    crud: BookingCRUD,
    *,
    booking: Booking,
) -> Booking:
    """Переводит бронь booked -> checkin, номер становится занятым."""
    validate_transition(booking, BookingStatus.CHECKIN)
    if booking.room is None:
        raise ConflictException('Перед заселением назначьте номер.')
    if not booking.room.active:
        raise ConflictException(
            f'Номер {booking.room.room_no} удален, назначьте другой номер.',
        )
    await _ensure_room_vacant(crud, booking.room)

    booking.check_in()
    return booking


@log_action('Выселение гостя')
async def check_out_booking(
    crud: BookingCRUD,
    *,
    booking: Booking,
) -> Booking:
    """Переводит бронь checkin -> checkout, номер освобождается."""
    validate_transition(booking, BookingStatus.CHECKOUT)
    booking.check_out()
    return booking


@log_action('Отмена брони')
async def cancel_booking(
    crud: BookingCRUD,
    *,
    booking: Booking,
) -> Booking:
    """Отменяет бронь. Занятый гостем номер освобождается."""
    validate_transition(booking, BookingStatus.CANCEL)
    booking.cancel_booking()
    return booking


@log_action('Заселение в номер')
async def check_in_to_room(
    crud: BookingCRUD,
    *,
    room: Room,
    booking_id: UUID,
) -> Booking:
    """Назначает бронь в номер и сразу заселяет гостя.

    Бронь получает номер и статус checkin, номер становится занятым.
    """
    booking = await crud.get_booking_by_id(booking_id)
    if booking is None:
        raise NotFoundException('Бронь не найдена.')

    validate_transition(booking, BookingStatus.CHECKIN)
    if room.property_id != booking.property_id:
        raise ConflictException(
            'Номер относится к другому объекту размещения.',
        )
    await validate_room_free_for_stay(
        crud,
        room=room,
        check_in=booking.check_in_date,
        check_out=booking.check_out_date,
        exclude_booking_id=booking.id,
    )
    await _ensure_room_vacant(crud, room)

    booking.room = room
    booking.check_in()
    return booking


async def bookings_for_date(
    crud: BookingCRUD,
    day: date,
    property_id: UUID | None = None,
) -> list[tuple[Booking, BookingType]]:
    """Брони, покрывающие дату, с типом checkin/checkout/stay."""
    bookings = await crud.list_covering(day, property_id)
    return [
        (b, classify_booking(b.check_in_date, b.check_out_date, day))
        for b in bookings
    ]
