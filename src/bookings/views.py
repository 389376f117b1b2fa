import asyncio
from datetime import date
import logging
from typing import Awaitable, Callable, Iterable, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.bookings.crud import BookingCRUD
from src.bookings.models import Booking
from src.bookings.responses import (
    ACTION_RESPONSES,
    BULK_RESPONSES,
    CREATE_RESPONSES,
    GET_BY_ID_RESPONSES,
    GET_RESPONSES,
)
from src.bookings.schemas import (
    BookingAssign,
    BookingBulkCreate,
    BookingBulkResult,
    BookingCreate,
    BookingInfo,
    BookingUpdate,
    BookingWithType,
)
from src.bookings.services import (
    assign_room,
    bookings_for_date,
    bulk_create_bookings,
    cancel_booking,
    check_in_booking,
    check_out_booking,
    create_booking,
    update_booking,
)
from src.cache import invalidate_room
from src.common.dates import today_local
from src.common.exception_handlers import handle_view_exception
from src.common.exceptions import NotFoundException
from src.database.sessions import get_async_session


router = APIRouter()

logger = logging.getLogger('app.booking')


async def _get_booking_or_404(crud: BookingCRUD, booking_id: UUID) -> Booking:
    """Получает бронь или выбрасывает 404."""
    booking = await crud.get_booking_by_id(booking_id)
    if booking is None:
        raise NotFoundException('Бронь не найдена.')
    return booking


async def _invalidate_rooms(
    room_ids: Iterable[Optional[UUID]],
    property_id: UUID,
) -> None:
    """Сбрасывает кэш номеров, чей статус или брони изменились."""
    for room_id in {r for r in room_ids if r is not None}:
        await invalidate_room(room_id, property_id)


@router.get(
    '',
    response_model=List[BookingWithType],
    summary='Получение списка бронирований',
    description=(
        'Режимы: unassigned=true - брони без номера; active=true - '
        'заселенные гости; иначе - занятость на дату (по умолчанию '
        'сегодня) с типом checkin/checkout/stay.'
    ),
    responses=GET_RESPONSES,
)
async def get_all_bookings(
    property_id: Optional[UUID] = Query(
        None,
        description='ID объекта размещения. Если не задано - все объекты.',
    ),
    day: Optional[date] = Query(
        None,
        alias='date',
        description='Дата занятости (YYYY-MM-DD), по умолчанию сегодня.',
    ),
    unassigned: bool = Query(False, description='Только брони без номера'),
    active: bool = Query(False, description='Только заселенные гости'),
    session: AsyncSession = Depends(get_async_session),
) -> list[BookingWithType]:
    """Обработчик GET /bookings для получения списка бронирований."""
    try:
        crud = BookingCRUD(session)

        if unassigned:
            bookings = await crud.list_unassigned(property_id)
            return [BookingWithType.from_booking(b) for b in bookings]

        if active:
            bookings = await crud.list_active(property_id)
            return [BookingWithType.from_booking(b) for b in bookings]

        selected = day or today_local()
        items = await bookings_for_date(crud, selected, property_id)
        logger.info(
            'GET /bookings: %d броней на %s',
            len(items),
            selected,
        )
        return [
            BookingWithType.from_booking(b, booking_type)
            for b, booking_type in items
        ]

    except asyncio.CancelledError:
        raise

    except Exception as e:
        handle_view_exception(e, 'получении списка бронирований')


@router.post(
    '',
    response_model=BookingInfo,
    status_code=status.HTTP_201_CREATED,
    summary='Создать бронирование',
    description='Создать бронь в статусе booked. Номер можно не указывать.',
    responses=CREATE_RESPONSES,
)
async def create_new_booking(
    booking_data: BookingCreate,
    session: AsyncSession = Depends(get_async_session),
) -> BookingInfo:
    """Создаёт новое бронирование."""
    try:
        crud = BookingCRUD(session)
        booking = await create_booking(crud, data=booking_data)
        await session.commit()
        await crud.refresh_booking(booking)

        logger.info(
            'Бронирование %s успешно создано',
            booking.id,
            extra={'booking_id': str(booking.id)},
        )
        return BookingInfo.model_validate(booking)

    except asyncio.CancelledError:
        raise

    except Exception as e:
        await session.rollback()
        handle_view_exception(e, 'создании брони')


@router.post(
    '/bulk',
    response_model=BookingBulkResult,
    status_code=status.HTTP_201_CREATED,
    summary='Массовое создание бронирований',
    description=(
        'Создает брони из уже разобранных строк выгрузки одной '
        'транзакцией. Строки с reservation_id, который уже есть у объекта, '
        'пропускаются.'
    ),
    responses=BULK_RESPONSES,
)
async def create_bookings_bulk(
    bulk_data: BookingBulkCreate,
    session: AsyncSession = Depends(get_async_session),
) -> BookingBulkResult:
    """Создаёт брони пачкой."""
    try:
        crud = BookingCRUD(session)
        created, skipped = await bulk_create_bookings(
            crud,
            rows=bulk_data.bookings,
        )
        await session.commit()
        for booking in created:
            await crud.refresh_booking(booking)

        return BookingBulkResult(
            created=[BookingInfo.model_validate(b) for b in created],
            skipped=skipped,
        )

    except asyncio.CancelledError:
        raise

    except Exception as e:
        await session.rollback()
        handle_view_exception(e, 'массовом создании броней')


@router.get(
    '/{booking_id}',
    response_model=BookingInfo,
    summary='Получение информации о бронировании по ID',
    responses=GET_BY_ID_RESPONSES,
)
async def get_booking_by_id(
    booking_id: UUID,
    session: AsyncSession = Depends(get_async_session),
) -> BookingInfo:
    """Получает бронирование по ID."""
    try:
        booking = await _get_booking_or_404(BookingCRUD(session), booking_id)
        return BookingInfo.model_validate(booking)

    except asyncio.CancelledError:
        raise

    except Exception as e:
        handle_view_exception(
            e,
            'получении брони',
            {'booking_id': str(booking_id)},
        )


@router.patch(
    '/{booking_id}',
    response_model=BookingInfo,
    summary='Частичное обновление бронирования',
    description=(
        'Обновляет данные гостя, оплаты и даты. Даты проверяются вместе '
        'с сохраненными значениями.'
    ),
    responses=GET_BY_ID_RESPONSES,
)
async def patch_booking(
    booking_id: UUID,
    booking_data: BookingUpdate,
    session: AsyncSession = Depends(get_async_session),
) -> BookingInfo:
    """Частично обновляет бронирование."""
    extra = {'booking_id': str(booking_id)}
    try:
        crud = BookingCRUD(session)
        booking = await _get_booking_or_404(crud, booking_id)
        booking = await update_booking(
            crud,
            booking=booking,
            data=booking_data,
        )
        await session.commit()
        await crud.refresh_booking(booking)

        logger.info('Бронирование %s обновлено', booking_id, extra=extra)
        return BookingInfo.model_validate(booking)

    except asyncio.CancelledError:
        raise

    except Exception as e:
        await session.rollback()
        handle_view_exception(e, 'обновлении брони', extra)


@router.post(
    '/{booking_id}/assign',
    response_model=BookingInfo,
    summary='Назначение номера брони',
    description=(
        'Привязывает бронь к номеру (room_id) или снимает привязку '
        '(room_id=null). Номер должен относиться к тому же объекту и быть '
        'свободен на даты проживания.'
    ),
    responses=ACTION_RESPONSES,
)
async def assign_booking_room(
    booking_id: UUID,
    assign_data: BookingAssign,
    session: AsyncSession = Depends(get_async_session),
) -> BookingInfo:
    """Назначает номер брони."""
    extra = {'booking_id': str(booking_id)}
    try:
        crud = BookingCRUD(session)
        booking = await _get_booking_or_404(crud, booking_id)
        previous_room_id = booking.room_id

        booking = await assign_room(
            crud,
            booking=booking,
            room_id=assign_data.room_id,
        )
        await session.commit()
        await crud.refresh_booking(booking)
        await _invalidate_rooms(
            (previous_room_id, booking.room_id),
            booking.property_id,
        )

        logger.info(
            'Брони %s назначен номер %s',
            booking_id,
            booking.room_no,
            extra=extra,
        )
        return BookingInfo.model_validate(booking)

    except asyncio.CancelledError:
        raise

    except Exception as e:
        await session.rollback()
        handle_view_exception(e, 'назначении номера', extra)


async def _run_status_action(
    session: AsyncSession,
    booking_id: UUID,
    action: Callable[..., Awaitable[Booking]],
    action_name: str,
) -> BookingInfo:
    """Общий сценарий смены статуса брони с синхронизацией номера."""
    extra = {'booking_id': str(booking_id)}
    try:
        crud = BookingCRUD(session)
        booking = await _get_booking_or_404(crud, booking_id)
        booking = await action(crud, booking=booking)
        await session.commit()
        await crud.refresh_booking(booking)
        await _invalidate_rooms((booking.room_id,), booking.property_id)

        logger.info(
            'Бронь %s: статус %s',
            booking_id,
            booking.status.value,
            extra=extra,
        )
        return BookingInfo.model_validate(booking)

    except asyncio.CancelledError:
        raise

    except Exception as e:
        await session.rollback()
        handle_view_exception(e, action_name, extra)


@router.post(
    '/{booking_id}/check-in',
    response_model=BookingInfo,
    summary='Заселение гостя',
    description='booked -> checkin. Назначенный номер становится занятым.',
    responses=ACTION_RESPONSES,
)
async def check_in(
    booking_id: UUID,
    session: AsyncSession = Depends(get_async_session),
) -> BookingInfo:
    """Заселяет гостя."""
    return await _run_status_action(
        session,
        booking_id,
        check_in_booking,
        'заселении гостя',
    )


@router.post(
    '/{booking_id}/check-out',
    response_model=BookingInfo,
    summary='Выселение гостя',
    description=(
        'checkin -> checkout. Номер освобождается, связь с номером '
        'сохраняется для истории.'
    ),
    responses=ACTION_RESPONSES,
)
async def check_out(
    booking_id: UUID,
    session: AsyncSession = Depends(get_async_session),
) -> BookingInfo:
    """Выселяет гостя."""
    return await _run_status_action(
        session,
        booking_id,
        check_out_booking,
        'выселении гостя',
    )


@router.delete(
    '/{booking_id}',
    response_model=BookingInfo,
    summary='Отмена бронирования',
    description=(
        'Мягкое удаление: статус cancel. Если гость был заселен, номер '
        'освобождается.'
    ),
    responses=ACTION_RESPONSES,
)
async def delete_booking(
    booking_id: UUID,
    session: AsyncSession = Depends(get_async_session),
) -> BookingInfo:
    """Отменяет бронирование."""
    return await _run_status_action(
        session,
        booking_id,
        cancel_booking,
        'отмене брони',
    )
