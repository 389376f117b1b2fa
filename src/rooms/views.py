import asyncio
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.bookings.crud import BookingCRUD
from src.bookings.schemas import BookingInfo
from src.bookings.services import check_in_to_room
from src.cache import (
    RedisCache,
    cache_get_one,
    cache_set,
    dump_list,
    dump_one,
    get_cache,
    invalidate_room,
    key_property_rooms,
    key_room,
    key_rooms_list,
)
from src.common.exception_handlers import handle_view_exception
from src.common.exceptions import ConflictException, NotFoundException
from src.config import settings
from src.database.sessions import get_async_session
from src.properties.crud import property_crud
from src.rooms.crud import room_crud
from src.rooms.models import Room
from src.rooms.responses import (
    CHECK_IN_RESPONSES,
    CREATE_RESPONSES,
    DELETE_RESPONSES,
    GET_BY_ID_RESPONSES,
    GET_RESPONSES,
    UPDATE_RESPONSES,
)
from src.rooms.schemas import RoomCheckIn, RoomCreate, RoomInfo, RoomUpdate


router = APIRouter()

logger = logging.getLogger('app')

ROOM_NOT_FOUND = 'Номер не найден.'


async def _get_room_or_404(db: AsyncSession, room_id: UUID) -> Room:
    """Получает номер или выбрасывает 404."""
    room = await room_crud.get(db, id=room_id)
    if room is None:
        raise NotFoundException(ROOM_NOT_FOUND)
    return room


async def _ensure_room_can_deactivate(db: AsyncSession, room: Room) -> None:
    """Деактивировать можно только номер без гостя и без будущих броней."""
    crud = BookingCRUD(db)
    if await crud.count_checked_in(room.id):
        raise ConflictException(
            'Нельзя удалить номер, в котором проживает гость.',
        )
    if await crud.count_open_bookings(room.id):
        raise ConflictException(
            f'За номером {room.room_no} числятся брони. '
            'Снимите назначение перед удалением.',
        )


async def _ensure_room_no_unique(
    db: AsyncSession,
    property_id: UUID,
    room_no: str,
    exclude_room_id: UUID | None = None,
) -> None:
    """Номер комнаты уникален в пределах объекта."""
    existing = await room_crud.get_by_number(db, property_id, room_no)
    if existing is not None and existing.id != exclude_room_id:
        raise ConflictException(
            f'Номер {room_no} уже есть в этом объекте размещения.',
        )


@router.get(
    '',
    response_model=list[RoomInfo],
    summary='Получение списка номеров',
    description=(
        'Список номеров, отсортированный по номеру комнаты. '
        'property_id ограничивает список одним объектом. '
        'По умолчанию только активные номера.'
    ),
    responses=GET_RESPONSES,
)
async def get_rooms(
    property_id: Optional[UUID] = Query(
        None,
        description='ID объекта размещения',
    ),
    show_all: bool = Query(
        False,
        title='Показывать все номера?',
        description='Включать деактивированные номера.',
    ),
    db: AsyncSession = Depends(get_async_session),
    cache: RedisCache = Depends(get_cache),
) -> list[RoomInfo]:
    """Получение списка номеров."""
    try:
        key = (
            key_property_rooms(property_id, show_all)
            if property_id is not None
            else key_rooms_list(show_all)
        )

        async def load() -> list[dict]:
            rooms = await room_crud.list_rooms(
                db,
                property_id=property_id,
                show_all=show_all,
            )
            return dump_list(RoomInfo, rooms)

        payload = await cache.get_or_set(
            key,
            load,
            ttl=settings.cache.TTL_ROOMS_LIST,
        )
        return [RoomInfo.model_validate(item) for item in payload]

    except asyncio.CancelledError:
        raise

    except Exception as e:
        handle_view_exception(e, 'получении списка номеров')


@router.post(
    '',
    response_model=RoomInfo,
    status_code=status.HTTP_201_CREATED,
    summary='Создание номера',
    description='Новый номер всегда создается свободным.',
    responses=CREATE_RESPONSES,
)
async def create_room(
    room_data: RoomCreate,
    db: AsyncSession = Depends(get_async_session),
) -> RoomInfo:
    """Создает номер в объекте размещения."""
    extra = {'property_id': str(room_data.property_id)}
    try:
        if await property_crud.get_active(db, room_data.property_id) is None:
            raise NotFoundException('Объект размещения не найден.')
        await _ensure_room_no_unique(
            db,
            room_data.property_id,
            room_data.room_no,
        )

        room = await room_crud.create(db, obj_in=room_data)
        await invalidate_room(room.id, room.property_id)

        logger.info(
            'Номер %s (%s) создан',
            room.room_no,
            room.id,
            extra=extra,
        )
        return RoomInfo.model_validate(room)

    except asyncio.CancelledError:
        raise

    except Exception as e:
        await db.rollback()
        handle_view_exception(e, 'создании номера', extra)


@router.get(
    '/{room_id}',
    response_model=RoomInfo,
    summary='Получение номера по ID',
    responses=GET_BY_ID_RESPONSES,
)
async def get_room_by_id(
    room_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    cache: RedisCache = Depends(get_cache),
) -> RoomInfo:
    """Получение номера по ID."""
    extra = {'room_id': str(room_id)}
    try:
        key = key_room(room_id)
        cached = await cache_get_one(cache, key, RoomInfo)
        if cached is not None:
            return RoomInfo.model_validate(cached)

        room = await _get_room_or_404(db, room_id)
        await cache_set(
            cache,
            key,
            dump_one(RoomInfo, room),
            ttl=settings.cache.TTL_ROOM,
        )
        return RoomInfo.model_validate(room)

    except asyncio.CancelledError:
        raise

    except Exception as e:
        handle_view_exception(e, 'получении номера', extra)


@router.patch(
    '/{room_id}',
    response_model=RoomInfo,
    summary='Обновление номера',
    description='Частичное обновление: номер комнаты, статус, активность.',
    responses=UPDATE_RESPONSES,
)
async def update_room(
    room_id: UUID,
    room_data: RoomUpdate,
    db: AsyncSession = Depends(get_async_session),
) -> RoomInfo:
    """Частично обновляет номер."""
    extra = {'room_id': str(room_id)}
    try:
        room = await _get_room_or_404(db, room_id)
        if room_data.room_no is not None:
            await _ensure_room_no_unique(
                db,
                room.property_id,
                room_data.room_no,
                exclude_room_id=room.id,
            )
        if room_data.active is False and room.active:
            await _ensure_room_can_deactivate(db, room)

        room = await room_crud.update(db, db_obj=room, obj_in=room_data)
        await invalidate_room(room.id, room.property_id)

        logger.info('Номер %s обновлен', room_id, extra=extra)
        return RoomInfo.model_validate(room)

    except asyncio.CancelledError:
        raise

    except Exception as e:
        await db.rollback()
        handle_view_exception(e, 'обновлении номера', extra)


@router.delete(
    '/{room_id}',
    status_code=status.HTTP_204_NO_CONTENT,
    summary='Удаление номера',
    description=(
        'Мягкое удаление. Нельзя удалить номер, в котором проживает '
        'гость или за которым числятся брони.'
    ),
    responses=DELETE_RESPONSES,
)
async def delete_room(
    room_id: UUID,
    db: AsyncSession = Depends(get_async_session),
) -> Response:
    """Мягко удаляет номер."""
    extra = {'room_id': str(room_id)}
    try:
        room = await _get_room_or_404(db, room_id)
        await _ensure_room_can_deactivate(db, room)

        room.soft_delete()
        await db.commit()
        await invalidate_room(room.id, room.property_id)

        logger.info('Номер %s деактивирован', room_id, extra=extra)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    except asyncio.CancelledError:
        raise

    except Exception as e:
        await db.rollback()
        handle_view_exception(e, 'удалении номера', extra)


@router.post(
    '/{room_id}/check-in',
    response_model=BookingInfo,
    summary='Заселение брони в номер',
    description=(
        'Одной транзакцией назначает бронь в номер, переводит бронь в '
        'checkin и помечает номер занятым.'
    ),
    responses=CHECK_IN_RESPONSES,
)
async def check_in_room(
    room_id: UUID,
    check_in_data: RoomCheckIn,
    db: AsyncSession = Depends(get_async_session),
) -> BookingInfo:
    """Заселяет бронь в номер."""
    extra = {
        'room_id': str(room_id),
        'booking_id': str(check_in_data.booking_id),
    }
    try:
        room = await room_crud.get_for_update(db, room_id)
        if room is None or not room.active:
            raise NotFoundException(ROOM_NOT_FOUND)

        crud = BookingCRUD(db)
        booking = await check_in_to_room(
            crud,
            room=room,
            booking_id=check_in_data.booking_id,
        )
        await db.commit()
        await crud.refresh_booking(booking)
        await invalidate_room(room.id, room.property_id)

        logger.info(
            'Бронь %s заселена в номер %s',
            booking.id,
            room.room_no,
            extra=extra,
        )
        return BookingInfo.model_validate(booking)

    except asyncio.CancelledError:
        raise

    except Exception as e:
        await db.rollback()
        handle_view_exception(e, 'заселении в номер', extra)
