from celery.utils.log import get_task_logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from celery import Task
from src.bookings.constants import BookingStatus
from src.bookings.models import Booking
from src.cache import cache, invalidate_room
from src.celery.utils import run_async
from src.celery.celery_app import celery_app
from src.database.sessions import session_scope
from src.rooms.constants import RoomStatus
from src.rooms.models import Room


logger = get_task_logger(__name__)


async def reconcile_room_statuses(session: AsyncSession) -> int:
    """Приводит статусы активных номеров в соответствие с бронями.

    Номер занят тогда и только тогда, когда на нем числится бронь
    в статусе checkin.

    Returns:
        Количество номеров, чей статус был исправлен

    """
    occupied_ids = set(
        (
            await session.scalars(
                select(Booking.room_id).where(
                    Booking.status == BookingStatus.CHECKIN,
                    Booking.room_id.is_not(None),
                ),
            )
        ).all(),
    )
    rooms = (
        await session.scalars(select(Room).where(Room.active.is_(True)))
    ).all()

    changed: list[Room] = []
    for room in rooms:
        expected = (
            RoomStatus.OCCUPIED
            if room.id in occupied_ids
            else RoomStatus.AVAILABLE
        )
        if room.status != expected:
            logger.warning(
                'Номер %s (%s): статус %s -> %s',
                room.room_no,
                room.id,
                room.status.value,
                expected.value,
            )
            room.status = expected
            changed.append(room)

    if changed:
        await session.commit()
        for room in changed:
            await invalidate_room(room.id, room.property_id)

    logger.info(
        'Сверка статусов номеров: проверено %d, исправлено %d',
        len(rooms),
        len(changed),
    )
    return len(changed)


async def _sync_room_statuses_async() -> int:
    # Воркер не проходит lifespan FastAPI, кэш подключается здесь
    async with cache.connected(), session_scope() as session:
        return await reconcile_room_statuses(session)


@celery_app.task(
    bind=True,
    name='src.celery.tasks.room_status.sync_room_statuses',
    retry_backoff=True,
    retry_kwargs={'max_retries': 5},
)
def sync_room_statuses(self: Task) -> int:
    """Ежедневная сверка статусов номеров с бронями.

    Обычно запускается Celery Beat раз в день.
    """
    return run_async(_sync_room_statuses_async())
