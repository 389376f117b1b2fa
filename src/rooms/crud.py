from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.database.service import DatabaseService
from src.rooms.models import Room
from src.rooms.schemas import RoomCreate, RoomUpdate


class RoomService(DatabaseService[Room, RoomCreate, RoomUpdate]):
    """Сервис для работы с номерами объектов размещения."""

    def __init__(self) -> None:
        """Инициализирует сервис и привязывает его к модели Room."""
        super().__init__(Room)

    async def list_rooms(
        self,
        session: AsyncSession,
        property_id: UUID | None = None,
        show_all: bool = False,
    ) -> Sequence[Room]:
        """Возвращает номера, отсортированные по номеру комнаты.

        Args:
            session: Асинхронная сессия БД
            property_id: Ограничить номерами одного объекта
            show_all: Включать деактивированные номера

        """
        filters = []
        if property_id is not None:
            filters.append(Room.property_id == property_id)
        if not show_all:
            filters.append(Room.active.is_(True))
        return await self.get_multi(
            session,
            filters=filters,
            order_by=[Room.room_no],
        )

    async def get_by_number(
        self,
        session: AsyncSession,
        property_id: UUID,
        room_no: str,
    ) -> Optional[Room]:
        """Ищет номер по объекту и номеру комнаты."""
        result = await session.execute(
            select(Room).where(
                Room.property_id == property_id,
                Room.room_no == room_no,
            ),
        )
        return result.scalars().first()

    async def get_for_update(
        self,
        session: AsyncSession,
        room_id: UUID,
    ) -> Optional[Room]:
        """Получает номер с блокировкой строки до конца транзакции."""
        result = await session.execute(
            select(Room).where(Room.id == room_id).with_for_update(),
        )
        return result.scalars().first()


room_crud = RoomService()
