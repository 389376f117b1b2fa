from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.database.service import DatabaseService
from src.properties.models import Property
from src.properties.schemas import PropertyCreate, PropertyUpdate


class PropertyService(
    DatabaseService[Property, PropertyCreate, PropertyUpdate],
):
    """Сервис для работы с объектами размещения."""

    def __init__(self) -> None:
        """Инициализирует сервис и привязывает его к модели Property."""
        super().__init__(Property)

    async def list_properties(
        self,
        session: AsyncSession,
        show_all: bool = False,
    ) -> Sequence[Property]:
        """Возвращает объекты размещения, отсортированные по названию.

        show_all=False оставляет только активные объекты.
        """
        filters = [] if show_all else [Property.active.is_(True)]
        return await self.get_multi(
            session,
            filters=filters,
            order_by=[Property.name],
        )

    async def get_active(
        self,
        session: AsyncSession,
        property_id: UUID,
    ) -> Optional[Property]:
        """Возвращает активный объект размещения или None."""
        obj = await self.get(session, id=property_id)
        if obj is None or not obj.active:
            return None
        return obj

    async def soft_delete(
        self,
        session: AsyncSession,
        obj: Property,
    ) -> Property:
        """Мягко удаляет объект размещения."""
        obj.soft_delete()
        await session.commit()
        await session.refresh(obj)
        return obj


property_crud = PropertyService()
