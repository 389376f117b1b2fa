"""Общий слой доступа к данным.

DatabaseService дает типовые операции над одной моделью, доменные
сервисы (PropertyService, RoomService, BookingCRUD) наследуют его и
добавляют свои выборки.
"""

from typing import Any, Generic, Sequence, Type, TypeVar
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.database.base import Base


ModelType = TypeVar('ModelType', bound=Base)
CreateSchemaType = TypeVar('CreateSchemaType', bound=BaseModel)
UpdateSchemaType = TypeVar('UpdateSchemaType', bound=BaseModel)


def _as_dict(
    data: BaseModel | dict[str, Any],
    *,
    exclude_unset: bool,
) -> dict[str, Any]:
    if isinstance(data, dict):
        return data
    return data.model_dump(exclude_unset=exclude_unset)


class DatabaseService(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Типовые операции над моделью.

    create и update по умолчанию фиксируют транзакцию. С commit=False
    изменения только отправляются в БД (flush), а commit делает вызывающий
    код: так бронь и номер меняются одной транзакцией.

    Example:
        class RoomService(DatabaseService[Room, RoomCreate, RoomUpdate]):
            def __init__(self) -> None:
                super().__init__(Room)

    """

    def __init__(self, model: Type[ModelType]) -> None:
        self.model = model

    def _filtered(self, **filters: Any) -> Select:
        """SELECT модели с условиями поле=значение.

        Список превращается в IN, None и bool сравниваются через IS.
        Неизвестные поля игнорируются.
        """
        stmt = select(self.model)
        for name, value in filters.items():
            column = getattr(self.model, name, None)
            if column is None:
                continue
            if isinstance(value, (list, tuple, set)):
                stmt = stmt.where(column.in_(list(value)))
            elif value is None or isinstance(value, bool):
                stmt = stmt.where(column.is_(value))
            else:
                stmt = stmt.where(column == value)
        return stmt

    async def get(
        self,
        session: AsyncSession,
        *,
        id: UUID,
    ) -> ModelType | None:
        """Объект по первичному ключу или None."""
        result = await session.execute(
            select(self.model).where(self.model.id == id),
        )
        return result.scalars().first()

    async def get_multi(
        self,
        session: AsyncSession,
        *,
        filters: Sequence[Any] | None = None,
        order_by: Sequence[Any] | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> Sequence[ModelType]:
        """Список объектов.

        Args:
            session: Асинхронная сессия БД
            filters: SQLAlchemy-условия, объединяются через AND
            order_by: Выражения сортировки
            skip: Сколько записей пропустить
            limit: Максимум записей (None - без ограничения)

        """
        stmt = select(self.model).where(*(filters or ()))
        if order_by:
            stmt = stmt.order_by(*order_by)
        if skip:
            stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def create(
        self,
        session: AsyncSession,
        *,
        obj_in: CreateSchemaType | dict[str, Any],
        commit: bool = True,
    ) -> ModelType:
        """Создает объект из схемы или словаря."""
        db_obj = self.model(**_as_dict(obj_in, exclude_unset=False))
        session.add(db_obj)
        if commit:
            await session.commit()
            await session.refresh(db_obj)
        else:
            await session.flush()
        return db_obj

    async def update(
        self,
        session: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: UpdateSchemaType | dict[str, Any],
        commit: bool = True,
    ) -> ModelType:
        """Переносит в объект переданные поля схемы (exclude_unset)."""
        for field, value in _as_dict(obj_in, exclude_unset=True).items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)
        session.add(db_obj)
        if commit:
            await session.commit()
            await session.refresh(db_obj)
        return db_obj

    async def count(self, session: AsyncSession, **filters: Any) -> int:
        """Количество записей с условиями поле=значение.

        Example:
            await booking_crud.count(
                session,
                room_id=room_id,
                status=BookingStatus.CHECKIN,
            )

        """
        stmt = select(func.count()).select_from(
            self._filtered(**filters).subquery(),
        )
        return int(await session.scalar(stmt) or 0)
