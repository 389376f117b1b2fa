"""Декларативная база моделей.

Общие колонки всех таблиц: UUID-ключ, метки времени в UTC и флаг
активности для мягкого удаления. Имя таблицы выводится из имени класса
(RoomBooking -> room_booking), имена ограничений задаются в моделях
явно.
"""

from datetime import datetime, timezone
import re
import uuid

from sqlalchemy import Boolean, DateTime, Uuid, func
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    declared_attr,
    mapped_column,
)


_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')


def now_utc() -> datetime:
    """Текущий момент с часовым поясом UTC."""
    return datetime.now(timezone.utc)


def table_name_for(class_name: str) -> str:
    """CamelCase -> snake_case."""
    return _CAMEL_BOUNDARY.sub('_', class_name).lower()


class Base(DeclarativeBase):
    """База всех моделей проекта.

    Attributes:
        id: UUID записи
        created_at: Момент создания (UTC)
        updated_at: Момент последнего изменения (UTC)
        active: False у мягко удаленных записей

    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=now_utc,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=now_utc,
        onupdate=now_utc,
        server_default=func.now(),
    )
    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
    )

    @declared_attr.directive
    def __tablename__(cls) -> str:  # noqa: N805
        return table_name_for(cls.__name__)

    @property
    def is_active(self) -> bool:
        """Имя флага активности в API."""
        return self.active

    def soft_delete(self) -> None:
        """Помечает запись удаленной, не стирая ее из БД."""
        self.active = False
