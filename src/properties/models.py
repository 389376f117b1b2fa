from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.config import MAX_NAME_LENGTH
from src.database import Base


if TYPE_CHECKING:
    from src.bookings.models import Booking
    from src.rooms.models import Room


class Property(Base):
    """Модель объекта размещения (гостевого дома).

    Relationships:
        rooms: Номера объекта. Обратная связь - Room.property.
        bookings: Брони объекта. Обратная связь - Booking.property.
    """

    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
        comment='Название объекта размещения',
    )

    rooms: Mapped[list['Room']] = relationship(
        back_populates='property',
        lazy='noload',
    )
    bookings: Mapped[list['Booking']] = relationship(
        back_populates='property',
        lazy='noload',
    )

    def __repr__(self) -> str:
        return f'<Property(id={self.id}, name={self.name!r})>'
