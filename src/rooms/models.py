from typing import TYPE_CHECKING
import uuid

from sqlalchemy import Enum, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.config import MAX_ROOM_NO_LENGTH
from src.database import Base
from src.properties.models import Property
from src.rooms.constants import RoomStatus


if TYPE_CHECKING:
    from src.bookings.models import Booking


class Room(Base):
    """Модель номера.

    Relationships:
        property: Связь многие-к-одному с Property. Каждый номер относится
            к одному объекту размещения.
        bookings: Брони, назначенные на номер. Обратная связь - Booking.room.

    Constraints:
        - Номер комнаты уникален в пределах объекта размещения.
    """

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey('property.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
        comment='ID объекта размещения',
    )
    room_no: Mapped[str] = mapped_column(
        String(MAX_ROOM_NO_LENGTH),
        nullable=False,
        comment='Номер комнаты',
    )
    status: Mapped[RoomStatus] = mapped_column(
        Enum(
            RoomStatus,
            name='room_status',
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=RoomStatus.AVAILABLE,
        comment='Статус номера',
    )

    property: Mapped['Property'] = relationship(
        back_populates='rooms',
        lazy='selectin',
    )
    bookings: Mapped[list['Booking']] = relationship(
        back_populates='room',
        lazy='noload',
    )

    __table_args__ = (
        UniqueConstraint(
            'property_id',
            'room_no',
            name='uq_room_property_room_no',
        ),
    )

    def occupy(self) -> None:
        """Помечает номер занятым."""
        self.status = RoomStatus.OCCUPIED

    def release(self) -> None:
        """Освобождает номер."""
        self.status = RoomStatus.AVAILABLE

    def __repr__(self) -> str:
        return (
            f'<Room(id={self.id}, room_no={self.room_no!r}, '
            f'status={self.status})>'
        )
