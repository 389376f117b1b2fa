from datetime import date
from decimal import Decimal
from typing import Optional
import uuid

from sqlalchemy import (
    CheckConstraint,
    Date,
    Enum,
    ForeignKey,
    Index,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.bookings.constants import BookingStatus, PaymentMethod, Platform
from src.config import (
    MAX_GUEST_NAME_LENGTH,
    MAX_ID_NUMBER_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_RESERVATION_ID_LENGTH,
    MAX_STRING_LENGTH,
)
from src.database import Base
from src.properties.models import Property
from src.rooms.models import Room


def _enum_values(enum_cls: type) -> list[str]:
    """Хранить в БД значения enum, а не имена членов."""
    return [member.value for member in enum_cls]


class Booking(Base):
    """Модель бронирования.

    Запись о проживании гостя в объекте размещения с датами заезда и выезда
    и данными об оплате. Номер назначается отдельно (room assignment),
    до назначения room_id пустой.

    Relationships:
        property (Property): Объект размещения. Обратная - Property.bookings.
        room (Room | None): Назначенный номер. Обратная - Room.bookings.

    Constraints:
        - Дата выезда строго позже даты заезда.
        - Сумма неотрицательна.
    """

    guest_name: Mapped[str] = mapped_column(
        String(MAX_GUEST_NAME_LENGTH),
        nullable=False,
        comment='Имя гостя',
    )
    email: Mapped[Optional[str]] = mapped_column(
        String(MAX_STRING_LENGTH),
        comment='Email гостя',
    )
    phone: Mapped[Optional[str]] = mapped_column(
        String(MAX_PHONE_LENGTH),
        comment='Телефон гостя',
    )
    id_number: Mapped[Optional[str]] = mapped_column(
        String(MAX_ID_NUMBER_LENGTH),
        comment='Номер документа гостя',
    )
    reservation_id: Mapped[Optional[str]] = mapped_column(
        String(MAX_RESERVATION_ID_LENGTH),
        comment='ID брони на внешней платформе',
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey('property.id', ondelete='CASCADE'),
        nullable=False,
        comment='ID объекта размещения',
    )
    room_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey('room.id', ondelete='SET NULL'),
        nullable=True,
        comment='ID назначенного номера',
    )
    platform: Mapped[Platform] = mapped_column(
        Enum(
            Platform,
            name='booking_platform',
            values_callable=_enum_values,
        ),
        nullable=False,
        comment='Источник брони',
    )
    payment_method: Mapped[PaymentMethod] = mapped_column(
        Enum(
            PaymentMethod,
            name='payment_method',
            values_callable=_enum_values,
        ),
        nullable=False,
        comment='Способ оплаты',
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        comment='Сумма оплаты',
    )
    payment_date: Mapped[Optional[date]] = mapped_column(
        Date,
        comment='Дата оплаты',
    )
    check_in_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment='Дата заезда',
    )
    check_out_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        comment='Дата выезда',
    )
    status: Mapped[BookingStatus] = mapped_column(
        Enum(
            BookingStatus,
            name='booking_status',
            values_callable=_enum_values,
        ),
        nullable=False,
        default=BookingStatus.BOOKED,
        comment='Статус брони',
    )

    # До relationship: атрибут property ниже перекрывает декоратор
    @property
    def property_name(self) -> str | None:
        """Название объекта для ответов API."""
        return self.property.name if self.property else None

    @property
    def room_no(self) -> str | None:
        """Номер комнаты для ответов API."""
        return self.room.room_no if self.room else None

    # --- связи ---
    property: Mapped['Property'] = relationship(
        back_populates='bookings',
        lazy='selectin',
    )
    room: Mapped[Optional['Room']] = relationship(
        back_populates='bookings',
        lazy='selectin',
    )

    __table_args__ = (
        CheckConstraint(
            'check_out_date > check_in_date',
            name='booking_check_in_before_check_out',
        ),
        CheckConstraint('amount >= 0', name='booking_amount_non_negative'),
        Index('ix_booking_property_dates', property_id, check_in_date),
        Index('ix_booking_room_id', room_id),
        Index('ix_booking_payment_date', payment_date),
        Index('ix_booking_reservation', property_id, reservation_id),
    )

    def check_in(self) -> None:
        """Заселяет гостя и занимает назначенный номер."""
        self.status = BookingStatus.CHECKIN
        if self.room:
            self.room.occupy()

    def check_out(self) -> None:
        """Выселяет гостя и освобождает номер.

        Связь с номером сохраняется для истории.
        """
        self.status = BookingStatus.CHECKOUT
        if self.room:
            self.room.release()

    def cancel_booking(self) -> None:
        """Отменяет бронирование.

        Номер освобождается, только если гость в нем проживал.
        """
        if self.status == BookingStatus.CHECKIN and self.room:
            self.room.release()
        self.status = BookingStatus.CANCEL
