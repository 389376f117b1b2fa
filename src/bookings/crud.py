from datetime import date
from typing import Iterable, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.bookings.constants import BookingStatus
from src.bookings.models import Booking
from src.bookings.schemas import BookingCreate, BookingUpdate
from src.database.service import DatabaseService
from src.properties.models import Property
from src.rooms.models import Room


# Брони, которые претендуют на номер
OPEN_STATUSES = (BookingStatus.BOOKED, BookingStatus.CHECKIN)


class BookingCRUD(DatabaseService[Booking, BookingCreate, BookingUpdate]):
    """Слой доступа к данным для бронирований."""

    def __init__(self, db: AsyncSession) -> None:
        """Инициализация CRUD с асинхронной сессией."""
        super().__init__(Booking)
        self.db = db

    async def get_property(self, property_id: UUID) -> Optional[Property]:
        """Получить объект размещения по ID, если он активен."""
        result = await self.db.execute(
            select(Property).where(
                Property.id == property_id,
                Property.active.is_(True),
            ),
        )
        return result.scalar_one_or_none()

    async def get_room(self, room_id: UUID) -> Optional[Room]:
        """Получить активный номер по ID."""
        result = await self.db.execute(
            select(Room).where(
                Room.id == room_id,
                Room.active.is_(True),
            ),
        )
        return result.scalar_one_or_none()

    async def get_booking_by_id(self, booking_id: UUID) -> Optional[Booking]:
        """Получить бронь по ID."""
        return await self.get(self.db, id=booking_id)

    async def list_unassigned(
        self,
        property_id: UUID | None = None,
    ) -> Sequence[Booking]:
        """Брони без номера (кроме отмененных), по дате заезда."""
        filters = [
            Booking.room_id.is_(None),
            Booking.status != BookingStatus.CANCEL,
        ]
        if property_id is not None:
            filters.append(Booking.property_id == property_id)
        return await self.get_multi(
            self.db,
            filters=filters,
            order_by=[Booking.check_in_date, Booking.created_at],
        )

    async def list_active(
        self,
        property_id: UUID | None = None,
    ) -> Sequence[Booking]:
        """Заселенные гости."""
        filters = [Booking.status == BookingStatus.CHECKIN]
        if property_id is not None:
            filters.append(Booking.property_id == property_id)
        return await self.get_multi(
            self.db,
            filters=filters,
            order_by=[Booking.check_in_date, Booking.created_at],
        )

    async def list_covering(
        self,
        day: date,
        property_id: UUID | None = None,
    ) -> Sequence[Booking]:
        """Брони, покрывающие дату (границы включительно), кроме отмен."""
        filters = [
            Booking.check_in_date <= day,
            Booking.check_out_date >= day,
            Booking.status != BookingStatus.CANCEL,
        ]
        if property_id is not None:
            filters.append(Booking.property_id == property_id)
        return await self.get_multi(
            self.db,
            filters=filters,
            order_by=[Booking.check_in_date, Booking.created_at],
        )

    async def list_room_open_bookings(
        self,
        room_id: UUID,
        exclude_booking_id: UUID | None = None,
    ) -> Sequence[Booking]:
        """Открытые брони номера (booked и checkin)."""
        filters = [
            Booking.room_id == room_id,
            Booking.status.in_(OPEN_STATUSES),
        ]
        if exclude_booking_id is not None:
            filters.append(Booking.id != exclude_booking_id)
        return await self.get_multi(self.db, filters=filters)

    async def count_checked_in(self, room_id: UUID) -> int:
        """Сколько заселенных броней числится за номером."""
        return await self.count(
            self.db,
            room_id=room_id,
            status=BookingStatus.CHECKIN,
        )

    async def count_open_bookings(self, room_id: UUID) -> int:
        """Сколько открытых броней (booked и checkin) назначено в номер."""
        return await self.count(
            self.db,
            room_id=room_id,
            status=list(OPEN_STATUSES),
        )

    async def existing_reservations(
        self,
        pairs: Iterable[tuple[UUID, str]],
    ) -> set[tuple[UUID, str]]:
        """Какие пары (property_id, reservation_id) уже есть в БД."""
        wanted = set(pairs)
        if not wanted:
            return set()
        result = await self.db.execute(
            select(Booking.property_id, Booking.reservation_id).where(
                Booking.property_id.in_(list({p for p, _ in wanted})),
                Booking.reservation_id.in_(list({r for _, r in wanted})),
            ),
        )
        found = {(row[0], row[1]) for row in result.all()}
        return found & wanted

    async def create_booking(self, data: BookingCreate) -> Booking:
        """Создать бронь без commit."""
        booking = await self.create(
            self.db,
            obj_in=data,
            commit=False,
        )
        return booking

    async def refresh_booking(self, booking: Booking) -> Booking:
        """Перечитать бронь вместе со связями после commit."""
        await self.db.refresh(booking, attribute_names=['property', 'room'])
        return booking
