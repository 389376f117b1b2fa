from src.bookings.models import Booking
from src.database.base import Base
from src.properties.models import Property
from src.rooms.models import Room


__all__ = [
    'Base',
    'Property',
    'Room',
    'Booking',
]
