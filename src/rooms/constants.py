from enum import Enum


class RoomStatus(str, Enum):
    """Статус номера."""

    AVAILABLE = 'available'  # Свободен
    OCCUPIED = 'occupied'  # Занят
