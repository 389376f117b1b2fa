from enum import Enum


class BookingStatus(str, Enum):
    """Статус бронирования."""

    BOOKED = 'booked'  # Забронировано
    CHECKIN = 'checkin'  # Гость заселен
    CHECKOUT = 'checkout'  # Гость выехал
    CANCEL = 'cancel'  # Отменено


class Platform(str, Enum):
    """Источник бронирования."""

    BOOKING_COM = 'Booking.com'
    AGODA = 'Agoda'
    AIRBNB = 'Airbnb'
    EXPEDIA = 'Expedia'
    DIRECT = 'Direct'


class PaymentMethod(str, Enum):
    """Способ оплаты."""

    ONLINE = 'online'
    BANK = 'bank'
    CASH = 'cash'


class BookingType(str, Enum):
    """Тип брони относительно выбранной даты."""

    CHECKIN = 'checkin'  # Заезд в этот день
    CHECKOUT = 'checkout'  # Выезд в этот день
    STAY = 'stay'  # Гость проживает
