"""Правила занятости номеров.

Чистые функции без обращения к БД: классификация брони относительно даты,
проверка свободы номера, пересечение проживаний и переходы статусов.
Используются сервисом бронирований и эндпоинтом занятости.
"""

from datetime import date
from typing import Iterable, Protocol

from src.bookings.constants import BookingStatus, BookingType


class Stay(Protocol):
    """Минимальный интерфейс брони для правил занятости."""

    check_in_date: date
    check_out_date: date
    status: BookingStatus


# Из какого статуса в какие можно перейти
ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.BOOKED: frozenset(
        {BookingStatus.CHECKIN, BookingStatus.CANCEL},
    ),
    BookingStatus.CHECKIN: frozenset(
        {BookingStatus.CHECKOUT, BookingStatus.CANCEL},
    ),
    BookingStatus.CHECKOUT: frozenset(),
    BookingStatus.CANCEL: frozenset(),
}


def classify_booking(
    check_in: date,
    check_out: date,
    day: date,
) -> BookingType:
    """Определяет тип брони на указанную дату.

    Заезд имеет приоритет: бронь с check_in == check_out == day
    считается заездом.

    Args:
        check_in: Дата заезда
        check_out: Дата выезда
        day: Дата, относительно которой классифицируем

    Returns:
        BookingType: checkin, checkout или stay

    """
    if check_in == day:
        return BookingType.CHECKIN
    if check_out == day:
        return BookingType.CHECKOUT
    return BookingType.STAY


def overlaps_day(check_in: date, check_out: date, day: date) -> bool:
    """Покрывает ли проживание дату (границы включительно)."""
    return check_in <= day <= check_out


def is_room_free_on(bookings: Iterable[Stay], day: date) -> bool:
    """Свободен ли номер на дату.

    Номер свободен, если ни одна неотмененная бронь не покрывает дату,
    либо все покрывающие брони выезжают именно в этот день.

    Args:
        bookings: Брони номера
        day: Проверяемая дата

    Returns:
        True, если номер можно предложить на эту дату

    """
    for booking in bookings:
        if booking.status == BookingStatus.CANCEL:
            continue
        if not overlaps_day(booking.check_in_date, booking.check_out_date, day):
            continue
        if booking.check_out_date != day:
            return False
    return True


STAY_DATES_ERROR = 'Дата выезда должна быть позже даты заезда.'


def stay_dates_valid(check_in: date, check_out: date) -> bool:
    """Проживание длится хотя бы одну ночь: выезд строго позже заезда."""
    return check_out > check_in


def stays_conflict(
    a_in: date,
    a_out: date,
    b_in: date,
    b_out: date,
) -> bool:
    """Пересекаются ли ночи двух проживаний.

    Выезд одного гостя и заезд другого в один день конфликтом не считается.
    """
    return a_in < b_out and b_in < a_out


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    """Разрешен ли переход статуса брони."""
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())
