"""Отчет о доходе.

Разбор периода, фильтры по платформе и подсчет итогов. Период задается
одним из способов (по убыванию приоритета): месяц, диапазон from/to,
одна дата. Запись попадает в период по дате оплаты, а если ее нет,
то по дате создания.
"""

from calendar import monthrange
from datetime import date, datetime, time, timedelta, timezone
import logging
import re
from typing import Any, Iterable, Optional, Sequence
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.bookings.constants import BookingStatus, PaymentMethod, Platform
from src.bookings.models import Booking
from src.common.logging import log_action
from src.income.constants import DIRECT_BANK, DIRECT_CASH, MONTH_PATTERN
from src.income.schemas import IncomeTotals


logger = logging.getLogger('app.income')

Period = tuple[date, date]

# Платформа -> поле итогов
PLATFORM_TOTALS = {
    Platform.BOOKING_COM: 'booking',
    Platform.AGODA: 'agoda',
    Platform.AIRBNB: 'airbnb',
    Platform.EXPEDIA: 'expedia',
}

# Способ оплаты прямой брони -> поле итогов
DIRECT_TOTALS = {
    PaymentMethod.BANK: 'direct_bank',
    PaymentMethod.CASH: 'direct_cash',
}


def parse_month(month: str) -> Period:
    """Разбирает месяц YYYY-MM в первый и последний день месяца.

    Raises:
        ValueError: Неверный формат или номер месяца

    """
    if not re.match(MONTH_PATTERN, month):
        raise ValueError('Месяц должен быть в формате YYYY-MM.')
    year, month_no = (int(part) for part in month.split('-'))
    if not 1 <= month_no <= 12 or year < 1:
        raise ValueError(f'Неверный месяц: {month}.')
    last_day = monthrange(year, month_no)[1]
    return date(year, month_no, 1), date(year, month_no, last_day)


def resolve_period(
    day: Optional[date] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    month: Optional[str] = None,
) -> Optional[Period]:
    """Определяет период отчета.

    Приоритет: month, затем from+to, затем date. Без параметров
    период не ограничен (None).

    Raises:
        ValueError: Неполный или перевернутый диапазон, неверный месяц

    """
    if (date_from is None) != (date_to is None):
        raise ValueError('Параметры from и to задаются только вместе.')
    if date_from is not None and date_to is not None and date_from > date_to:
        raise ValueError('Дата from не может быть позже даты to.')

    if month:
        return parse_month(month)
    if date_from is not None and date_to is not None:
        return date_from, date_to
    if day is not None:
        return day, day
    return None


def period_filter(period: Period) -> Any:
    """Условие попадания брони в период.

    Дата оплаты внутри периода, либо оплаты нет, а бронь создана
    в период (границы суток по UTC).
    """
    start, end = period
    created_from = datetime.combine(start, time.min, tzinfo=timezone.utc)
    created_to = datetime.combine(
        end + timedelta(days=1),
        time.min,
        tzinfo=timezone.utc,
    )
    return or_(
        Booking.payment_date.between(start, end),
        and_(
            Booking.payment_date.is_(None),
            Booking.created_at >= created_from,
            Booking.created_at < created_to,
        ),
    )


def platform_filters(platform: str) -> list[Any]:
    """Фильтры по платформе.

    directBank и directCash выбирают прямые брони с оплатой на счет
    и наличными, остальные значения сравниваются с платформой как есть.

    Raises:
        ValueError: Неизвестная платформа

    """
    if platform == DIRECT_BANK:
        return [
            Booking.platform == Platform.DIRECT,
            Booking.payment_method == PaymentMethod.BANK,
        ]
    if platform == DIRECT_CASH:
        return [
            Booking.platform == Platform.DIRECT,
            Booking.payment_method == PaymentMethod.CASH,
        ]
    try:
        return [Booking.platform == Platform(platform)]
    except ValueError:
        raise ValueError(f'Неизвестная платформа: {platform}.') from None


def compute_totals(records: Iterable[Booking]) -> IncomeTotals:
    """Считает итоги по платформам и способам оплаты.

    Каждая сумма входит в net_total. Прямые брони с онлайн-оплатой
    учитываются только в net_total.
    """
    totals = IncomeTotals()
    for record in records:
        amount = record.amount or 0
        totals.net_total += amount

        bucket = PLATFORM_TOTALS.get(record.platform)
        if bucket is None and record.platform == Platform.DIRECT:
            bucket = DIRECT_TOTALS.get(record.payment_method)
        if bucket is not None:
            setattr(totals, bucket, getattr(totals, bucket) + amount)
    return totals


@log_action('Отчет о доходе', component='INCOME', only_errors=True)
async def get_income_records(
    session: AsyncSession,
    *,
    period: Optional[Period] = None,
    property_id: Optional[UUID] = None,
    platform: Optional[str] = None,
) -> Sequence[Booking]:
    """Выбирает неотмененные брони для отчета о доходе."""
    conditions = [Booking.status != BookingStatus.CANCEL]
    if property_id is not None:
        conditions.append(Booking.property_id == property_id)
    if platform:
        conditions.extend(platform_filters(platform))
    if period is not None:
        conditions.append(period_filter(period))

    result = await session.execute(
        select(Booking)
        .where(*conditions)
        .order_by(
            Booking.payment_date.desc().nulls_last(),
            Booking.created_at.desc(),
        ),
    )
    records = result.scalars().all()
    logger.info(
        'Отчет о доходе: %d записей (period=%s, platform=%s)',
        len(records),
        period,
        platform,
    )
    return records
