import asyncio
from datetime import date
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.bookings.schemas import BookingInfo
from src.common.exception_handlers import handle_view_exception
from src.common.responses import list_responses
from src.database.sessions import get_async_session
from src.income.schemas import IncomeReport
from src.income.service import (
    compute_totals,
    get_income_records,
    resolve_period,
)


router = APIRouter()

logger = logging.getLogger('app.income')


@router.get(
    '',
    response_model=IncomeReport,
    summary='Отчет о доходе',
    description=(
        'Итоги по платформам и список броней за период. Период: month '
        '(YYYY-MM), либо from+to, либо date; при нескольких параметрах '
        'действует этот приоритет. platform принимает название платформы '
        'или directBank / directCash.'
    ),
    responses=list_responses(),
)
async def get_income(
    day: Optional[date] = Query(None, alias='date', description='Дата'),
    date_from: Optional[date] = Query(
        None,
        alias='from',
        description='Начало периода',
    ),
    date_to: Optional[date] = Query(
        None,
        alias='to',
        description='Конец периода',
    ),
    month: Optional[str] = Query(None, description='Месяц YYYY-MM'),
    property_id: Optional[UUID] = Query(
        None,
        description='ID объекта размещения',
    ),
    platform: Optional[str] = Query(
        None,
        description='Booking.com, Agoda, Airbnb, Expedia, Direct, '
        'directBank или directCash',
    ),
    session: AsyncSession = Depends(get_async_session),
) -> IncomeReport:
    """Отчет о доходе за период."""
    try:
        period = resolve_period(day, date_from, date_to, month)
        records = await get_income_records(
            session,
            period=period,
            property_id=property_id,
            platform=platform,
        )
        return IncomeReport(
            totals=compute_totals(records),
            records=[BookingInfo.model_validate(r) for r in records],
        )

    except asyncio.CancelledError:
        raise

    except Exception as e:
        handle_view_exception(e, 'построении отчета о доходе')
