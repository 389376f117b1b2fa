import asyncio
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.bookings.crud import BookingCRUD
from src.common.dates import today_local
from src.common.exception_handlers import handle_view_exception
from src.common.responses import list_responses
from src.dashboard.schemas import DashboardInfo
from src.database.sessions import get_async_session
from src.income.service import (
    compute_totals,
    get_income_records,
    resolve_period,
)


router = APIRouter()

logger = logging.getLogger('app')


@router.get(
    '',
    response_model=DashboardInfo,
    summary='Сводка за сегодня',
    description=(
        'Доход за сегодня, число броней на сегодня и число заселенных '
        'гостей.'
    ),
    responses=list_responses(),
)
async def get_dashboard(
    property_id: Optional[UUID] = Query(
        None,
        description='ID объекта размещения. Если не задано - все объекты.',
    ),
    session: AsyncSession = Depends(get_async_session),
) -> DashboardInfo:
    """Собирает сводку для главной страницы."""
    try:
        today = today_local()
        crud = BookingCRUD(session)

        records = await get_income_records(
            session,
            period=resolve_period(day=today),
            property_id=property_id,
        )
        covering = await crud.list_covering(today, property_id)
        active = await crud.list_active(property_id)

        return DashboardInfo(
            date=today,
            today_income=compute_totals(records).net_total,
            today_bookings=len(covering),
            active_guests=len(active),
        )

    except asyncio.CancelledError:
        raise

    except Exception as e:
        handle_view_exception(e, 'получении сводки')
