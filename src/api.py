from fastapi import APIRouter

from src.bookings.views import router as bookings_router
from src.dashboard.views import router as dashboard_router
from src.income.views import router as income_router
from src.occupancy.views import router as occupancy_router
from src.properties.views import router as properties_router
from src.rooms.views import router as rooms_router


main_router = APIRouter()

main_router.include_router(
    properties_router,
    prefix='/properties',
    tags=['Объекты размещения'],
)
main_router.include_router(rooms_router, prefix='/rooms', tags=['Номера'])
main_router.include_router(
    bookings_router,
    prefix='/bookings',
    tags=['Бронирования'],
)
main_router.include_router(
    occupancy_router,
    prefix='/occupancy',
    tags=['Занятость'],
)
main_router.include_router(income_router, prefix='/income', tags=['Доход'])
main_router.include_router(
    dashboard_router,
    prefix='/dashboard',
    tags=['Сводка'],
)
