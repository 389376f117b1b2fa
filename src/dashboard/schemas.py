from datetime import date
from decimal import Decimal

from pydantic import BaseModel, field_serializer


class DashboardInfo(BaseModel):
    """Сводка за сегодня."""

    date: date
    today_income: Decimal
    today_bookings: int
    active_guests: int

    @field_serializer('today_income')
    def serialize_income(self, value: Decimal) -> float:
        """Доход отдается числом."""
        return float(value)
