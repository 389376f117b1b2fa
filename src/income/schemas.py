from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field, field_serializer

from src.bookings.schemas import BookingInfo


class IncomeTotals(BaseModel):
    """Итоги дохода по источникам."""

    booking: Decimal = Decimal('0')
    agoda: Decimal = Decimal('0')
    airbnb: Decimal = Decimal('0')
    expedia: Decimal = Decimal('0')
    direct_bank: Decimal = Decimal('0')
    direct_cash: Decimal = Decimal('0')
    net_total: Decimal = Decimal('0')

    @field_serializer('*')
    def serialize_amount(self, value: Decimal) -> float:
        """Суммы отдаются числами."""
        return float(value)


class IncomeReport(BaseModel):
    """Отчет о доходе за период."""

    totals: IncomeTotals
    records: List[BookingInfo] = Field(default_factory=list)
