from datetime import date
from decimal import Decimal
from typing import List, Optional, Self
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    model_validator,
)

from src.bookings.constants import (
    BookingStatus,
    BookingType,
    PaymentMethod,
    Platform,
)
from src.common.schemas import BaseRead
from src.config import (
    BOOKING_MAX_AMOUNT,
    BOOKING_MIN_AMOUNT,
    MAX_BULK_BOOKINGS,
    MAX_GUEST_NAME_LENGTH,
    MAX_ID_NUMBER_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_RESERVATION_ID_LENGTH,
    MAX_STRING_LENGTH,
)
from src.occupancy.logic import STAY_DATES_ERROR, stay_dates_valid


class BookingBase(BaseModel):
    """Общие поля бронирования."""

    guest_name: str = Field(
        ...,
        min_length=1,
        max_length=MAX_GUEST_NAME_LENGTH,
        description='Имя гостя',
    )
    email: Optional[str] = Field(None, max_length=MAX_STRING_LENGTH)
    phone: Optional[str] = Field(None, max_length=MAX_PHONE_LENGTH)
    id_number: Optional[str] = Field(None, max_length=MAX_ID_NUMBER_LENGTH)
    reservation_id: Optional[str] = Field(
        None,
        max_length=MAX_RESERVATION_ID_LENGTH,
        description='ID брони на внешней платформе',
    )
    platform: Platform
    payment_method: PaymentMethod
    amount: Decimal = Field(
        ...,
        ge=BOOKING_MIN_AMOUNT,
        le=BOOKING_MAX_AMOUNT,
        max_digits=12,
        decimal_places=2,
        description='Сумма оплаты',
    )
    payment_date: Optional[date] = None
    check_in_date: date
    check_out_date: date

    model_config = ConfigDict(extra='forbid', str_strip_whitespace=True)

    @model_validator(mode='after')
    def check_dates_order(self) -> Self:
        """Дата выезда строго позже даты заезда."""
        if not stay_dates_valid(self.check_in_date, self.check_out_date):
            raise ValueError(STAY_DATES_ERROR)
        return self


class BookingCreate(BookingBase):
    """Схема для создания бронирования."""

    property_id: UUID
    room_id: Optional[UUID] = Field(
        None,
        description='Номер можно назначить сразу или позже',
    )


class BookingBulkCreate(BaseModel):
    """Схема массового создания уже разобранных строк выгрузки."""

    bookings: List[BookingCreate] = Field(
        ...,
        min_length=1,
        max_length=MAX_BULK_BOOKINGS,
    )

    model_config = ConfigDict(extra='forbid')


class BookingUpdate(BaseModel):
    """Схема для частичного обновления бронирования.

    Статус меняется только через действия (check-in, check-out, отмена),
    номер через назначение.
    """

    guest_name: Optional[str] = Field(
        None,
        min_length=1,
        max_length=MAX_GUEST_NAME_LENGTH,
    )
    email: Optional[str] = Field(None, max_length=MAX_STRING_LENGTH)
    phone: Optional[str] = Field(None, max_length=MAX_PHONE_LENGTH)
    id_number: Optional[str] = Field(None, max_length=MAX_ID_NUMBER_LENGTH)
    reservation_id: Optional[str] = Field(
        None,
        max_length=MAX_RESERVATION_ID_LENGTH,
    )
    platform: Optional[Platform] = None
    payment_method: Optional[PaymentMethod] = None
    amount: Optional[Decimal] = Field(
        None,
        ge=BOOKING_MIN_AMOUNT,
        le=BOOKING_MAX_AMOUNT,
        max_digits=12,
        decimal_places=2,
    )
    payment_date: Optional[date] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None

    model_config = ConfigDict(extra='forbid', str_strip_whitespace=True)

    @model_validator(mode='after')
    def forbid_nulls(self) -> Self:
        """Запрещает null для обязательных полей брони."""
        for field in (
            'guest_name',
            'platform',
            'payment_method',
            'amount',
            'check_in_date',
            'check_out_date',
        ):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f'Поле {field} не может быть null')
        return self

    @model_validator(mode='after')
    def check_dates_order(self) -> Self:
        """Если переданы обе даты, проверяем их порядок сразу."""
        if self.check_in_date and self.check_out_date and not (
            stay_dates_valid(self.check_in_date, self.check_out_date)
        ):
            raise ValueError(STAY_DATES_ERROR)
        return self


class BookingAssign(BaseModel):
    """Схема назначения номера. null снимает назначение."""

    room_id: Optional[UUID]

    model_config = ConfigDict(extra='forbid')


class BookingInfo(BaseRead):
    """Полная информация о бронировании."""

    guest_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    id_number: Optional[str] = None
    reservation_id: Optional[str] = None
    property_id: UUID
    property_name: Optional[str] = None
    room_id: Optional[UUID] = None
    room_no: Optional[str] = None
    platform: Platform
    payment_method: PaymentMethod
    amount: Decimal
    payment_date: Optional[date] = None
    check_in_date: date
    check_out_date: date
    status: BookingStatus

    @field_serializer('amount')
    def serialize_amount(self, value: Decimal) -> float:
        """Сумма отдается числом, как ее ждет дашборд."""
        return float(value)


class BookingWithType(BookingInfo):
    """Бронь с типом относительно выбранной даты.

    Для списков без даты (без номера, заселенные) type не заполняется.
    """

    type: Optional[BookingType] = None

    @classmethod
    def from_booking(
        cls,
        booking: object,
        booking_type: Optional[BookingType] = None,
    ) -> Self:
        """Собирает схему из ORM-объекта и вычисленного типа."""
        info = BookingInfo.model_validate(booking)
        return cls(**dict(info), type=booking_type)


class BookingBulkResult(BaseModel):
    """Результат массового создания."""

    created: List[BookingInfo]
    skipped: List[str] = Field(
        default_factory=list,
        description='reservation_id строк, которые уже есть в системе',
    )
