from src.bookings.schemas import BookingBulkResult, BookingInfo
from src.common.responses import (
    action_responses,
    create_responses,
    list_responses,
    retrieve_responses,
)


GET_RESPONSES = list_responses()
CREATE_RESPONSES = create_responses(BookingInfo)
BULK_RESPONSES = create_responses(BookingBulkResult)
GET_BY_ID_RESPONSES = retrieve_responses()
ACTION_RESPONSES = action_responses()
