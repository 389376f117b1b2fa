from src.common.responses import (
    ERROR_409,
    action_responses,
    create_responses,
    delete_responses,
    list_responses,
    retrieve_responses,
)
from src.rooms.schemas import RoomInfo


GET_RESPONSES = list_responses()
CREATE_RESPONSES = create_responses(RoomInfo)
GET_BY_ID_RESPONSES = retrieve_responses()
DELETE_RESPONSES = delete_responses()
CHECK_IN_RESPONSES = action_responses()

# PATCH отвечает 409 при дубле номера и при деактивации занятого номера
UPDATE_RESPONSES = {**retrieve_responses(), **ERROR_409}
