from src.common.responses import (
    create_responses,
    delete_responses,
    list_responses,
    retrieve_responses,
)
from src.properties.schemas import PropertyInfo


GET_RESPONSES = list_responses()
CREATE_RESPONSES = create_responses(PropertyInfo)
GET_BY_ID_RESPONSES = retrieve_responses()
DELETE_RESPONSES = delete_responses()
