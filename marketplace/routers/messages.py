"""
Message API endpoints: property threads and the user inbox.
"""

from fastapi import APIRouter, Depends, status
from typing import List

from marketplace.models.property import Property
from marketplace.services.access_policy import Action, Principal
from marketplace.services.message import MessageService
from marketplace.schemas.message import MessageCreate, MessageResponse, InboxMessageResponse
from marketplace.schemas.error import get_error_responses
from marketplace.utils.dependencies import (
    get_current_principal,
    get_message_service,
    require_access,
    require_property_access
)


router = APIRouter(tags=["Messages"])


@router.get(
    "/properties/{property_id}/messages",
    response_model=List[MessageResponse],
    status_code=status.HTTP_200_OK,
    summary="Read a property thread",
    description="Messages on the property, oldest first",
    responses=get_error_responses(401, 404, 500)
)
async def get_property_messages(
    property_obj: Property = Depends(require_property_access(Action.VIEW_THREAD)),
    message_service: MessageService = Depends(get_message_service)
) -> List[MessageResponse]:
    messages = await message_service.get_thread(property_obj)
    return [MessageResponse.model_validate(message.to_dict()) for message in messages]


@router.post(
    "/properties/{property_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Post to a property thread",
    description="Any signed-in user may message about any listing, including their own",
    responses=get_error_responses(400, 401, 404, 500)
)
async def post_property_message(
    message_data: MessageCreate,
    property_obj: Property = Depends(require_property_access(Action.POST_MESSAGE)),
    principal: Principal = Depends(get_current_principal),
    message_service: MessageService = Depends(get_message_service)
) -> MessageResponse:
    message = await message_service.post_message(property_obj, message_data, principal)
    return MessageResponse.model_validate(message.to_dict())


@router.get(
    "/messages",
    response_model=List[InboxMessageResponse],
    status_code=status.HTTP_200_OK,
    summary="Inbox",
    description="Messages on the caller's properties plus messages the caller sent, newest first",
    responses=get_error_responses(401, 500)
)
async def get_inbox(
    principal: Principal = Depends(require_access(Action.LIST_INBOX)),
    message_service: MessageService = Depends(get_message_service)
) -> List[InboxMessageResponse]:
    messages = await message_service.get_inbox(principal)
    return [InboxMessageResponse.model_validate(message.to_dict(include_context=True)) for message in messages]
