"""Messages controller: submit a direct message and fetch conversation history."""

from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends, Query
from loguru import logger

from chitchat.api.dependencies import get_current_user_id, get_messaging_service
from chitchat.api.interfaces.controllers.schemas import MessageResponse, SubmitMessageRequest
from chitchat.services.messaging_service import MessagingService


router = APIRouter(prefix="/messages", tags=["messages"])


def _raise_for_error(error_details: dict, default: str) -> None:
    raise HTTPException(
        status_code=error_details.get("status_code", 500),
        detail=error_details.get("message", default),
    )


@router.post("", response_model=MessageResponse)
async def submit_message(
    request: SubmitMessageRequest,
    user_id: str = Depends(get_current_user_id),
    service: MessagingService = Depends(get_messaging_service),
):
    """
    Send a direct message as the authenticated user.

    The message is stored before the response is returned and is pushed to
    every live socket of the sender and the receiver.

    Example:
        ```json
        {"receiverId": "u2", "text": "hi", "media_url": null}
        ```
    """
    logger.info(f"Submitting message from {user_id} to {request.receiver}")

    result = await service.submit_message(
        sender=user_id,
        receiver=request.receiver,
        text=request.text,
        attachment=request.attachment,
    )

    if result.is_ok():
        return result.unwrap().to_payload()

    _raise_for_error(result.unwrap_err(), "Error sending message")


@router.get("/{other_user_id}", response_model=List[MessageResponse])
async def get_history(
    other_user_id: str,
    limit: Optional[int] = Query(None, gt=0, description="Maximum messages to return"),
    user_id: str = Depends(get_current_user_id),
    service: MessagingService = Depends(get_messaging_service),
):
    """
    Messages exchanged with another user in either direction, oldest first.

    Example:
        GET /messages/u2?limit=50
    """
    logger.info(f"Fetching history between {user_id} and {other_user_id}")

    result = await service.fetch_history(user_id, other_user_id, limit=limit)

    if result.is_ok():
        return [message.to_payload() for message in result.unwrap()]

    _raise_for_error(result.unwrap_err(), "Error fetching messages")
