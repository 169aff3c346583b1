"""Messaging service with Result types for error handling."""

from typing import Any, Dict, List, Optional
from loguru import logger

from neopipe import Ok, Err, Result

from chitchat.domain.entities.message import Message
from chitchat.errors import ChitchatError
from chitchat.realtime.dispatcher import DeliveryDispatcher


class MessagingService:
    """Request/response facade over the delivery dispatcher with Result-based error handling"""

    def __init__(self, dispatcher: DeliveryDispatcher):
        self.dispatcher = dispatcher

    async def submit_message(
        self,
        sender: str,
        receiver: str,
        text: Optional[str] = None,
        attachment: Optional[str] = None,
    ) -> Result[Message, Dict[str, Any]]:
        """Persist and deliver a message on behalf of an authenticated sender"""
        try:
            message = await self.dispatcher.send(sender, receiver, text=text, attachment=attachment)
            return Ok(message)

        except ChitchatError as e:
            logger.warning(f"Failed to submit message from {sender} to {receiver}: {e.message}")
            return Err(e.to_dict())

    async def fetch_history(
        self,
        user_id: str,
        other_user_id: str,
        limit: Optional[int] = None,
    ) -> Result[List[Message], Dict[str, Any]]:
        """Get the conversation between the caller and another user, oldest first"""
        try:
            messages = await self.dispatcher.history(user_id, other_user_id, limit=limit)
            logger.debug(f"Retrieved {len(messages)} messages between {user_id} and {other_user_id}")
            return Ok(messages)

        except ChitchatError as e:
            logger.error(f"Failed to fetch history between {user_id} and {other_user_id}: {e.message}")
            return Err(e.to_dict())
