"""
Delivery dispatcher.

Both transports hand their send requests to ``DeliveryDispatcher.send``:
the message is persisted first, then pushed once to every live session of
the sender and the receiver. The stored record is the source of truth; a
push that fails is logged and dropped.
"""

import asyncio
from typing import List, Optional, Protocol

from loguru import logger

from chitchat.dbs.interfaces.message_store import AbstractMessageRepository, DEFAULT_HISTORY_LIMIT
from chitchat.domain.entities.message import Message
from chitchat.errors import PushFailed, ValidationFailed
from chitchat.realtime.session_registry import SessionRegistry


class MessagePusher(Protocol):
    """Delivers a stored message to one live connection."""

    async def push(self, connection_id: str, message: Message) -> None:
        ...


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class DeliveryDispatcher:
    def __init__(
        self,
        store: AbstractMessageRepository,
        registry: SessionRegistry,
        pusher: Optional[MessagePusher] = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ):
        self.store = store
        self.registry = registry
        self.pusher = pusher
        self.history_limit = history_limit

    def attach_pusher(self, pusher: MessagePusher) -> None:
        """Set the push channel once the socket server exists."""
        self.pusher = pusher

    async def send(
        self,
        sender: str,
        receiver: str,
        text: Optional[str] = None,
        attachment: Optional[str] = None,
    ) -> Message:
        """
        Persist a message and fan it out to both participants' sessions.

        Returns:
            The persisted message

        Raises:
            ValidationFailed: If a participant is missing or the message is empty
            StorageUnavailable: If the message could not be stored; nothing is pushed
        """
        sender = _clean(sender)
        receiver = _clean(receiver)
        if not sender:
            raise ValidationFailed("sender is required")
        if not receiver:
            raise ValidationFailed("receiver is required")
        if _clean(text) is None and _clean(attachment) is None:
            raise ValidationFailed("message needs text or an attachment")

        message = await self.store.append(sender, receiver, text=_clean(text), attachment=_clean(attachment))
        logger.info(f"Stored message {message.message_id} from {sender} to {receiver}")

        targets = self.registry.sessions_for(receiver) | self.registry.sessions_for(sender)
        if not targets:
            logger.debug(f"No live sessions for message {message.message_id}")
            return message

        failures = await self._fan_out(message, sorted(targets))
        delivered = len(targets) - len(failures)
        logger.debug(
            f"Pushed message {message.message_id} to {delivered}/{len(targets)} sessions"
        )
        return message

    async def _fan_out(self, message: Message, targets: List[str]) -> List[PushFailed]:
        if self.pusher is None:
            logger.warning(f"No pusher attached; message {message.message_id} not pushed")
            return [PushFailed(target, "no pusher attached") for target in targets]

        results = await asyncio.gather(
            *(self.pusher.push(target, message) for target in targets),
            return_exceptions=True,
        )

        failures: List[PushFailed] = []
        for target, result in zip(targets, results):
            if isinstance(result, BaseException):
                failure = PushFailed(target, f"push of {message.message_id} failed: {result}")
                logger.warning(f"Push to {target} failed for message {message.message_id}: {result}")
                failures.append(failure)
        return failures

    async def history(self, user_id: str, other_user_id: str, limit: Optional[int] = None) -> List[Message]:
        """
        Conversation between two users, oldest first.

        ``limit`` is clamped to the configured history limit.

        Raises:
            ValidationFailed: If a participant id is empty or the limit is not positive
            StorageUnavailable: If the store cannot be read
        """
        user_id = _clean(user_id)
        other_user_id = _clean(other_user_id)
        if not user_id or not other_user_id:
            raise ValidationFailed("both participants are required")
        if limit is not None and limit <= 0:
            raise ValidationFailed("limit must be positive")

        effective = self.history_limit if limit is None else min(limit, self.history_limit)
        return await self.store.range(user_id, other_user_id, limit=effective)
