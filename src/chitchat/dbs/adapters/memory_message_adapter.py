"""Process-local message store used by tests and ``APP_USE_MEMORY_STORE``."""

import threading
from typing import List, Optional
from uuid import uuid4

from loguru import logger

from chitchat.dbs.interfaces.message_store import AbstractMessageRepository, DEFAULT_HISTORY_LIMIT
from chitchat.domain.entities.message import Message
from chitchat.utils.clock import MonotonicClock


class InMemoryMessageAdapter(AbstractMessageRepository):
    """Keeps messages in a list ordered by append completion."""

    def __init__(self, clock: Optional[MonotonicClock] = None) -> None:
        self.clock = clock or MonotonicClock()
        self._messages: List[Message] = []
        self._lock = threading.Lock()

    async def append(
        self,
        sender: str,
        receiver: str,
        text: Optional[str] = None,
        attachment: Optional[str] = None,
    ) -> Message:
        with self._lock:
            message = Message(
                message_id=str(uuid4()),
                sender=sender,
                receiver=receiver,
                text=text,
                attachment=attachment,
                created_at=self.clock.now(),
            )
            self._messages.append(message)

        logger.debug(f"Stored message {message.message_id} from {sender} to {receiver} in memory")
        return message

    async def range(
        self,
        user_a: str,
        user_b: str,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> List[Message]:
        pair = {user_a, user_b}
        with self._lock:
            matching = [m for m in self._messages if {m.sender, m.receiver} == pair]
        return matching[:limit]

    def __len__(self) -> int:
        return len(self._messages)
