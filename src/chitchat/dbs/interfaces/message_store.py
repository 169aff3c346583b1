from abc import ABC, abstractmethod
from typing import List, Optional

from chitchat.domain.entities.message import Message

DEFAULT_HISTORY_LIMIT = 1000


class AbstractMessageRepository(ABC):
    """
    Append-only log of direct messages keyed by participant pair.

    ``append`` must make the record visible to ``range`` before it returns.
    Implementations raise StorageUnavailable when the backend fails and do
    not retry.
    """

    @abstractmethod
    async def append(
        self,
        sender: str,
        receiver: str,
        text: Optional[str] = None,
        attachment: Optional[str] = None,
    ) -> Message:
        pass

    @abstractmethod
    async def range(
        self,
        user_a: str,
        user_b: str,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> List[Message]:
        pass

    async def close(self) -> None:
        """Release backend resources; no-op by default."""
        return None
