"""Message domain entity"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict


class Message(BaseModel):
    """
    A direct message between two users.

    Created once by the delivery dispatcher and never updated afterwards.
    The same record is returned to the REST caller, stored in history and
    pushed to live sessions.
    """

    model_config = ConfigDict(frozen=True)

    message_id: str
    sender: str
    receiver: str
    created_at: datetime

    text: Optional[str] = None
    attachment: Optional[str] = None  # media URL

    def is_self_message(self) -> bool:
        return self.sender == self.receiver

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict used for REST responses and socket pushes"""
        return self.model_dump(mode="json")

    @classmethod
    def from_record(
        cls,
        message_id: Any,
        sender: str,
        receiver: str,
        created_at: datetime,
        text: Optional[str] = None,
        attachment: Optional[str] = None,
    ) -> "Message":
        """
        Build the entity from stored column values.

        Some databases drop the timezone on read; stored times are always UTC.
        """
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        return cls(
            message_id=str(message_id),
            sender=sender,
            receiver=receiver,
            created_at=created_at,
            text=text,
            attachment=attachment,
        )
