"""Socket event names and payload models."""

from enum import StrEnum
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ClientEvent(StrEnum):
    """Events a client may emit"""

    SEND = "send"
    SEND_MESSAGE = "sendMessage"  # name used by the mobile client


class ServerEvent(StrEnum):
    """Events the server pushes"""

    MESSAGE = "message"


class SendMessageEvent(BaseModel):
    """
    Payload of a ``send`` event.

    Accepts the mobile client's field names (``to``, ``from``, ``media_url``)
    as well as the canonical ones. ``sender`` is only honoured when the
    connection itself is anonymous.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    kind: Literal["send"] = "send"
    receiver: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("receiver", "to", "receiverId")
    )
    text: Optional[str] = None
    attachment: Optional[str] = Field(
        None, validation_alias=AliasChoices("attachment", "media_url")
    )
    sender: Optional[str] = Field(None, validation_alias=AliasChoices("sender", "from"))
