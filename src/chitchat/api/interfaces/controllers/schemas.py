"""Request and response schemas for the messages API"""

from datetime import datetime
from typing import Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# Request Models
class SubmitMessageRequest(BaseModel):
    """Request model for sending a direct message"""

    model_config = ConfigDict(populate_by_name=True)

    receiver: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("receiverId", "receiver"),
        description="User the message is addressed to",
    )
    text: Optional[str] = Field(None, description="Message text")
    attachment: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("media_url", "attachment"),
        description="Optional media URL",
    )


# Response Models
class MessageResponse(BaseModel):
    """Response model for a stored message"""

    message_id: str
    sender: str
    receiver: str
    text: Optional[str] = None
    attachment: Optional[str] = None
    created_at: datetime
