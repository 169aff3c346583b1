"""
SQLModel table for direct messages.

Rows are append-only: the store inserts them and reads them back by
participant pair, nothing updates or deletes them.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4
from sqlmodel import Field, SQLModel, Column, DateTime, Text


class DirectMessageBase(SQLModel):
    """Shared fields for direct messages"""
    sender_id: str = Field(index=True, max_length=255)
    receiver_id: str = Field(index=True, max_length=255)
    text: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    media_url: Optional[str] = Field(default=None, max_length=2048)
    created_at: datetime = Field(
        sa_column=Column(DateTime(timezone=True), index=True, nullable=False)
    )


class DirectMessage(DirectMessageBase, table=True):
    """
    Direct message table model.

    ``created_at`` is assigned by the store's monotonic clock, so ordering by
    it reproduces the order in which appends completed.
    """
    __tablename__ = "direct_messages"

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        index=True,
        nullable=False
    )

    class Config:
        json_schema_extra = {
            "example": {
                "id": "660e8400-e29b-41d4-a716-446655440001",
                "sender_id": "u1",
                "receiver_id": "u2",
                "text": "hi",
                "media_url": None,
                "created_at": "2025-11-30T10:01:00Z",
            }
        }
