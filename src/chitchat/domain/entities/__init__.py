"""Domain entities for the messaging core"""

from chitchat.domain.entities.message import Message

__all__ = ["Message"]
