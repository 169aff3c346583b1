"""Database models package for Chitchat"""

from chitchat.dbs.models.direct_message import DirectMessage, DirectMessageBase

__all__ = [
    "DirectMessage",
    "DirectMessageBase",
]
