"""Message store adapters"""

from chitchat.dbs.adapters.memory_message_adapter import InMemoryMessageAdapter
from chitchat.dbs.adapters.sql_message_adapter import SQLMessageAdapter

__all__ = [
    "InMemoryMessageAdapter",
    "SQLMessageAdapter",
]
