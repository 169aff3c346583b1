"""Database package for Chitchat

This package contains:
- adapters: message store implementations (SQL, in-memory)
- interfaces: abstract base classes for storage operations
- models: SQLModel tables
"""

from chitchat.dbs.models import DirectMessage

__all__ = [
    "DirectMessage",
]
