"""
Registry of live socket sessions.

Maps each connection to at most one user and each user to the set of
connections it currently holds (one per device). Every mutation happens
under a single lock and readers get frozen snapshots, so a lookup never sees
a connection that is half registered or half removed.
"""

import threading
from typing import Dict, FrozenSet, Optional, Set

from loguru import logger


class SessionRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._user_by_connection: Dict[str, str] = {}
        self._connections_by_user: Dict[str, Set[str]] = {}

    def register(self, connection_id: str, user_id: str) -> None:
        """
        Bind a connection to a user.

        Registering the same pair again is a no-op. A connection keeps its
        first identity for its whole lifetime; rebinding it to another user
        is refused.
        """
        with self._lock:
            current = self._user_by_connection.get(connection_id)
            if current == user_id:
                return
            if current is not None:
                raise ValueError(
                    f"Connection {connection_id} is already registered to user {current}"
                )
            self._user_by_connection[connection_id] = user_id
            self._connections_by_user.setdefault(user_id, set()).add(connection_id)

        logger.debug(f"Registered connection {connection_id} for user {user_id}")

    def unregister(self, connection_id: str) -> Optional[str]:
        """
        Drop a connection. Returns the user it belonged to, if any.

        Unknown and anonymous connections are ignored.
        """
        with self._lock:
            user_id = self._user_by_connection.pop(connection_id, None)
            if user_id is None:
                return None
            connections = self._connections_by_user.get(user_id)
            if connections is not None:
                connections.discard(connection_id)
                if not connections:
                    del self._connections_by_user[user_id]

        logger.debug(f"Unregistered connection {connection_id} for user {user_id}")
        return user_id

    def sessions_for(self, user_id: str) -> FrozenSet[str]:
        """Snapshot of the user's live connections; empty if none."""
        with self._lock:
            return frozenset(self._connections_by_user.get(user_id, ()))

    def user_for(self, connection_id: str) -> Optional[str]:
        with self._lock:
            return self._user_by_connection.get(connection_id)

    def connection_count(self) -> int:
        with self._lock:
            return len(self._user_by_connection)

    def user_count(self) -> int:
        with self._lock:
            return len(self._connections_by_user)
