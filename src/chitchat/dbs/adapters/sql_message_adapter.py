"""
SQL message store adapter using SQLModel.

Implements AbstractMessageRepository on top of a synchronous SQLAlchemy
session factory. Session work runs in a worker thread under a timeout so the
event loop keeps serving other connections while the database is busy.
"""

import asyncio
import threading
from typing import Any, Callable, List, Optional, TypeVar

from loguru import logger
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select, and_, or_

from chitchat.dbs.interfaces.message_store import AbstractMessageRepository, DEFAULT_HISTORY_LIMIT
from chitchat.dbs.models import DirectMessage
from chitchat.domain.entities.message import Message
from chitchat.errors import StorageUnavailable
from chitchat.utils.clock import MonotonicClock

T = TypeVar("T")

_LOCK_STRIPES = 64


class SQLMessageAdapter(AbstractMessageRepository):
    """
    Message store backed by PostgreSQL (or any SQLAlchemy database).

    Appends for the same participant pair are serialized through a striped
    asyncio lock so that timestamp order equals commit order for that pair.
    The lock is taken on the event loop before a worker thread is used, so a
    busy pair queues without holding threads and other pairs proceed in
    parallel.

    A write that exceeds the timeout is abandoned: the worker rolls back
    instead of committing, and the lock is held until the worker has finished
    so an abandoned write never overlaps the next one for the same pair. If
    the commit was already under way when the timeout fired, the caller waits
    for it and gets the stored message, so a reported failure always means
    nothing was stored.
    """

    def __init__(
        self,
        session_factory: Callable[[], Any],
        timeout_seconds: float = 5.0,
        clock: Optional[MonotonicClock] = None,
    ) -> None:
        """
        Initialize adapter with session factory.

        Args:
            session_factory: Callable returning a Session context manager
            timeout_seconds: Upper bound for a single storage call
            clock: Timestamp source, shared across pairs
        """
        self.session_factory = session_factory
        self.timeout_seconds = timeout_seconds
        self.clock = clock or MonotonicClock()
        self._pair_locks = [asyncio.Lock() for _ in range(_LOCK_STRIPES)]

    def _lock_for(self, user_a: str, user_b: str) -> asyncio.Lock:
        pair = frozenset((user_a, user_b))
        return self._pair_locks[hash(pair) % _LOCK_STRIPES]

    def _timed_out(self, operation: str) -> StorageUnavailable:
        logger.error(f"Message store {operation} timed out after {self.timeout_seconds}s")
        return StorageUnavailable(
            f"Message store {operation} timed out", {"timeout_seconds": self.timeout_seconds}
        )

    async def _run(self, operation: str, func: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            raise self._timed_out(operation) from e

    def _append_sync(
        self,
        sender: str,
        receiver: str,
        text: Optional[str],
        attachment: Optional[str],
        abandoned: threading.Event,
    ) -> Message:
        def refuse_if_abandoned(session) -> None:
            if abandoned.is_set():
                logger.warning(f"Rolling back abandoned write {sender} -> {receiver}")
                raise StorageUnavailable("Message store append abandoned after timeout")

        try:
            with self.session_factory() as session:
                event.listen(session, "before_commit", refuse_if_abandoned)
                row = DirectMessage(
                    sender_id=sender,
                    receiver_id=receiver,
                    text=text,
                    media_url=attachment,
                    created_at=self.clock.now(),
                )
                session.add(row)
                session.commit()
                session.refresh(row)
        except SQLAlchemyError as e:
            logger.error(f"Failed to store message {sender} -> {receiver}: {e}")
            raise StorageUnavailable(f"Failed to store message: {e}") from e

        logger.debug(f"Stored message {row.id} from {sender} to {receiver}")
        return self._to_entity(row)

    def _range_sync(self, user_a: str, user_b: str, limit: int) -> List[Message]:
        try:
            with self.session_factory() as session:
                statement = (
                    select(DirectMessage)
                    .where(
                        or_(
                            and_(DirectMessage.sender_id == user_a, DirectMessage.receiver_id == user_b),
                            and_(DirectMessage.sender_id == user_b, DirectMessage.receiver_id == user_a),
                        )
                    )
                    .order_by(DirectMessage.created_at.asc())
                    .limit(limit)
                )
                rows = session.execute(statement).scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read history for {user_a} <-> {user_b}: {e}")
            raise StorageUnavailable(f"Failed to read message history: {e}") from e

        logger.debug(f"Retrieved {len(rows)} messages for {user_a} <-> {user_b}")
        return [self._to_entity(row) for row in rows]

    @staticmethod
    def _to_entity(row: DirectMessage) -> Message:
        return Message.from_record(
            message_id=row.id,
            sender=row.sender_id,
            receiver=row.receiver_id,
            created_at=row.created_at,
            text=row.text,
            attachment=row.media_url,
        )

    async def append(
        self,
        sender: str,
        receiver: str,
        text: Optional[str] = None,
        attachment: Optional[str] = None,
    ) -> Message:
        """
        Persist a message and return the stored record.

        Raises:
            StorageUnavailable: If the database fails or the call times out
                before committing; no record is left behind in either case
        """
        async with self._lock_for(sender, receiver):
            abandoned = threading.Event()
            worker = asyncio.ensure_future(
                asyncio.to_thread(self._append_sync, sender, receiver, text, attachment, abandoned)
            )
            try:
                return await asyncio.wait_for(asyncio.shield(worker), timeout=self.timeout_seconds)
            except asyncio.TimeoutError as e:
                abandoned.set()
                try:
                    message = await worker
                except StorageUnavailable:
                    raise self._timed_out("append") from e
                logger.warning(f"Message {message.message_id} committed after the timeout; returning it")
                return message

    async def range(
        self,
        user_a: str,
        user_b: str,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> List[Message]:
        """
        Messages exchanged between two users in either direction, oldest first.

        Raises:
            StorageUnavailable: If the database fails or the call times out
        """
        return await self._run("range", self._range_sync, user_a, user_b, limit)
