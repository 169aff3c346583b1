from typing import List, Optional, Set, Tuple

import pytest

from chitchat.auth.token_verifier import TokenVerifier
from chitchat.dbs.adapters import InMemoryMessageAdapter, SQLMessageAdapter
from chitchat.dbs.database import Database
from chitchat.domain.entities.message import Message
from chitchat.realtime.dispatcher import DeliveryDispatcher
from chitchat.realtime.session_registry import SessionRegistry
from chitchat.utils.settings.core import PostgresSettings

TEST_SECRET = "test-secret"


class RecordingPusher:
    """Collects pushes; connections listed in ``failing`` raise instead."""

    def __init__(self, failing: Optional[Set[str]] = None):
        self.pushed: List[Tuple[str, Message]] = []
        self.failing = failing or set()

    async def push(self, connection_id: str, message: Message) -> None:
        if connection_id in self.failing:
            raise ConnectionError(f"socket {connection_id} is gone")
        self.pushed.append((connection_id, message))

    def texts_for(self, connection_id: str) -> List[Optional[str]]:
        return [m.text for sid, m in self.pushed if sid == connection_id]

    def targets(self) -> List[str]:
        return [sid for sid, _ in self.pushed]


@pytest.fixture
def verifier() -> TokenVerifier:
    return TokenVerifier(secret=TEST_SECRET)


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


@pytest.fixture
def memory_store() -> InMemoryMessageAdapter:
    return InMemoryMessageAdapter()


@pytest.fixture
def sqlite_database(tmp_path):
    db = Database(PostgresSettings(url=f"sqlite:///{tmp_path / 'chitchat.db'}"))
    db.create_tables()
    yield db
    db.close()


@pytest.fixture
def sql_store(sqlite_database) -> SQLMessageAdapter:
    return SQLMessageAdapter(sqlite_database.session_factory, timeout_seconds=5.0)


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Runs a test against both store implementations."""
    if request.param == "memory":
        return request.getfixturevalue("memory_store")
    return request.getfixturevalue("sql_store")


@pytest.fixture
def pusher() -> RecordingPusher:
    return RecordingPusher()


@pytest.fixture
def dispatcher(memory_store, registry, pusher) -> DeliveryDispatcher:
    return DeliveryDispatcher(memory_store, registry, pusher, history_limit=1000)
