"""
Application container.

Owns the single Session Registry and Message Store handle shared by every
request and socket event in the process, and the objects wired on top of
them.
"""

from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from chitchat.auth.token_verifier import TokenVerifier
from chitchat.dbs.adapters import InMemoryMessageAdapter, SQLMessageAdapter
from chitchat.dbs.database import Database
from chitchat.dbs.interfaces.message_store import AbstractMessageRepository
from chitchat.realtime.dispatcher import DeliveryDispatcher
from chitchat.realtime.session_registry import SessionRegistry
from chitchat.services.messaging_service import MessagingService
from chitchat.utils.settings.core import AuthSettings, MessagingSettings, PostgresSettings, AppSettings
from chitchat.utils.settings.factory import settings_factory


@dataclass
class AppContainer:
    verifier: TokenVerifier
    store: AbstractMessageRepository
    messaging_settings: MessagingSettings = field(default_factory=MessagingSettings)
    registry: SessionRegistry = field(default_factory=SessionRegistry)
    database: Optional[Database] = None

    def __post_init__(self) -> None:
        self.dispatcher = DeliveryDispatcher(
            store=self.store,
            registry=self.registry,
            history_limit=self.messaging_settings.history_limit,
        )
        self.messaging_service = MessagingService(self.dispatcher)

    @classmethod
    def create_default(cls) -> "AppContainer":
        """Build the container from environment settings"""
        return cls.from_settings(
            app_settings=settings_factory.create_app_settings(),
            auth_settings=settings_factory.create_auth_settings(),
            messaging_settings=settings_factory.create_messaging_settings(),
            postgres_settings=settings_factory.create_postgres_settings(),
        )

    @classmethod
    def from_settings(
        cls,
        app_settings: AppSettings,
        auth_settings: AuthSettings,
        messaging_settings: MessagingSettings,
        postgres_settings: PostgresSettings,
    ) -> "AppContainer":
        verifier = TokenVerifier.from_settings(auth_settings)

        if app_settings.use_memory_store:
            logger.warning("Using in-memory message store; messages are lost on restart")
            return cls(verifier=verifier, store=InMemoryMessageAdapter(), messaging_settings=messaging_settings)

        database = Database(
            postgres_settings,
            statement_timeout_seconds=messaging_settings.storage_timeout_seconds,
        )
        store = SQLMessageAdapter(
            database.session_factory,
            timeout_seconds=messaging_settings.storage_timeout_seconds,
        )
        return cls(
            verifier=verifier,
            store=store,
            messaging_settings=messaging_settings,
            database=database,
        )

    def startup(self) -> None:
        if self.database is not None:
            self.database.create_tables()
        logger.info("Messaging container started")

    async def shutdown(self) -> None:
        await self.store.close()
        if self.database is not None:
            self.database.close()
        logger.info("Messaging container stopped")
