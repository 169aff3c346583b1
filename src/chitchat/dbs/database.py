"""
Database setup and session management for SQLModel.

Provides a synchronous engine, session factory and table creation. The
message store runs these sessions in worker threads, so the engine must be
usable from threads other than the one that created it.
"""

from typing import Any, Dict, Optional

from loguru import logger
from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlmodel import SQLModel

from chitchat.utils.settings.core import PostgresSettings


class Database:
    """
    Database manager for the message store.

    Handles engine creation, session management, and table creation.
    PostgreSQL in production; any SQLAlchemy URL works for local runs.
    """

    def __init__(self, settings: PostgresSettings, statement_timeout_seconds: Optional[float] = None):
        """
        Initialize database with settings.

        Args:
            settings: Database settings with connection parameters
            statement_timeout_seconds: Server-side limit for a single statement,
                so a write abandoned by the store cannot run on indefinitely
        """
        self.settings = settings
        self.statement_timeout_seconds = statement_timeout_seconds
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_sqlite(self) -> bool:
        return self.settings.connection_string.startswith("sqlite")

    def connect_args(self) -> Dict[str, Any]:
        if self.is_sqlite:
            args: Dict[str, Any] = {"check_same_thread": False}
            if self.statement_timeout_seconds:
                # sqlite3 busy timeout, in seconds
                args["timeout"] = self.statement_timeout_seconds
            return args

        if self.statement_timeout_seconds:
            timeout_ms = int(self.statement_timeout_seconds * 1000)
            return {"options": f"-c statement_timeout={timeout_ms}"}
        return {}

    @property
    def engine(self) -> Engine:
        """Get or create engine"""
        if self._engine is None:
            self._engine = create_engine(
                self.settings.connection_string,
                echo=False,
                pool_pre_ping=True,
                connect_args=self.connect_args(),
            )
            logger.info(f"Created engine for database: {self._engine.url.render_as_string(hide_password=True)}")

        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        """Get or create session factory"""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                self.engine,
                class_=Session,
                expire_on_commit=False,
            )
            logger.debug("Created session factory")

        return self._session_factory

    def create_tables(self):
        """Create all SQLModel tables. Safe to call on every startup."""
        from chitchat.dbs.models import DirectMessage  # noqa: F401

        SQLModel.metadata.create_all(self.engine)
        logger.info("Created all database tables")

    def close(self):
        """Close database connections"""
        if self._engine:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Closed database engine")
