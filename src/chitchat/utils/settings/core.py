from pydantic import Field
from .base import ABCBaseSettings


class PostgresSettings(ABCBaseSettings):
    """Message store database settings"""
    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    database: str = Field(default="chatapp", description="PostgreSQL database name")
    user: str = Field(default="chatapp", description="PostgreSQL username")
    password: str = Field(default="chatapp", description="PostgreSQL password")
    url: str | None = Field(
        default=None,
        description="Full SQLAlchemy URL overriding the host/port fields (e.g. sqlite:///chitchat.db)",
    )

    model_config = ABCBaseSettings.with_prefix("POSTGRES_")

    @property
    def connection_string(self) -> str:
        """Get the SQLAlchemy connection string"""
        if self.url:
            return self.url
        return f"postgresql+psycopg://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


class AuthSettings(ABCBaseSettings):
    """Bearer token verification settings"""
    jwt_secret: str = Field(default="CHANGE_THIS_SECRET", description="Shared secret the tokens are signed with")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    token_ttl_days: int = Field(default=7, description="Lifetime of development tokens in days")

    model_config = ABCBaseSettings.with_prefix("AUTH_")


class MessagingSettings(ABCBaseSettings):
    """Message history and delivery settings"""
    history_limit: int = Field(default=1000, gt=0, description="Maximum messages returned by a history query")
    feed_limit: int = Field(default=100, gt=0, description="Maximum posts returned by the feed routes")
    storage_timeout_seconds: float = Field(default=5.0, gt=0, description="Upper bound on a single storage call")

    model_config = ABCBaseSettings.with_prefix("MESSAGING_")


class AppSettings(ABCBaseSettings):
    """Application settings"""
    app_name: str = Field(default="Chitchat", description="Application name")
    environment: str = Field(default="local", description="Environment (local, dev, prod)")
    debug: bool = Field(default=True, description="Debug mode")
    host: str = Field(default="0.0.0.0", description="Application host")
    port: int = Field(default=5000, description="Application port")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")
    use_memory_store: bool = Field(default=False, description="Keep messages in process memory instead of the database")

    model_config = ABCBaseSettings.with_prefix("APP_")
