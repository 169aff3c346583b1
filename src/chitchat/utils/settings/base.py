import os
from pathlib import Path
from typing import TypeVar
from pydantic_settings import BaseSettings, SettingsConfigDict
from loguru import logger

T = TypeVar('T', bound='ABCBaseSettings')


ENV_FILE_VARIABLE = "CHITCHAT_ENV_FILE"
DEFAULT_ENV_PATH = Path(".envs")
DEFAULT_ENV_FILE_CANDIDATES = [
    DEFAULT_ENV_PATH.joinpath("local.env"),
    DEFAULT_ENV_PATH.joinpath("dev.env"),
]


def find_env_file_if_exists() -> Path | None:
    """
    Locate the env file to load settings from.

    An explicit CHITCHAT_ENV_FILE wins; otherwise the first existing default
    candidate is used. Returns None when settings come only from the
    process environment.
    """
    explicit = os.getenv(ENV_FILE_VARIABLE)
    if explicit:
        logger.info(f"Using env file from {ENV_FILE_VARIABLE}: {explicit}")
        return Path(explicit)

    for env_path in DEFAULT_ENV_FILE_CANDIDATES:
        if env_path.exists():
            logger.info(f"Found env file: {env_path}")
            return env_path
    logger.debug("Loading settings from System Environment")
    return None


def _config_for(env_file: Path | None, env_prefix: str = "") -> SettingsConfigDict:
    return SettingsConfigDict(
        env_file=env_file,
        env_file_encoding="utf-8",
        env_prefix=env_prefix,
        extra="ignore",
        case_sensitive=False,
    )


class ABCBaseSettings(BaseSettings):
    model_config = _config_for(find_env_file_if_exists())

    @classmethod
    def with_prefix(cls, env_prefix: str) -> SettingsConfigDict:
        """Build a model_config for a subclass reading ``<PREFIX>_*`` variables."""
        return _config_for(cls.model_config.get("env_file"), env_prefix)

    @classmethod
    def from_env_file(cls: type[T], env_path: str | Path) -> T:
        """
        Load settings from a specific environment file.

        Args:
            env_path: Path to the .env file to load settings from.

        Returns:
            Instance of the calling class with settings loaded from the env file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        env_path = Path(env_path)
        if not env_path.exists():
            raise FileNotFoundError(f"Env file {env_path} does not exist.")

        prefix = cls.model_config.get("env_prefix", "")

        class CustomSettings(cls):  # dynamically override model_config
            model_config = _config_for(env_path, prefix)

        return CustomSettings()  # type: ignore[return-value]
