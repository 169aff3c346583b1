"""
Settings Factory

Creates settings instances on demand instead of sharing module-level singletons.
"""

from chitchat.utils.settings.core import (
    PostgresSettings,
    AuthSettings,
    MessagingSettings,
    AppSettings,
)


class SettingsFactory:
    """Factory for creating settings instances"""

    @staticmethod
    def create_postgres_settings() -> PostgresSettings:
        """Create database settings instance"""
        return PostgresSettings()

    @staticmethod
    def create_auth_settings() -> AuthSettings:
        """Create token verification settings instance"""
        return AuthSettings()

    @staticmethod
    def create_messaging_settings() -> MessagingSettings:
        """Create messaging settings instance"""
        return MessagingSettings()

    @staticmethod
    def create_app_settings() -> AppSettings:
        """Create app settings instance"""
        return AppSettings()


settings_factory = SettingsFactory()
