"""
Chitchat error types.

Each error carries a stable code and the HTTP status the REST transport
answers with. PushFailed is only ever logged.
"""

from typing import Any, Optional


class ChitchatError(Exception):
    http_status: int = 500

    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "status_code": self.http_status,
        }


class Unauthenticated(ChitchatError):
    http_status = 401

    def __init__(self, message: str = "Invalid or missing credentials"):
        super().__init__("unauthenticated", message)


class NotFound(ChitchatError):
    http_status = 404

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("not_found", message, details)


class ValidationFailed(ChitchatError):
    http_status = 400

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("validation_error", message, details)


class StorageUnavailable(ChitchatError):
    http_status = 503

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("storage_unavailable", message, details)


class PushFailed(ChitchatError):
    def __init__(self, connection_id: str, message: str):
        super().__init__("push_failed", message, {"connection_id": connection_id})
        self.connection_id = connection_id
