"""Services package for request/response business logic."""

from chitchat.services.messaging_service import MessagingService

__all__ = [
    "MessagingService",
]
