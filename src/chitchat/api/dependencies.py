"""FastAPI dependencies shared by the controllers."""

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from loguru import logger

from chitchat.api.container import AppContainer
from chitchat.errors import Unauthenticated
from chitchat.services.messaging_service import MessagingService


def get_container(request: Request) -> AppContainer:
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise HTTPException(status_code=503, detail="Service is starting")
    return container


def get_messaging_service(container: AppContainer = Depends(get_container)) -> MessagingService:
    return container.messaging_service


def _reject(reason: str) -> HTTPException:
    error = Unauthenticated(reason)
    return HTTPException(status_code=error.http_status, detail=error.message)


def get_current_user_id(
    authorization: Optional[str] = Header(None),
    container: AppContainer = Depends(get_container),
) -> str:
    """
    Resolve the caller from the ``Authorization: Bearer`` header.

    Every request is authenticated on its own; nothing is cached between calls.
    """
    if not authorization:
        raise _reject("No auth header")

    token = container.verifier.token_from_header(authorization)
    if not token:
        raise _reject("Invalid auth header")

    user_id = container.verifier.verify(token)
    if user_id is None:
        logger.info("Rejected request with invalid token")
        raise _reject("Invalid token")
    return user_id
