"""Root controller for basic application endpoints."""

from fastapi import APIRouter, Depends
from loguru import logger

from chitchat import __version__
from chitchat.api.container import AppContainer
from chitchat.api.dependencies import get_container


router = APIRouter(tags=["root"])


@router.get("/")
async def root():
    """Root endpoint with basic API information."""
    return {
        "message": "Backend running",
        "version": __version__,
        "status": "running"
    }


@router.get("/health")
async def health_check(container: AppContainer = Depends(get_container)):
    """Health check endpoint with live session counts."""
    logger.debug("Health check endpoint accessed")
    return {
        "status": "healthy",
        "store": type(container.store).__name__,
        "connections": container.registry.connection_count(),
        "users_online": container.registry.user_count(),
    }
