"""Main application entry point: FastAPI routes with the Socket.IO server mounted alongside."""

from contextlib import asynccontextmanager
from typing import Optional

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from chitchat import __version__
from chitchat.api.container import AppContainer
from chitchat.api.interfaces.controllers.root_controller import router as root_router
from chitchat.api.interfaces.controllers.messages_controller import router as messages_router
from chitchat.realtime.socket_gateway import SocketGateway, SocketIOPusher, create_socket_server
from chitchat.utils.settings.core import AppSettings


def create_app(
    container: Optional[AppContainer] = None,
    settings: Optional[AppSettings] = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    The container is created from environment settings during startup unless
    one is passed in. The Socket.IO server is kept on ``app.state.sio``.
    """
    settings = settings or AppSettings()
    socket_origins = "*" if "*" in settings.cors_origins else settings.cors_origins
    sio = create_socket_server(cors_allowed_origins=socket_origins)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        active = container or AppContainer.create_default()
        active.startup()

        gateway = SocketGateway(sio, active.verifier, active.registry, active.dispatcher)
        gateway.register_handlers()
        active.dispatcher.attach_pusher(SocketIOPusher(sio))

        app.state.container = active
        app.state.gateway = gateway
        logger.info(f"{settings.app_name} started in {settings.environment} mode")
        try:
            yield
        finally:
            await active.shutdown()
            app.state.container = None

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Direct messaging with REST history and Socket.IO delivery",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(root_router)
    app.include_router(messages_router)
    app.state.sio = sio
    return app


def create_asgi_app(app: Optional[FastAPI] = None) -> socketio.ASGIApp:
    """Wrap the FastAPI app so ``/socket.io/`` is served by the Socket.IO server."""
    app = app or create_app()
    return socketio.ASGIApp(app.state.sio, other_asgi_app=app)


app = create_asgi_app()


if __name__ == "__main__":
    import uvicorn
    settings = AppSettings()
    uvicorn.run(app, host=settings.host, port=settings.port)
