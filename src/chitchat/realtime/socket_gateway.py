"""
Socket.IO transport.

Authenticates once per connection from the handshake ``auth`` payload,
registers authenticated connections in the session registry and routes
``send`` events through the delivery dispatcher. A missing or invalid token
does not refuse the connection; it stays anonymous and joins nothing.
"""

from typing import Any, Dict, Optional
from urllib.parse import parse_qs

import socketio
from loguru import logger
from pydantic import ValidationError

from chitchat.auth.token_verifier import TokenVerifier
from chitchat.domain.entities.message import Message
from chitchat.errors import ChitchatError
from chitchat.realtime.dispatcher import DeliveryDispatcher
from chitchat.realtime.events import ClientEvent, SendMessageEvent, ServerEvent
from chitchat.realtime.session_registry import SessionRegistry


class SocketIOPusher:
    """MessagePusher emitting the ``message`` event to a single sid."""

    def __init__(self, sio: socketio.AsyncServer):
        self.sio = sio

    async def push(self, connection_id: str, message: Message) -> None:
        await self.sio.emit(ServerEvent.MESSAGE.value, message.to_payload(), to=connection_id)


def _token_from_handshake(environ: Dict[str, Any], auth: Any) -> Optional[str]:
    if isinstance(auth, dict) and auth.get("token"):
        return str(auth["token"])

    query = parse_qs(environ.get("QUERY_STRING", "") if environ else "")
    tokens = query.get("token")
    return tokens[0] if tokens else None


class SocketGateway:
    def __init__(
        self,
        sio: socketio.AsyncServer,
        verifier: TokenVerifier,
        registry: SessionRegistry,
        dispatcher: DeliveryDispatcher,
    ):
        self.sio = sio
        self.verifier = verifier
        self.registry = registry
        self.dispatcher = dispatcher

    def register_handlers(self) -> None:
        self.sio.on("connect", self.on_connect)
        self.sio.on("disconnect", self.on_disconnect)
        for event in ClientEvent:
            self.sio.on(event.value, self.on_send)

    async def on_connect(self, sid: str, environ: Dict[str, Any], auth: Any = None) -> None:
        user_id = self.verifier.verify(_token_from_handshake(environ, auth))
        if user_id is None:
            logger.info(f"Socket {sid} connected anonymously")
            return

        self.registry.register(sid, user_id)
        logger.info(f"Socket {sid} connected as user {user_id}")

    async def on_disconnect(self, sid: str, reason: Any = None) -> None:
        user_id = self.registry.unregister(sid)
        logger.info(f"Socket {sid} disconnected (user={user_id}, reason={reason})")

    async def on_send(self, sid: str, data: Any = None) -> Dict[str, Any]:
        """
        Handle a send event.

        The sender is the connection's user; an anonymous connection falls
        back to the ``sender``/``from`` field of the payload. Delivery is
        confirmed by the ``message`` push; the returned dict is the optional
        Socket.IO ack.
        """
        try:
            event = SendMessageEvent.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Socket {sid} sent an invalid payload: {e.error_count()} errors")
            return {"ok": False, "error": "validation_error", "message": "invalid send payload"}

        sender = self.registry.user_for(sid) or event.sender
        if sender is None:
            logger.warning(f"Anonymous socket {sid} sent a message without a sender")
            return {"ok": False, "error": "validation_error", "message": "sender is required"}

        try:
            message = await self.dispatcher.send(
                sender, event.receiver, text=event.text, attachment=event.attachment
            )
        except ChitchatError as e:
            logger.warning(f"Send from socket {sid} failed: {e.code}: {e.message}")
            return {"ok": False, "error": e.code, "message": e.message}

        return {"ok": True, "message_id": message.message_id}


def create_socket_server(cors_allowed_origins: Any = "*") -> socketio.AsyncServer:
    return socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=cors_allowed_origins,
        ping_timeout=25,
        ping_interval=20,
    )
