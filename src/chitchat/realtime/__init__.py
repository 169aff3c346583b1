"""Realtime delivery: session registry, dispatcher and Socket.IO gateway"""

from chitchat.realtime.dispatcher import DeliveryDispatcher, MessagePusher
from chitchat.realtime.session_registry import SessionRegistry
from chitchat.realtime.socket_gateway import SocketGateway, SocketIOPusher, create_socket_server

__all__ = [
    "DeliveryDispatcher",
    "MessagePusher",
    "SessionRegistry",
    "SocketGateway",
    "SocketIOPusher",
    "create_socket_server",
]
