from unittest.mock import AsyncMock

import pytest
import socketio

from chitchat.realtime.socket_gateway import SocketGateway, SocketIOPusher


@pytest.fixture
def sio() -> socketio.AsyncServer:
    return socketio.AsyncServer(async_mode="asgi")


@pytest.fixture
def gateway(sio, verifier, registry, dispatcher) -> SocketGateway:
    gw = SocketGateway(sio, verifier, registry, dispatcher)
    gw.register_handlers()
    return gw


def test_handlers_are_registered(gateway, sio):
    handlers = sio.handlers["/"]

    for event in ("connect", "disconnect", "send", "sendMessage"):
        assert event in handlers


async def test_connect_with_valid_token_registers_session(gateway, registry, verifier):
    await gateway.on_connect("sid-1", {}, {"token": verifier.issue("u2")})

    assert registry.sessions_for("u2") == {"sid-1"}


async def test_connect_with_query_string_token(gateway, registry, verifier):
    environ = {"QUERY_STRING": f"EIO=4&transport=websocket&token={verifier.issue('u2')}"}

    await gateway.on_connect("sid-1", environ, None)

    assert registry.user_for("sid-1") == "u2"


@pytest.mark.parametrize("auth", [None, {}, {"token": "garbage"}])
async def test_connect_without_valid_token_is_anonymous(gateway, registry, auth):
    result = await gateway.on_connect("sid-anon", {}, auth)

    assert result is None  # connection accepted
    assert registry.user_for("sid-anon") is None
    assert registry.connection_count() == 0


async def test_disconnect_unregisters(gateway, registry, verifier):
    await gateway.on_connect("sid-1", {}, {"token": verifier.issue("u2")})

    await gateway.on_disconnect("sid-1", "client disconnect")

    assert registry.sessions_for("u2") == frozenset()


async def test_disconnect_of_anonymous_connection_is_quiet(gateway):
    await gateway.on_disconnect("never-registered")


async def test_send_from_authenticated_socket_uses_session_identity(
    gateway, verifier, memory_store, pusher
):
    await gateway.on_connect("sid-u1", {}, {"token": verifier.issue("u1")})
    await gateway.on_connect("sid-u2", {}, {"token": verifier.issue("u2")})

    ack = await gateway.on_send("sid-u1", {"to": "u2", "text": "hi", "from": "impostor"})

    assert ack["ok"] is True
    history = await memory_store.range("u1", "u2")
    assert len(history) == 1
    assert history[0].sender == "u1"
    assert history[0].message_id == ack["message_id"]
    assert sorted(pusher.targets()) == ["sid-u1", "sid-u2"]


async def test_anonymous_socket_can_claim_a_sender(gateway, verifier, memory_store, pusher):
    # Known trust gap: an anonymous connection is attributed to the sender it claims.
    await gateway.on_connect("sid-anon", {}, None)
    await gateway.on_connect("sid-u2", {}, {"token": verifier.issue("u2")})

    ack = await gateway.on_send("sid-anon", {"receiver": "u2", "text": "trust me", "sender": "u9"})

    assert ack["ok"] is True
    history = await memory_store.range("u9", "u2")
    assert [(m.sender, m.text) for m in history] == [("u9", "trust me")]
    assert pusher.targets() == ["sid-u2"]


async def test_anonymous_socket_without_sender_is_rejected(gateway, memory_store):
    await gateway.on_connect("sid-anon", {}, None)

    ack = await gateway.on_send("sid-anon", {"to": "u2", "text": "who am i"})

    assert ack == {"ok": False, "error": "validation_error", "message": "sender is required"}
    assert len(memory_store) == 0


@pytest.mark.parametrize("payload", [None, "hello", {"text": "no receiver"}, {"to": "", "text": "x"}])
async def test_invalid_payload_is_rejected(gateway, verifier, memory_store, payload):
    await gateway.on_connect("sid-u1", {}, {"token": verifier.issue("u1")})

    ack = await gateway.on_send("sid-u1", payload)

    assert ack["ok"] is False
    assert ack["error"] == "validation_error"
    assert len(memory_store) == 0


async def test_empty_message_is_rejected_by_dispatcher(gateway, verifier):
    await gateway.on_connect("sid-u1", {}, {"token": verifier.issue("u1")})

    ack = await gateway.on_send("sid-u1", {"to": "u2"})

    assert ack["ok"] is False
    assert ack["error"] == "validation_error"


async def test_media_url_alias_maps_to_attachment(gateway, verifier, memory_store):
    await gateway.on_connect("sid-u1", {}, {"token": verifier.issue("u1")})

    await gateway.on_send("sid-u1", {"to": "u2", "media_url": "https://cdn.example/x.png"})

    history = await memory_store.range("u1", "u2")
    assert history[0].attachment == "https://cdn.example/x.png"


async def test_socketio_pusher_emits_message_event_to_sid(sio, dispatcher):
    message = await dispatcher.send("u1", "u2", text="hi")
    sio.emit = AsyncMock()

    await SocketIOPusher(sio).push("sid-9", message)

    sio.emit.assert_awaited_once_with("message", message.to_payload(), to="sid-9")
