import threading

import pytest

from chitchat.realtime.session_registry import SessionRegistry


def test_register_many_devices_for_one_user(registry):
    for sid in ("c1", "c2", "c3"):
        registry.register(sid, "u1")

    assert registry.sessions_for("u1") == {"c1", "c2", "c3"}

    registry.unregister("c2")
    assert registry.sessions_for("u1") == {"c1", "c3"}


def test_register_is_idempotent(registry):
    registry.register("c1", "u1")
    registry.register("c1", "u1")

    assert registry.sessions_for("u1") == {"c1"}
    assert registry.connection_count() == 1


def test_connection_identity_cannot_change(registry):
    registry.register("c1", "u1")

    with pytest.raises(ValueError):
        registry.register("c1", "u2")

    assert registry.user_for("c1") == "u1"
    assert registry.sessions_for("u2") == frozenset()


def test_unregister_unknown_connection_is_noop(registry):
    assert registry.unregister("anonymous-sid") is None
    assert registry.connection_count() == 0


def test_unregister_returns_owner_and_forgets_empty_users(registry):
    registry.register("c1", "u1")

    assert registry.unregister("c1") == "u1"
    assert registry.sessions_for("u1") == frozenset()
    assert registry.user_count() == 0
    assert registry.user_for("c1") is None


def test_sessions_for_returns_snapshot(registry):
    registry.register("c1", "u1")
    snapshot = registry.sessions_for("u1")

    registry.register("c2", "u1")

    assert snapshot == {"c1"}
    assert registry.sessions_for("u1") == {"c1", "c2"}


def test_concurrent_register_and_unregister_leave_consistent_state():
    registry = SessionRegistry()
    errors = []

    def churn(worker: int):
        try:
            for i in range(200):
                sid = f"w{worker}-{i}"
                registry.register(sid, f"user-{i % 5}")
                assert registry.user_for(sid) == f"user-{i % 5}"
                if i % 2:
                    registry.unregister(sid)
        except Exception as e:  # surfaced below
            errors.append(e)

    threads = [threading.Thread(target=churn, args=(w,)) for w in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert registry.connection_count() == 8 * 100
    total = sum(len(registry.sessions_for(f"user-{u}")) for u in range(5))
    assert total == 8 * 100


def test_readers_never_see_partial_registrations():
    registry = SessionRegistry()
    tracked = threading.Lock()
    kept, gone = set(), set()
    errors = []
    stop = threading.Event()

    def writer(worker: int):
        try:
            for i in range(300):
                sid = f"w{worker}-{i}"
                registry.register(sid, "u1")
                if i % 3 == 0:
                    with tracked:
                        kept.add(sid)
                    continue
                registry.unregister(sid)
                with tracked:
                    gone.add(sid)
        except Exception as e:  # surfaced below
            errors.append(e)

    def reader():
        try:
            while not stop.is_set():
                with tracked:
                    kept_before, gone_before = set(kept), set(gone)
                snapshot = registry.sessions_for("u1")
                assert kept_before <= snapshot
                assert not (gone_before & snapshot)
                for sid in snapshot:
                    assert registry.user_for(sid) in ("u1", None)
        except Exception as e:  # surfaced below
            errors.append(e)

    readers = [threading.Thread(target=reader) for _ in range(4)]
    writers = [threading.Thread(target=writer, args=(w,)) for w in range(4)]
    for t in readers + writers:
        t.start()
    for t in writers:
        t.join()
    stop.set()
    for t in readers:
        t.join()

    assert errors == []
    assert registry.sessions_for("u1") == kept
