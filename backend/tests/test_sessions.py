import threading
from datetime import datetime, timedelta, timezone

import pytest

from tasktrack.errors import RefreshTokenExpired, RefreshTokenInvalid
from tasktrack.utils.sessions import SessionStore

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_resolve_returns_owner():
    store = SessionStore()
    store.add("tok", 3, NOW + timedelta(days=7))

    assert store.resolve("tok", NOW) == 3
    assert store.resolve("tok", NOW + timedelta(days=7)) == 3


def test_resolve_unknown_token():
    with pytest.raises(RefreshTokenInvalid):
        SessionStore().resolve("missing", NOW)


def test_expired_entry_is_evicted_on_lookup():
    store = SessionStore()
    store.add("tok", 3, NOW)

    with pytest.raises(RefreshTokenExpired):
        store.resolve("tok", NOW + timedelta(microseconds=1))
    assert "tok" not in store
    with pytest.raises(RefreshTokenInvalid):
        store.resolve("tok", NOW)


def test_revoke_is_idempotent():
    store = SessionStore()
    store.add("tok", 3, NOW + timedelta(days=1))

    assert store.revoke("tok") is True
    assert store.revoke("tok") is False
    assert len(store) == 0


def test_purge_expired_keeps_live_entries():
    store = SessionStore()
    store.add("old", 1, NOW - timedelta(seconds=1))
    store.add("live", 2, NOW + timedelta(seconds=1))

    assert store.purge_expired(NOW) == 1
    assert "live" in store
    assert "old" not in store


def test_concurrent_revoke_and_resolve_never_resurrect_a_token():
    store = SessionStore()
    tokens = [f"tok{i}" for i in range(200)]
    for i, tok in enumerate(tokens):
        store.add(tok, i, NOW + timedelta(days=1))

    resolved_after_revoke = []
    revoked = set()
    start = threading.Barrier(2)

    def logout():
        start.wait()
        for tok in tokens:
            store.revoke(tok)
            revoked.add(tok)

    def refresh():
        start.wait()
        for _ in range(3):
            for tok in tokens:
                was_revoked = tok in revoked
                try:
                    store.resolve(tok, NOW)
                except RefreshTokenInvalid:
                    continue
                if was_revoked:
                    resolved_after_revoke.append(tok)

    threads = [threading.Thread(target=logout), threading.Thread(target=refresh)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert resolved_after_revoke == []
    assert len(store) == 0
