from types import SimpleNamespace

import pytest
from aiohttp import web

from socialsite.auth import (
    SESSION_STORE,
    NoSessionError,
    SessionStore,
    get_session,
    new_session,
)


def make_request(store, cookies=None):
    return SimpleNamespace(cookies=cookies or {}, app={SESSION_STORE: store})


def cookie_value(response, name="session"):
    return response.cookies[name].value


def test_save_and_load_round_trip():
    store = SessionStore(b"secret")
    response = web.Response()
    store.save(response, {"username": "ann", "userid": 7}, 600)
    request = make_request(store, {"session": cookie_value(response)})
    assert store.load(request) == {"username": "ann", "userid": 7}


def test_tampered_cookie_is_ignored():
    store = SessionStore(b"secret")
    response = web.Response()
    store.save(response, {"userid": 7}, 600)
    value = cookie_value(response)
    tampered = ("A" if value[0] != "A" else "B") + value[1:]
    assert store.load(make_request(store, {"session": tampered})) == {}
    assert store.load(make_request(store, {"session": "garbage"})) == {}


def test_other_key_cannot_read_cookie():
    store = SessionStore(b"secret")
    other = SessionStore(b"token")
    response = web.Response()
    store.save(response, {"userid": 1}, 600)
    assert other.load(make_request(other, {"session": cookie_value(response)})) == {}


def test_expired_session_is_empty():
    now = [1000.0]
    store = SessionStore(b"secret", clock=lambda: now[0])
    response = web.Response()
    store.save(response, {"userid": 3}, 600)
    request = make_request(store, {"session": cookie_value(response)})
    assert store.load(request) == {"userid": 3}
    now[0] += 600
    assert store.load(request) == {}


def test_get_session_without_cookie_raises():
    store = SessionStore(b"secret")
    with pytest.raises(NoSessionError):
        get_session(make_request(store))


def test_new_session_then_get_session():
    store = SessionStore(b"secret")
    response = web.Response()
    new_session(make_request(store), response, "ann", 42)
    morsel = response.cookies["session"]
    assert morsel["path"] == "/"
    assert str(morsel["max-age"]) == "600"
    assert bool(morsel["httponly"])
    request = make_request(store, {"session": morsel.value})
    assert get_session(request) == ("ann", 42)