import json
import time

import pytest

from order_tracker.services.api_client import ApiError, AuthError
from order_tracker.services.auth_service import (
    SIGNED_IN, SIGNED_OUT, TOKEN_REFRESHED, AuthService, Session,
)


class FakeClient:
    def __init__(self):
        self.access_token = None
        self.sign_in_response = {
            "access_token": "tok", "refresh_token": "ref", "expires_in": 3600,
            "user": {"id": "u1", "email": "ana@example.com"},
        }
        self.refresh_response = {
            "access_token": "tok2", "refresh_token": "ref2", "expires_in": 3600,
            "user": {"id": "u1", "email": "ana@example.com"},
        }
        self.refresh_error = None
        self.sign_out_error = None
        self.calls = []

    def set_access_token(self, token):
        self.access_token = token

    def sign_in_with_password(self, email, password):
        self.calls.append(("sign_in", email, password))
        return self.sign_in_response

    def refresh_session(self, refresh_token):
        self.calls.append(("refresh", refresh_token))
        if self.refresh_error:
            raise self.refresh_error
        return self.refresh_response

    def sign_out(self, access_token):
        self.calls.append(("sign_out", access_token))
        if self.sign_out_error:
            raise self.sign_out_error


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def session_file(tmp_path):
    return tmp_path / "auth" / "session.json"


@pytest.fixture
def auth(client, session_file):
    return AuthService(client, session_file)


@pytest.fixture
def events(auth):
    seen = []
    auth.on_auth_state_change(lambda event, session: seen.append(event))
    return seen


def write_session(path, **overrides):
    data = dict(access_token="old", refresh_token="ref", expires_at=None, user={"email": "ana@example.com"})
    data.update(overrides)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


def test_session_from_response_needs_token():
    assert Session.from_response({}) is None
    assert Session.from_response(None) is None
    s = Session.from_response({"access_token": "t", "expires_in": 60, "user": {"email": "x@y.z"}})
    assert s.email == "x@y.z"
    assert s.expires_at >= int(time.time()) + 59


def test_session_expiry_margin():
    s = Session(access_token="t", expires_at=1000)
    assert s.is_expired(now=900) is False
    assert s.is_expired(now=980) is True
    assert Session(access_token="t").is_expired() is False


def test_sign_in_stores_and_notifies(auth, client, session_file, events):
    session = auth.sign_in_with_password("  ana@example.com ", "pw")
    assert session.email == "ana@example.com"
    assert client.calls == [("sign_in", "ana@example.com", "pw")]
    assert client.access_token == "tok"
    assert json.loads(session_file.read_text(encoding="utf-8"))["access_token"] == "tok"
    assert events == [SIGNED_IN]
    assert auth.get_session() is session


@pytest.mark.parametrize("email,password", [("", "pw"), ("   ", "pw"), ("a@b.c", "")])
def test_sign_in_requires_both_fields(auth, client, email, password):
    with pytest.raises(AuthError, match="Please enter email and password."):
        auth.sign_in_with_password(email, password)
    assert client.calls == []


def test_sign_in_without_token_fails(auth, client, events):
    client.sign_in_response = {"user": {}}
    with pytest.raises(AuthError, match="no session returned"):
        auth.sign_in_with_password("a@b.c", "pw")
    assert events == []


def test_no_session_when_nothing_stored(auth):
    assert auth.get_session() is None
    assert auth.has_stored_session() is False


def test_stored_session_is_picked_up(auth, client, session_file):
    write_session(session_file)
    assert auth.has_stored_session() is True
    session = auth.get_session()
    assert session.access_token == "old"
    assert client.access_token == "old"


def test_unreadable_session_file_is_ignored(auth, session_file):
    session_file.parent.mkdir(parents=True)
    session_file.write_text("{not json", encoding="utf-8")
    assert auth.get_session() is None
    assert auth.has_stored_session() is False


def test_expired_session_is_refreshed(auth, client, session_file, events):
    write_session(session_file, expires_at=int(time.time()) - 10)
    session = auth.get_session()
    assert session.access_token == "tok2"
    assert client.calls == [("refresh", "ref")]
    assert events == [TOKEN_REFRESHED]
    assert json.loads(session_file.read_text(encoding="utf-8"))["refresh_token"] == "ref2"


def test_expired_session_without_refresh_token_signs_out(auth, session_file, events):
    write_session(session_file, expires_at=int(time.time()) - 10, refresh_token="")
    assert auth.get_session() is None
    assert not session_file.exists()
    assert events == [SIGNED_OUT]


def test_rejected_refresh_signs_out(auth, client, session_file, events):
    write_session(session_file, expires_at=int(time.time()) - 10)
    client.refresh_error = AuthError("Invalid Refresh Token", 400)
    assert auth.get_session() is None
    assert not session_file.exists()
    assert events == [SIGNED_OUT]


def test_unreachable_refresh_propagates(auth, client, session_file, events):
    write_session(session_file, expires_at=int(time.time()) - 10)
    client.refresh_error = AuthError("Could not reach the server: refused")
    with pytest.raises(AuthError):
        auth.get_session()
    assert session_file.exists()
    assert events == []


def test_sign_out_clears_even_when_remote_fails(auth, client, session_file, events):
    auth.sign_in_with_password("ana@example.com", "pw")
    client.sign_out_error = ApiError("Could not reach the server: refused")
    auth.sign_out()
    assert ("sign_out", "tok") in client.calls
    assert client.access_token is None
    assert not session_file.exists()
    assert auth.get_session() is None
    assert events == [SIGNED_IN, SIGNED_OUT]


def test_unsubscribe_stops_notifications(auth):
    seen = []
    unsubscribe = auth.on_auth_state_change(lambda event, session: seen.append(event))
    unsubscribe()
    unsubscribe()
    auth.sign_out()
    assert seen == []


def test_works_without_session_file(client):
    auth = AuthService(client)
    auth.sign_in_with_password("ana@example.com", "pw")
    assert auth.get_session().access_token == "tok"
    assert auth.has_stored_session() is True
