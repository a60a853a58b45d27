import urllib.parse

import pytest

from ride_map.errors import AuthExchangeError
from ride_map.models import Credential
from ride_map.token_store import JsonFileTokenStore, MemoryTokenStore
from ride_map.utils import mask_token

from conftest import NOW, FakeResp, make_credential_record


def _token_ok(access="new-access", refresh="new-refresh", expires_at=NOW + 21600):
    def _post(url, data):
        return FakeResp(
            200,
            data={
                "token_type": "Bearer",
                "access_token": access,
                "refresh_token": refresh,
                "expires_at": expires_at,
                "athlete": {"id": 7},
            },
        )

    return _post


def _token_rejected(url, data):
    return FakeResp(
        400,
        data={
            "message": "Bad Request",
            "errors": [{"resource": "RefreshToken", "field": "refresh_token", "code": "invalid"}],
        },
    )


# --- Authorization URL -----------------------------------------------
def test_build_authorization_url_is_deterministic(build_manager):
    manager, session = build_manager(MemoryTokenStore())

    url = manager.build_authorization_url()

    assert url == manager.build_authorization_url()
    parsed = urllib.parse.urlparse(url)
    assert parsed.netloc == "www.strava.com"
    assert parsed.path == "/oauth/authorize"
    query = urllib.parse.parse_qs(parsed.query)
    assert query["client_id"] == ["cid"]
    assert query["redirect_uri"] == ["http://localhost:3000/auth/callback"]
    assert query["response_type"] == ["code"]
    assert query["scope"] == ["activity:read_all"]
    assert query["approval_prompt"] == ["auto"]
    assert session.post_calls == []


# --- Code exchange ---------------------------------------------------
def test_exchange_code_persists_credential(build_manager):
    store = MemoryTokenStore(make_credential_record(access="old"))
    manager, session = build_manager(store, post=_token_ok())

    credential = manager.exchange_code("auth-code")

    assert credential == Credential("new-access", "new-refresh", NOW + 21600)
    assert store.load() == credential.to_payload()
    sent = session.post_calls[0]["data"]
    assert sent["grant_type"] == "authorization_code"
    assert sent["code"] == "auth-code"
    assert sent["client_secret"] == "csec"


def test_exchange_code_rejected_raises(build_manager):
    store = MemoryTokenStore()
    manager, _ = build_manager(store, post=_token_rejected)

    with pytest.raises(AuthExchangeError):
        manager.exchange_code("bad-code")
    assert store.load() is None


def test_exchange_code_transport_failure_raises(build_manager, connection_error):
    manager, _ = build_manager(MemoryTokenStore(), post=lambda url, data: connection_error)

    with pytest.raises(AuthExchangeError):
        manager.exchange_code("code")


def test_exchange_code_invalid_json_raises(build_manager):
    manager, _ = build_manager(
        MemoryTokenStore(),
        post=lambda url, data: FakeResp(200, data=ValueError("invalid json"), text="oops"),
    )

    with pytest.raises(AuthExchangeError):
        manager.exchange_code("code")


def test_exchange_code_incomplete_payload_raises(build_manager):
    manager, _ = build_manager(
        MemoryTokenStore(),
        post=lambda url, data: FakeResp(200, data={"access_token": "only"}),
    )

    with pytest.raises(AuthExchangeError):
        manager.exchange_code("code")


def test_exchange_code_requires_code(build_manager):
    manager, session = build_manager(MemoryTokenStore(), post=_token_ok())

    with pytest.raises(AuthExchangeError):
        manager.exchange_code("")
    assert session.post_calls == []


def test_exchange_code_missing_client_credentials(build_manager):
    manager, session = build_manager(MemoryTokenStore(), post=_token_ok())
    manager._client_secret = ""

    with pytest.raises(AuthExchangeError):
        manager.exchange_code("code")
    assert session.post_calls == []


# --- Stored credential -----------------------------------------------
def test_get_stored_credential_none_when_empty(build_manager):
    manager, _ = build_manager(MemoryTokenStore())
    assert manager.get_stored_credential() is None


def test_get_stored_credential_corrupt_record_is_none(build_manager):
    manager, _ = build_manager(MemoryTokenStore({"access_token": "a", "expires_at": "soon"}))
    assert manager.get_stored_credential() is None


def test_get_stored_credential_corrupt_file_is_none(build_manager, tmp_path):
    path = tmp_path / "token.json"
    path.write_text("garbage", encoding="utf-8")
    manager, _ = build_manager(JsonFileTokenStore(path))
    assert manager.get_stored_credential() is None


# --- Usable credential -----------------------------------------------
def test_usable_credential_none_without_stored_token(build_manager):
    manager, session = build_manager(MemoryTokenStore(), post=_token_ok())
    assert manager.get_usable_credential() is None
    assert session.post_calls == []


def test_fresh_credential_returned_without_network(build_manager, fresh_store):
    manager, session = build_manager(fresh_store)

    credential = manager.get_usable_credential()

    assert credential == Credential.from_payload(make_credential_record())
    assert session.post_calls == []


def test_expired_credential_is_refreshed_and_persisted(build_manager):
    store = MemoryTokenStore(make_credential_record(expires_at=NOW - 60))
    manager, session = build_manager(store, post=_token_ok())

    credential = manager.get_usable_credential()

    assert credential == Credential("new-access", "new-refresh", NOW + 21600)
    assert store.load() == credential.to_payload()
    sent = session.post_calls[0]["data"]
    assert sent["grant_type"] == "refresh_token"
    assert sent["refresh_token"] == "refresh-xyz"
    assert len(session.post_calls) == 1


def test_credential_expiring_now_counts_as_expired(build_manager):
    store = MemoryTokenStore(make_credential_record(expires_at=NOW))
    manager, session = build_manager(store, post=_token_ok())

    assert manager.get_usable_credential().access_token == "new-access"
    assert len(session.post_calls) == 1


def test_rejected_refresh_returns_none_and_keeps_store(build_manager):
    original = make_credential_record(expires_at=NOW - 60)
    store = MemoryTokenStore(original)
    manager, session = build_manager(store, post=_token_rejected)

    assert manager.get_usable_credential() is None
    assert store.load() == original
    assert len(session.post_calls) == 1


def test_refresh_transport_failure_returns_none(build_manager, connection_error):
    original = make_credential_record(expires_at=NOW - 60)
    store = MemoryTokenStore(original)
    manager, _ = build_manager(store, post=lambda url, data: connection_error)

    assert manager.get_usable_credential() is None
    assert store.load() == original


def test_refresh_writes_token_file(build_manager, tmp_path):
    store = JsonFileTokenStore(tmp_path / "data" / "strava-token.json")
    store.save(make_credential_record(expires_at=NOW - 1))
    manager, _ = build_manager(store, post=_token_ok(access="file-access"))

    manager.get_usable_credential()

    assert store.load()["access_token"] == "file-access"


# --- Token masking ---------------------------------------------------
def test_mask_token_handles_short_values():
    assert mask_token("abcd", visible=4) == "abcd"
    assert mask_token("abcd", visible=2) == "**cd"
    assert mask_token("abcd", visible=0) == "****"


def test_mask_token_handles_empty_and_negative():
    assert mask_token("", visible=4) == ""
    assert mask_token(None) == ""
    assert mask_token("abcdef", visible=-2) == "******"
