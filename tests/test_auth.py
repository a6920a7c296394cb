import pytest

from tabletmenu.client import MenuApiClient
from tabletmenu.core.config import get_settings
from tabletmenu.services.auth import (
    Argon2CredentialVerifier,
    StaticCredentialVerifier,
    get_credential_verifier,
    hash_password,
    reset_credential_verifier,
)


def test_static_verifier_accepts_configured_pair():
    result = StaticCredentialVerifier("admin", "admin").verify("admin", "admin")
    assert result.authenticated
    assert result.error_message is None


def test_static_verifier_rejects_wrong_password():
    result = StaticCredentialVerifier("admin", "admin").verify("admin", "nope")
    assert not result.authenticated
    assert result.to_dict()["error_message"] == "Invalid username or password"


def test_argon2_verifier_checks_hash():
    verifier = Argon2CredentialVerifier("boss", hash_password("s3cret"))

    assert verifier.verify("boss", "s3cret").authenticated
    assert not verifier.verify("boss", "wrong").authenticated
    assert not verifier.verify("admin", "s3cret").authenticated


def test_argon2_verifier_survives_a_broken_hash():
    verifier = Argon2CredentialVerifier("boss", "not-a-hash")
    assert not verifier.verify("boss", "s3cret").authenticated


def test_factory_picks_argon2_when_hash_configured(monkeypatch):
    monkeypatch.setattr(get_settings(), "admin_password_hash", hash_password("s3cret"))
    reset_credential_verifier()
    try:
        assert get_credential_verifier().backend_name == "argon2"
    finally:
        reset_credential_verifier()


def test_factory_defaults_to_static(monkeypatch):
    monkeypatch.setattr(get_settings(), "admin_password_hash", None)
    reset_credential_verifier()
    try:
        assert get_credential_verifier().backend_name == "static"
    finally:
        reset_credential_verifier()


async def test_login_endpoint(http):
    r = await http.post("/api/auth/login", json={"username": "admin", "password": "admin"})
    assert r.status_code == 200, r.text
    assert r.json() == {"authenticated": True, "username": "admin"}


async def test_login_endpoint_rejects_bad_credentials(http):
    r = await http.post("/api/auth/login", json={"username": "admin", "password": "guess"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid username or password"


@pytest.mark.parametrize("password, expected", [("admin", True), ("guess", False)])
async def test_client_login(http, password, expected):
    api = MenuApiClient(client=http)
    assert await api.login("admin", password) is expected
