import pytest

from app.config.settings import settings
from app.core.rate_limit import limiter
from app.core.security import create_access_token


def _register(client, **overrides):
    body = {"name": "A", "email": "a@b.com", "password": "secret1"}
    body.update(overrides)
    return client.post("/api/auth/register", json=body)


def test_register_returns_user_and_token(client, fake_supabase) -> None:
    response = _register(client)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["user"]["email"] == "a@b.com"
    assert body["data"]["user"]["role"] == "student"
    assert body["data"]["token"]
    assert "password" not in body["data"]["user"]
    assert "password_hash" not in body["data"]["user"]
    assert len(fake_supabase.tables["users"]) == 1
    assert "a@b.com" in fake_supabase.auth.accounts


def test_register_keeps_requested_role(client) -> None:
    response = _register(client, role="instructor")

    assert response.status_code == 201
    assert response.json()["data"]["user"]["role"] == "instructor"


def test_register_duplicate_email_is_rejected_without_new_record(client, fake_supabase) -> None:
    assert _register(client).status_code == 201

    response = _register(client, name="B")

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Email already registered"}
    assert len(fake_supabase.tables["users"]) == 1


@pytest.mark.parametrize(
    "body",
    [
        {"email": "a@b.com", "password": "secret1"},
        {"name": "A", "password": "secret1"},
        {"name": "A", "email": "a@b.com"},
        {"name": "A", "email": "a@b.com", "password": "short"},
        {"name": "A", "email": "not-an-email", "password": "secret1"},
    ],
)
def test_register_validation_errors_are_400(client, fake_supabase, body) -> None:
    response = client.post("/api/auth/register", json=body)

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["message"] == "Validation failed"
    assert payload["error"]
    assert fake_supabase.tables["users"] == []


def test_login_token_is_accepted_by_me(client) -> None:
    _register(client)

    login = client.post("/api/auth/login", json={"email": "a@b.com", "password": "secret1"})

    assert login.status_code == 200
    token = login.json()["data"]["token"]
    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "a@b.com"
    assert me.json()["data"]["name"] == "A"


def test_login_with_wrong_password_is_401(client) -> None:
    _register(client)

    response = client.post("/api/auth/login", json={"email": "a@b.com", "password": "wrong-pass"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid email or password"


def test_login_with_unknown_email_is_401(client) -> None:
    response = client.post("/api/auth/login", json={"email": "ghost@b.com", "password": "secret1"})

    assert response.status_code == 401


def test_login_missing_fields_is_400(client) -> None:
    response = client.post("/api/auth/login", json={"email": "a@b.com"})

    assert response.status_code == 400


def test_login_without_profile_row_is_404(client, fake_supabase) -> None:
    _register(client)
    fake_supabase.tables["users"].clear()

    response = client.post("/api/auth/login", json={"email": "a@b.com", "password": "secret1"})

    assert response.status_code == 404


def test_me_without_token_is_401(client) -> None:
    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["success"] is False


@pytest.mark.parametrize("token", ["garbage", "a.b.c", ""])
def test_me_with_malformed_token_is_401(client, token) -> None:
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_me_with_expired_token_is_401(client, make_user) -> None:
    user = make_user()
    token = create_access_token(user, expires_days=-1)

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


def test_me_for_deleted_user_is_404(client, fake_supabase, make_user, auth_headers) -> None:
    user = make_user()
    fake_supabase.tables["users"].clear()

    response = client.get("/api/auth/me", headers=auth_headers(user))

    assert response.status_code == 404


def test_local_mode_hashes_password_and_logs_in(client, fake_supabase, monkeypatch) -> None:
    monkeypatch.setattr(settings, "auth_mode", "local")

    register = _register(client)
    assert register.status_code == 201
    stored = fake_supabase.tables["users"][0]
    assert stored["password_hash"] != "secret1"
    assert fake_supabase.auth.accounts == {}

    ok = client.post("/api/auth/login", json={"email": "a@b.com", "password": "secret1"})
    bad = client.post("/api/auth/login", json={"email": "a@b.com", "password": "secret2"})

    assert ok.status_code == 200
    assert "password_hash" not in ok.json()["data"]["user"]
    assert bad.status_code == 401


@pytest.fixture
def auth_limit(monkeypatch):
    monkeypatch.setattr(limiter, "enabled", True)
    limiter.reset()
    yield int(settings.auth_rate_limit.split("/")[0])
    limiter.reset()


def test_login_over_the_limit_is_429_with_envelope(client, auth_limit) -> None:
    credentials = {"email": "nobody@example.com", "password": "secret1"}
    for _ in range(auth_limit):
        assert client.post("/api/auth/login", json=credentials).status_code == 401

    response = client.post("/api/auth/login", json=credentials)

    assert response.status_code == 429
    body = response.json()
    assert body["success"] is False
    assert body["message"].startswith("Rate limit exceeded")
    assert set(body) == {"success", "message"}


def test_register_limit_is_counted_separately_from_login(client, auth_limit) -> None:
    credentials = {"email": "nobody@example.com", "password": "secret1"}
    for _ in range(auth_limit + 1):
        client.post("/api/auth/login", json=credentials)

    response = _register(client)

    assert response.status_code == 201
