"""
Tests for Auth service.
"""

import pytest
from fastapi.testclient import TestClient

from service_auth.app.main import AuthService, create_app
from service_auth.app.store import InMemoryUserRepository
from shared.errors import ConfigurationError
from shared.test_helpers import fast_password_hasher, service_overrides


@pytest.fixture
def service():
    """Create auth service with an in-memory store."""
    return AuthService(
        repository=InMemoryUserRepository(),
        hasher=fast_password_hasher(),
        **service_overrides(),
    )


@pytest.fixture
def client(service):
    """Create test client."""
    with TestClient(service.app) as client:
        yield client


def test_root_endpoint(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "auth"
    assert data["version"] == "1.0.0"


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "auth"
    assert data["status"] == "ok"
    assert data["dependencies"] == {"user_store": "ok"}


def test_register(client):
    """Registration returns id and username only."""
    response = client.post("/api/auth/register", json={"username": "alice", "password": "Secret123!"})

    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"id", "username"}
    assert data["username"] == "alice"


def test_register_duplicate(client):
    """Duplicate registration is a 400 with an errors list."""
    client.post("/api/auth/register", json={"username": "alice", "password": "Secret123!"})

    response = client.post("/api/auth/register", json={"username": "Alice", "password": "Secret123!"})

    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "DUPLICATE_USER"
    assert data["errors"][0]["code"] == "DuplicateUserName"


def test_register_weak_password(client):
    """Policy violations are a 400 listing every broken rule."""
    response = client.post("/api/auth/register", json={"username": "alice", "password": "secret"})

    assert response.status_code == 400
    codes = {e["code"] for e in response.json()["errors"]}
    assert "PasswordRequiresDigit" in codes
    assert "PasswordRequiresUpper" in codes


@pytest.mark.parametrize("body", [
    {"username": "", "password": "Secret123!"},
    {"username": "alice", "password": ""},
    {"username": "alice"},
    {},
])
def test_register_missing_fields(client, body):
    """Missing or empty fields are a 400, not a 422."""
    response = client.post("/api/auth/register", json=body)

    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["errors"]


def test_login_success(client):
    """Login returns a compact token."""
    client.post("/api/auth/register", json={"username": "alice", "password": "Secret123!"})

    response = client.post("/api/auth/login", json={"username": "ALICE", "password": "Secret123!"})

    assert response.status_code == 200
    token = response.json()["token"]
    assert token.count(".") == 2


def test_login_wrong_password_and_unknown_user_match(client):
    """Wrong password and unknown user produce the same 401 body."""
    client.post("/api/auth/register", json={"username": "alice", "password": "Secret123!"})

    wrong = client.post("/api/auth/login", json={"username": "alice", "password": "wrong"})
    unknown = client.post("/api/auth/login", json={"username": "nobody", "password": "wrong"})

    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert wrong.json() == unknown.json()
    assert wrong.headers["WWW-Authenticate"] == "Bearer"


def test_login_missing_fields(client):
    """Empty login fields are a 400."""
    response = client.post("/api/auth/login", json={"username": "alice", "password": ""})

    assert response.status_code == 400


def test_request_id_echoed(client):
    """Responses carry a request id for correlation."""
    response = client.get("/", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


def test_metrics_endpoint_counts_logins(client):
    """Login outcomes are exported to Prometheus."""
    client.post("/api/auth/register", json={"username": "alice", "password": "Secret123!"})
    client.post("/api/auth/login", json={"username": "alice", "password": "Secret123!"})
    client.post("/api/auth/login", json={"username": "alice", "password": "nope"})

    body = client.get("/metrics").text

    assert 'logins_total{outcome="success"} 1.0' in body
    assert 'logins_total{outcome="rejected"} 1.0' in body
    assert "tokens_issued_total 1.0" in body


def test_seed_user_created_on_startup():
    """The bootstrap user is available once the app has started."""
    service = AuthService(
        hasher=fast_password_hasher(),
        **service_overrides(seed_username="student@example.com", seed_password="P@ssw0rd!"),
    )

    with TestClient(service.app) as client:
        response = client.post(
            "/api/auth/login",
            json={"username": "student@example.com", "password": "P@ssw0rd!"},
        )

    assert response.status_code == 200


def test_sqlite_store_from_config(tmp_path):
    """The SQLite store is created from configuration and initialized on startup."""
    app = create_app(
        hasher=fast_password_hasher(),
        **service_overrides(user_store="sqlite", database_path=str(tmp_path / "auth.db")),
    )

    with TestClient(app) as client:
        registered = client.post("/api/auth/register", json={"username": "erin", "password": "Secret123!"})
        login = client.post("/api/auth/login", json={"username": "erin", "password": "Secret123!"})

    assert registered.status_code == 200
    assert login.status_code == 200


@pytest.mark.parametrize("key", [None, "", "too-short"])
def test_startup_refuses_missing_or_short_secret(key):
    """A missing or short signing key aborts service construction."""
    with pytest.raises(ConfigurationError):
        AuthService(**service_overrides(jwt_signing_key=key))


def test_unknown_user_store_rejected():
    """Unknown store backends are a configuration error."""
    with pytest.raises(ConfigurationError):
        AuthService(**service_overrides(user_store="redis"))


class UnavailableUserRepository(InMemoryUserRepository):
    """Store whose lookups fail, as when the database file is unreadable."""

    async def find_by_normalized_username(self, normalized_username):
        raise OSError("user store unavailable")


def test_health_reports_unavailable_store():
    """A failing user store turns the health check into a 503."""
    service = AuthService(
        repository=UnavailableUserRepository(),
        hasher=fast_password_hasher(),
        **service_overrides(),
    )

    with TestClient(service.app) as client:
        response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "error"
    assert "user store unavailable" in response.json()["error"]
