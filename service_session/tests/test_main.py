"""
Tests for Session service.
"""

import pytest
from fastapi.testclient import TestClient

from service_session.app.keystore import StaticSecretResolver
from service_session.app.main import create_app
from shared.config import get_config


@pytest.fixture
def client():
    """Create test client."""
    config = get_config("session", 8020, secrets={"1:2": "secret"}, session_lifetime_seconds=3600)
    app = create_app(config)
    return TestClient(app)


def mint(client, origin="A", **overrides):
    body = {"from": origin, "src_id": 1, "manager_id": 2, "user_id": 3}
    body.update(overrides)
    response = client.post("/session/generate", json=body)
    assert response.status_code == 200
    return response.json()["session"]


def test_root_endpoint(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "session"
    assert data["version"] == "1.0.0"


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "session"
    assert data["status"] == "ok"
    assert data["dependencies"] == {"secrets": "ok"}


def test_health_check_external_resolver():
    """Unsized resolvers are reported as external."""
    app = create_app(get_config("session", 8020), secret_resolver=lambda source_id, manager_id: "secret")
    response = TestClient(app).get("/health")
    assert response.json()["dependencies"] == {"secrets": "external"}


def test_generate_and_verify(client):
    """Test minting then verifying a session."""
    token = mint(client)

    response = client.post("/session/verify", json={"from": "A", "session": token})
    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is True
    assert data["claims"]["from"] == "A"
    assert data["claims"]["src_id"] == 1
    assert data["claims"]["manager_id"] == 2
    assert data["claims"]["user_id"] == 3


def test_request_id_echoed(client):
    response = client.get("/", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_generate_unknown_origin(client):
    """Unknown origins come back as an invalid parameter envelope."""
    response = client.post(
        "/session/generate",
        json={"from": "Q", "src_id": 1, "manager_id": 2, "user_id": 3}
    )
    assert response.status_code == 200
    assert response.json() == {"err_no": 4001, "err_msg": "Invalid parameter"}


def test_generate_unknown_secret(client):
    response = client.post(
        "/session/generate",
        json={"from": "A", "src_id": 9, "manager_id": 9, "user_id": 3}
    )
    assert response.json() == {"err_no": 5001, "err_msg": "System error"}


def test_generate_lifetime_out_of_range(client):
    """Lifetimes beyond the allowed range are invalid parameters."""
    response = client.post(
        "/session/generate",
        json={"from": "A", "src_id": 1, "manager_id": 2, "user_id": 3, "lifetime_seconds": 10 ** 12}
    )
    assert response.status_code == 200
    assert response.json() == {"err_no": 4001, "err_msg": "Invalid parameter"}


def test_verify_expired(client):
    token = mint(client, lifetime_seconds=-1)

    response = client.post("/session/verify", json={"from": "A", "session": token})
    assert response.json() == {"err_no": 4009, "err_msg": "Session expired"}


def test_verify_origin_mismatch(client):
    token = mint(client, origin="C")

    response = client.post("/session/verify", json={"from": "A", "session": token})
    assert response.json() == {"err_no": 4008, "err_msg": "Invalid session"}


def test_verify_garbage(client):
    response = client.post("/session/verify", json={"from": "A", "session": "%%%"})
    assert response.json() == {"err_no": 4008, "err_msg": "Invalid session"}


def test_verify_wrong_secret():
    """Tokens from another deployment's secret are rejected."""
    minting = TestClient(create_app(get_config("session", 8020), StaticSecretResolver({(1, 2): "one"})))
    verifying = TestClient(create_app(get_config("session", 8020), StaticSecretResolver({(1, 2): "two"})))

    token = mint(minting)
    response = verifying.post("/session/verify", json={"from": "A", "session": token})
    assert response.json() == {"err_no": 4005, "err_msg": "Invalid signature"}


def test_verify_missing_field(client):
    """Malformed bodies are reported as invalid parameters."""
    response = client.post("/session/verify", json={"from": "A"})
    assert response.status_code == 200
    assert response.json()["err_no"] == 4001


def test_whoami(client):
    token = mint(client, origin="B", user_id=77)

    response = client.get("/session/whoami", params={"from": "B"}, headers={"Session": token})
    assert response.status_code == 200
    assert response.json()["user_id"] == 77


def test_whoami_without_header(client):
    response = client.get("/session/whoami", params={"from": "B"})
    assert response.json()["err_no"] == 4001


def test_unknown_route(client):
    response = client.get("/nope")
    assert response.status_code == 200
    assert response.json() == {"err_no": -1, "err_msg": "Not Found"}


def test_metrics_endpoint(client):
    mint(client)

    response = client.get("/metrics")
    assert response.status_code == 200
    assert 'session_operations_total{operation="generate",outcome="ok"} 1.0' in response.text
