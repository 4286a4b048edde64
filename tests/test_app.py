from fastapi.testclient import TestClient

from apphub.main import app


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_validation_errors_are_field_message_pairs(client):
    resp = client.post("/auth/register", json={"username": "ok_name"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["detail"] == "Validation failed"
    fields = {e["field"] for e in body["errors"]}
    assert fields == {"password", "email"}
    assert all(set(e) == {"field", "message"} for e in body["errors"])


def test_cors_allows_configured_origin(client):
    resp = client.options(
        "/auth/login",
        headers={
            "Origin": "http://localhost:5000",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert resp.headers.get("access-control-allow-origin") == "http://localhost:5000"
    assert resp.headers.get("access-control-allow-credentials") == "true"


def test_unexpected_error_is_opaque_500(monkeypatch):
    def _broken(db):
        raise RuntimeError("database exploded: secret detail")

    monkeypatch.setattr("apphub.auth.router.live_accounts", _broken)
    client = TestClient(app, raise_server_exceptions=False)
    resp = client.post("/auth/register", json={
        "username": "alice", "password": "Passw0rd!", "email": "alice@example.com",
    })
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}
