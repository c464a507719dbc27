def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "healthy"
    assert body["engine_connected"] is True
    assert body["active_sessions"] == 0
    assert body["session_timeout_seconds"] == 5.0
    assert body["pdfa_converter"] == "passthrough"


def test_versioned_health(client):
    r = client.get("/v1/health")
    assert r.status_code == 200


def test_health_degraded_when_engine_down(client, fake_engine):
    fake_engine.connected = False
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "degraded"
    assert r.json()["engine_connected"] is False


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "running"


def test_unknown_route_uses_error_body(client):
    r = client.get("/v1/nope")
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found"}


def test_port_defaults_to_8080(monkeypatch):
    from chrome_service.config import Settings

    monkeypatch.delenv("PORT", raising=False)
    assert Settings(_env_file=None).port == 8080

    monkeypatch.setenv("PORT", "9000")
    assert Settings(_env_file=None).port == 9000
