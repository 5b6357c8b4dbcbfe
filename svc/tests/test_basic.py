import time

from fastapi.testclient import TestClient
from main import app
from sensorwatch.errors import TransportError, UpstreamStatusError
from sensorwatch.routes import get_service
from sensorwatch.service import TelemetryService
from conftest import ScriptedSource, make_reading

client = TestClient(app)


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"
    # Verify we're running against the simulated sensor for tests
    assert r.json()["mode"] == "sim"
    assert r.json()["connected"] is False


def test_proxy_relays_reading():
    r = client.get("/api/data")
    assert r.status_code == 200
    body = r.json()
    for key in ("received_at", "TempC_SHT", "Hum_SHT", "BatV"):
        assert key in body


def test_proxy_relays_body_verbatim():
    payload = make_reading(9, temp=23.4)
    payload["custom"] = {"nested": [1, 2]}
    app.dependency_overrides[get_service] = lambda: TelemetryService(source=ScriptedSource(payload))
    try:
        r = client.get("/api/data")
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 200
    assert r.json() == payload


def test_proxy_wraps_upstream_errors():
    for error, message in [
        (UpstreamStatusError(502), "HTTP error! Status: 502"),
        (TransportError("connection refused"), "connection refused"),
    ]:
        app.dependency_overrides[get_service] = lambda: TelemetryService(source=ScriptedSource(error))
        try:
            r = client.get("/api/data")
        finally:
            app.dependency_overrides.clear()
        assert r.status_code == 500
        assert r.json() == {"error": f"Failed to fetch sensor data: {message}"}


def test_proxy_wraps_unexpected_source_errors():
    app.dependency_overrides[get_service] = lambda: TelemetryService(source=ScriptedSource(RuntimeError("driver bug")))
    try:
        r = client.get("/api/data")
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch sensor data: driver bug"}


def test_telemetry_before_polling():
    r = client.get("/telemetry")
    assert r.status_code == 200
    body = r.json()
    assert body["capacity"] == 20
    assert body["window"] == []
    assert body["latest"] is None
    assert body["trends"] is None
    assert body["time_range"] == "Waiting for data..."
    assert body["connection"] == {"status": "disconnected", "last_update": None, "last_error": None}


def test_poll_rejected_while_stopped():
    r = client.post("/telemetry/poll")
    assert r.status_code == 202
    assert r.json() == {"accepted": False}


def test_lifespan_runs_the_poller(monkeypatch):
    # fresh service so the module-level one used above stays untouched
    monkeypatch.setattr("sensorwatch.routes.svc", None)
    with TestClient(app) as c:
        deadline = time.time() + 2.0
        body = c.get("/telemetry").json()
        while not body["window"] and time.time() < deadline:
            time.sleep(0.02)
            body = c.get("/telemetry").json()

        assert len(body["window"]) == 1
        assert body["latest"] == body["window"][0]
        assert body["connection"]["status"] == "connected"
        assert body["connection"]["last_update"] is not None
        assert body["cycles_started"] >= 1
        assert c.get("/health").json()["connected"] is True

        r = c.post("/telemetry/poll")
        assert r.status_code == 202

    service = get_service()
    assert not service.poller.running
