from fastapi.testclient import TestClient

from tests.conftest import ALLOWED_ORIGIN


def test_health_endpoints(client: TestClient):
    assert client.get("/").status_code == 404
    assert client.get("/api/health").json() == {"status": "ok"}
    assert client.get("/health/db").json() == {"database": "ok"}


def test_allowed_origin_gets_credentialed_cors(client: TestClient):
    response = client.get("/api/health", headers={"Origin": ALLOWED_ORIGIN})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == ALLOWED_ORIGIN
    assert response.headers["access-control-allow-credentials"] == "true"


def test_preflight_from_allowed_origin(client: TestClient):
    response = client.options(
        "/login",
        headers={
            "Origin": ALLOWED_ORIGIN,
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == ALLOWED_ORIGIN


def test_unlisted_origin_is_rejected(client: TestClient):
    simple = client.get("/api/health", headers={"Origin": "https://evil.example"})
    preflight = client.options(
        "/login",
        headers={"Origin": "https://evil.example", "Access-Control-Request-Method": "POST"},
    )

    assert simple.status_code == 403
    assert simple.text == "Origin not allowed"
    assert "access-control-allow-origin" not in simple.headers
    assert preflight.status_code == 403

