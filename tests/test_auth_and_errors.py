# tests/test_auth_and_errors.py
import pytest
from fastapi.testclient import TestClient

from product_api.config import Settings
from product_api.database import ProductStore
from product_api.errors import ApiError, ErrorKind, error_response
from product_api.main import create_app

from conftest import API_KEY

PROTECTED = [
    ("get", "/api/products"),
    ("get", "/api/products/1"),
    ("get", "/api/products/search?q=lap"),
    ("get", "/api/products/stats"),
    ("post", "/api/products"),
    ("put", "/api/products/1"),
    ("patch", "/api/products/1"),
    ("delete", "/api/products/1"),
    ("get", "/api/unknown"),
]


@pytest.mark.parametrize("method,path", PROTECTED)
def test_missing_key_is_401(anon_client, method, path):
    r = anon_client.request(method.upper(), path)
    assert r.status_code == 401
    assert r.json() == {"status": "fail", "message": "Unauthorized", "errorType": "UnauthorizedError"}


@pytest.mark.parametrize("method,path", PROTECTED)
def test_wrong_key_is_401(anon_client, method, path):
    r = anon_client.request(method.upper(), path, headers={"x-api-key": API_KEY + "x"})
    assert r.status_code == 401


def test_rejected_create_does_not_touch_store(anon_client, store):
    r = anon_client.post("/api/products", json={
        "name": "x", "description": "y", "price": 1, "category": "z", "inStock": True,
    })
    assert r.status_code == 401
    assert len(store) == 3


def test_missing_secret_rejects_everything_and_warns(log_messages):
    app = create_app(settings=Settings(_env_file=None, api_key=None))
    assert any(
        m["level"].name == "WARNING" and "API_KEY is not set" in m["message"] for m in log_messages
    )

    client = TestClient(app)
    assert client.get("/api/products").status_code == 401
    assert client.get("/api/products", headers={"x-api-key": ""}).status_code == 401
    assert client.get("/api/products", headers={"x-api-key": "anything"}).status_code == 401
    assert client.get("/hello").status_code == 200


def test_request_id_is_echoed(client):
    r = client.get("/hello", headers={"X-Request-ID": "abc123"})
    assert r.headers["X-Request-ID"] == "abc123"
    assert client.get("/hello").headers["X-Request-ID"]


def test_unknown_route_is_404_envelope(client):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    assert r.json() == {"status": "fail", "message": "Route not found", "errorType": "NotFoundError"}


class ExplodingStore(ProductStore):
    def category_counts(self):
        raise RuntimeError("disk on fire at /var/secret")


def test_unexpected_error_is_generic_500(log_messages):
    app = create_app(settings=Settings(_env_file=None, api_key=API_KEY), store=ExplodingStore.seeded())
    client = TestClient(app, headers={"x-api-key": API_KEY}, raise_server_exceptions=False)

    r = client.get("/api/products/stats")
    assert r.status_code == 500
    assert r.json() == {"status": "error", "message": "Something went wrong!"}
    assert "secret" not in r.text

    errors = [m for m in log_messages if m["level"].name == "ERROR"]
    assert errors and errors[-1]["exception"] is not None


def test_error_kinds():
    assert ErrorKind.NOT_FOUND.status_code == 404
    assert ErrorKind.VALIDATION.tag == "ValidationError"
    assert ErrorKind.UNAUTHORIZED.is_operational
    assert not ErrorKind.INTERNAL.is_operational
    assert ApiError.not_found().message == "Resource not found"
    assert ApiError.validation().message == "Invalid data"


def test_error_response_envelope():
    r = error_response(ApiError.validation("bad price"))
    assert r.status_code == 400
    assert r.body == b'{"status":"fail","message":"bad price","errorType":"ValidationError"}'

    r = error_response(ApiError(ErrorKind.INTERNAL, "leaky detail"))
    assert r.status_code == 500
    assert b"leaky detail" not in r.body


def test_cors_preflight_is_answered_without_key(anon_client):
    r = anon_client.options(
        "/api/products",
        headers={"Origin": "http://example.com", "Access-Control-Request-Method": "POST"},
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "*"


def test_unexpected_error_keeps_request_id_and_is_logged(log_messages):
    app = create_app(settings=Settings(_env_file=None, api_key=API_KEY), store=ExplodingStore.seeded())
    client = TestClient(app, headers={"x-api-key": API_KEY}, raise_server_exceptions=False)

    r = client.get("/api/products/stats", headers={"X-Request-ID": "req-500"})
    assert r.status_code == 500
    assert r.headers["X-Request-ID"] == "req-500"

    assert any(m["message"].startswith("GET /api/products/stats -> 500") for m in log_messages)
