"""
Tests for the HTTP layer: auth gating, status mapping and CRUD flows.
"""

import pytest
from fastapi.testclient import TestClient

from bookstore.config.settings import Settings
from bookstore.main import create_app

ADMIN_EMAIL = "admin@bookstore.io"
ADMIN_PASSWORD = "admin-password"
API = "/api/v1"


@pytest.fixture
def settings():
    return Settings(
        ENVIRONMENT="testing",
        DATABASE_URL="sqlite://",
        JWT_SECRET_KEY="api-test-secret",
        PASSWORD_BCRYPT_ROUNDS=4,
        ADMIN_EMAIL=ADMIN_EMAIL,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        LOG_LEVEL="WARNING",
        LOG_FORMAT="console",
    )


@pytest.fixture
def client(settings, engine):
    app = create_app(settings, engine)
    with TestClient(app) as client:
        yield client


def login(client, email, password):
    response = client.post(f"{API}/users/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def customer_headers(client):
    response = client.post(
        f"{API}/users/register",
        json={"email": "reader@bookstore.io", "password": "reader-password"},
    )
    assert response.status_code == 201
    return login(client, "reader@bookstore.io", "reader-password")


@pytest.fixture
def author_id(client, admin_headers):
    response = client.post(
        f"{API}/authors",
        json={"firstname": "Ursula", "lastname": "Le Guin"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    return response.json()["id"]


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["api_version"] == "v1"
    assert "X-Request-ID" in response.headers
    assert "X-Process-Time" in response.headers


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


class TestAuthentication:
    def test_missing_token_is_401(self, client):
        response = client.get(f"{API}/authors")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        error = response.json()["error"]
        assert error["code"] == "AUTHENTICATION_FAILED"
        assert error["details"]["reason"] == "missing_token"

    def test_bad_token_is_401(self, client):
        response = client.get(f"{API}/books", headers={"Authorization": "Bearer nonsense"})
        assert response.status_code == 401
        assert response.json()["error"]["details"]["reason"] == "bad_signature"

    def test_login_with_wrong_password(self, client):
        response = client.post(
            f"{API}/users/login",
            json={"email": ADMIN_EMAIL, "password": "nope"},
        )
        assert response.status_code == 401
        assert response.json()["error"]["details"]["reason"] == "invalid_credentials"

    def test_login_returns_bearer_token_with_roles(self, client):
        response = client.post(
            f"{API}/users/login",
            json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
        )
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["roles"] == ["Administrator", "Customer"]

    def test_register_duplicate_is_409(self, client, customer_headers):
        response = client.post(
            f"{API}/users/register",
            json={"email": "reader@bookstore.io", "password": "whatever1"},
        )
        assert response.status_code == 409


class TestAuthorization:
    def test_customer_can_read(self, client, customer_headers, author_id):
        assert client.get(f"{API}/authors", headers=customer_headers).status_code == 200
        assert client.get(f"{API}/authors/{author_id}", headers=customer_headers).status_code == 200

    @pytest.mark.parametrize(
        "method, path, body",
        [
            ("post", "/authors", {"firstname": "A", "lastname": "B"}),
            ("put", "/authors/1", {"firstname": "A", "lastname": "B"}),
            ("delete", "/authors/1", None),
            ("post", "/books", {"title": "T", "isbn": "1", "author_id": 1}),
            ("delete", "/books/1", None),
        ],
    )
    def test_customer_cannot_write(self, client, customer_headers, method, path, body):
        kwargs = {"headers": customer_headers}
        if body is not None:
            kwargs["json"] = body
        response = getattr(client, method)(f"{API}{path}", **kwargs)

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "INSUFFICIENT_PERMISSIONS"


class TestCatalog:
    def test_book_lifecycle(self, client, admin_headers, author_id):
        created = client.post(
            f"{API}/books",
            json={"title": "The Left Hand of Darkness", "isbn": "9780441478125", "year": 1969, "author_id": author_id},
            headers=admin_headers,
        )
        assert created.status_code == 201
        book = created.json()
        assert book["author"]["lastname"] == "Le Guin"

        author = client.get(f"{API}/authors/{author_id}", headers=admin_headers).json()
        assert [b["id"] for b in author["books"]] == [book["id"]]

        updated = client.put(
            f"{API}/books/{book['id']}",
            json={"title": "The Left Hand of Darkness", "isbn": "9780441478125", "price": 12.5, "author_id": author_id},
            headers=admin_headers,
        )
        assert updated.status_code == 200
        assert updated.json()["price"] == 12.5
        assert updated.json()["year"] is None

        listed = client.get(f"{API}/books", params={"author_id": author_id}, headers=admin_headers)
        assert [b["id"] for b in listed.json()] == [book["id"]]

        assert client.delete(f"{API}/authors/{author_id}", headers=admin_headers).status_code == 409
        assert client.delete(f"{API}/books/{book['id']}", headers=admin_headers).status_code == 204
        assert client.delete(f"{API}/authors/{author_id}", headers=admin_headers).status_code == 204
        assert client.get(f"{API}/authors/{author_id}", headers=admin_headers).status_code == 404

    def test_book_with_unknown_author_is_400(self, client, admin_headers):
        response = client.post(
            f"{API}/books",
            json={"title": "X", "isbn": "123", "author_id": 999},
            headers=admin_headers,
        )
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["field"] == "author_id"

    def test_missing_fields_are_rejected_by_request_validation(self, client, admin_headers):
        response = client.post(f"{API}/authors", json={"firstname": "A"}, headers=admin_headers)
        assert response.status_code == 422

    def test_update_missing_author_is_404(self, client, admin_headers):
        response = client.put(
            f"{API}/authors/999",
            json={"firstname": "A", "lastname": "B"},
            headers=admin_headers,
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "RESOURCE_NOT_FOUND"
