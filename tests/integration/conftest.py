import pytest
from fastapi.testclient import TestClient

from marketplace.api.application import create_app


@pytest.fixture()
def client():
    return TestClient(create_app())


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def register(client):
    """Register through the API and return (user_id, auth headers)."""
    counter = {"n": 0}

    def _register(role="buyer", email=None, password="secret123"):
        counter["n"] += 1
        response = client.post(
            "/auth/register",
            json={
                "name": f"{role.title()} {counter['n']}",
                "email": email or f"{role}{counter['n']}@example.com",
                "password": password,
                "role": role,
            },
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"]["id"], _bearer(body["token"])

    return _register


@pytest.fixture()
def admin_headers(client, make_user):
    """Admins cannot self-register; seed one and log in."""
    make_user("admin", email="root@example.com", password="admin123")
    response = client.post("/auth/login", json={"email": "root@example.com", "password": "admin123"})
    return _bearer(response.json()["token"])


@pytest.fixture()
def listed_product(client, register):
    """A vendor with one product in stock: returns (product_id, vendor headers)."""

    def _list(price=10.0, stock=10, title="Widget"):
        _, headers = register("vendor")
        response = client.post(
            "/products",
            json={"title": title, "price": price, "stock": stock, "category": "Gadgets"},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["product"]["id"], headers

    return _list
