"""Every aggregate's repository and events are registered when the domain initializes."""

import pytest
from protean import current_domain

from marketplace.catalogue.product.events import ProductCreated
from marketplace.catalogue.product.product import Product
from marketplace.catalogue.product.repository import ProductRepository
from marketplace.identity.user.events import UserRegistered
from marketplace.identity.user.repository import UserRepository
from marketplace.identity.user.user import User
from marketplace.ordering.cart.cart import Cart
from marketplace.ordering.cart.repository import CartRepository
from marketplace.ordering.order.order import Order
from marketplace.ordering.order.repository import OrderRepository


@pytest.mark.parametrize(
    "aggregate, repository",
    [
        (User, UserRepository),
        (Product, ProductRepository),
        (Cart, CartRepository),
        (Order, OrderRepository),
    ],
)
def test_custom_repository_is_registered(aggregate, repository):
    assert isinstance(current_domain.repository_for(aggregate), repository)


def test_user_events_can_be_raised():
    user = User.register(name="Jane", email="jane@example.com", password_hash="x")

    assert [type(e) for e in user._events] == [UserRegistered]


def test_product_events_can_be_raised():
    product = Product.create(title="Lamp", price=12.5, vendor_id="vendor-1")

    assert [type(e) for e in product._events] == [ProductCreated]


def test_registration_and_login_work_end_to_end(client):
    payload = {"name": "Jane", "email": "Jane@Example.com", "password": "secret123"}
    assert client.post("/auth/register", json=payload).status_code == 201

    response = client.post("/auth/login", json={"email": "jane@example.com", "password": "secret123"})

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "jane@example.com"
