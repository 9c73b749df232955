import json
import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Fetch and activate the domain by pushing the associated domain_context. The activated domain can then be referred to elsewhere as `current_domain`
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from marketplace.domain import marketplace

    marketplace.init()
    marketplace.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session", autouse=True)
def setup_db(request):
    from marketplace.domain import marketplace
    from marketplace.utils.db import drop_db, setup_db

    setup_db(marketplace)

    yield

    drop_db(marketplace)


@pytest.fixture(autouse=True)
def gateway():
    """A fresh FakeGateway installed for every test."""
    from marketplace.payments.gateway import FakeGateway, reset_gateway, set_gateway

    fake = FakeGateway(webhook_token="test_webhook_token")
    set_gateway(fake)

    yield fake

    reset_gateway()


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    from marketplace.identity.reset_tokens import reset_reset_token_store

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()

    reset_reset_token_store()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_user():
    """Register a user through the domain and return its id."""
    from protean import current_domain

    from marketplace.identity.passwords import hash_password
    from marketplace.identity.user.registration import RegisterUser

    counter = {"n": 0}

    def _make(role="buyer", email=None, password="secret123", name=None):
        counter["n"] += 1
        command = RegisterUser(
            name=name or f"{role.title()} {counter['n']}",
            email=email or f"{role}{counter['n']}@example.com",
            password_hash=hash_password(password),
            role=role,
        )
        return current_domain.process(command, asynchronous=False)

    return _make


@pytest.fixture()
def make_product():
    """List a product for a vendor and return its id."""
    from protean import current_domain

    from marketplace.catalogue.product.creation import CreateProduct

    def _make(vendor_id, title="Widget", price=10.0, stock=10, category=None, description=None, images=None):
        command = CreateProduct(
            actor_id=vendor_id,
            actor_role="vendor",
            title=title,
            description=description,
            price=price,
            stock=stock,
            images=json.dumps(images or []),
            category=category,
        )
        return current_domain.process(command, asynchronous=False)

    return _make


@pytest.fixture()
def buyer_id(make_user):
    return make_user("buyer")


@pytest.fixture()
def vendor_id(make_user):
    return make_user("vendor")


@pytest.fixture()
def admin_id(make_user):
    return make_user("admin")
