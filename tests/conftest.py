import json
import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain is first imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("LOG_TO_FILE", "false")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Catalogue builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_category():
    from protean import current_domain
    from storefront.catalogue.category.management import CreateCategory, load_category

    def _make(name="Gift Sets", description=None, image=None):
        category_id = current_domain.process(
            CreateCategory(name=name, description=description, image=image),
            asynchronous=False,
        )
        return load_category(category_id)

    return _make


@pytest.fixture()
def make_product():
    from protean import current_domain
    from storefront.catalogue.product.creation import CreateProduct
    from storefront.catalogue.product.product import Product

    def _make(category_id, name="Knitted Bunny", price=499.0, stock=5, images=None, **extra):
        product_id = current_domain.process(
            CreateProduct(
                name=name,
                description=extra.pop("description", f"{name}, handmade."),
                price=price,
                stock=stock,
                category_id=str(category_id),
                images=json.dumps([{"url": url} for url in images]) if images else None,
                **extra,
            ),
            asynchronous=False,
        )
        return current_domain.repository_for(Product).get(product_id)

    return _make


@pytest.fixture()
def category(make_category):
    return make_category()


@pytest.fixture()
def product(make_product, category):
    return make_product(category.id)


# ---------------------------------------------------------------------------
# Collaborators and HTTP client
# ---------------------------------------------------------------------------
@pytest.fixture()
def settings():
    from storefront.settings import Settings

    return Settings()


@pytest.fixture()
def gateway():
    from storefront.payments.gateway.fake_adapter import FakeCheckoutGateway

    return FakeCheckoutGateway()


@pytest.fixture()
def image_storage():
    from storefront.storage.fake_adapter import FakeImageStorage

    return FakeImageStorage()


@pytest.fixture()
def shopper():
    from storefront.identity.principal import Principal

    return Principal(id="user-1", email="shopper@example.com", name="Asha")


@pytest.fixture()
def other_shopper():
    from storefront.identity.principal import Principal

    return Principal(id="user-2", email="other@example.com", name="Ravi")


@pytest.fixture()
def admin():
    from storefront.identity.principal import Principal

    return Principal(id="admin-1", email="admin@example.com", role="admin", name="Admin")


@pytest.fixture()
def identity_provider(shopper, other_shopper, admin):
    from storefront.identity.providers import StaticIdentityProvider

    return StaticIdentityProvider({"shopper-token": shopper, "other-token": other_shopper, "admin-token": admin})


@pytest.fixture()
def client(settings, gateway, image_storage, identity_provider):
    from fastapi.testclient import TestClient
    from storefront.api import create_app

    app = create_app(
        settings=settings,
        payment_gateway=gateway,
        image_storage=image_storage,
        identity_provider=identity_provider,
    )
    return TestClient(app)


@pytest.fixture()
def shopper_headers():
    return {"Authorization": "Bearer shopper-token"}


@pytest.fixture()
def other_headers():
    return {"Authorization": "Bearer other-token"}


@pytest.fixture()
def admin_headers():
    return {"Authorization": "Bearer admin-token"}
