import os

import pytest


@pytest.fixture(scope="session")
def _ordering_domain(request):
    """Initialize the ordering domain (and identity, which its API depends on) once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from identity.domain import identity
    from ordering.domain import ordering

    identity.init()
    ordering.init()
    return ordering


@pytest.fixture(scope="session", autouse=True)
def setup_db(_ordering_domain):
    from shared.db import drop_db, setup_db

    setup_db(_ordering_domain)

    yield

    drop_db(_ordering_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_ordering_domain, reset_domain):
    """Push domain context before each test, cleanup after."""
    from identity.domain import identity

    ctx = _ordering_domain.domain_context()
    ctx.push()

    yield

    reset_domain(_ordering_domain)
    reset_domain(identity)
    ctx.pop()


@pytest.fixture()
def line_items():
    """Two products totalling 49.98."""
    return [
        {"product_id": "prod-mug", "quantity": 1, "price": "29.99"},
        {"product_id": "prod-coaster", "quantity": 1, "price": "19.99"},
    ]
