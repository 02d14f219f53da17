import os

import pytest


@pytest.fixture(scope="session")
def _identity_domain(request):
    """Initialize the identity domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from identity.domain import identity

    identity.init()
    return identity


@pytest.fixture(scope="session", autouse=True)
def setup_db(_identity_domain):
    from shared.db import drop_db, setup_db

    setup_db(_identity_domain)

    yield

    drop_db(_identity_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_identity_domain, reset_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _identity_domain.domain_context()
    ctx.push()

    yield

    reset_domain(_identity_domain)
    ctx.pop()
