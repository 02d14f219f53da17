import os

import pytest


@pytest.fixture(scope="session")
def _catalogue_domain(request):
    """Initialize the catalogue domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from catalogue.domain import catalogue

    catalogue.init()
    return catalogue


@pytest.fixture(scope="session", autouse=True)
def setup_db(_catalogue_domain):
    from shared.db import drop_db, setup_db

    setup_db(_catalogue_domain)

    yield

    drop_db(_catalogue_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_catalogue_domain, reset_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _catalogue_domain.domain_context()
    ctx.push()

    yield

    reset_domain(_catalogue_domain)
    ctx.pop()
