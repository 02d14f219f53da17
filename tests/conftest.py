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

    Selects the config overlay and initializes every bounded context, so that
    modules importing domain elements at collection time find them registered.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from catalogue.domain import catalogue
    from identity.domain import identity
    from ordering.domain import ordering

    identity.init()
    catalogue.init()
    ordering.init()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def test_settings():
    """Deterministic settings and a fresh fake gateway for every test."""
    from ordering.gateway import reset_gateway
    from shared.settings import Settings, reset_settings, set_settings

    settings = Settings(environment="test", seed_catalogue=False)
    set_settings(settings)
    reset_gateway()

    yield settings

    reset_gateway()
    reset_settings()


@pytest.fixture()
def gateway():
    """The fake payment gateway used by the code under test."""
    from ordering.gateway import set_gateway
    from ordering.gateway.fake_adapter import FakeGateway

    fake = FakeGateway()
    set_gateway(fake)
    return fake


@pytest.fixture(scope="session")
def reset_domain():
    """Return a function that wipes a domain's databases, brokers and event store."""

    def _reset(domain):
        with domain.domain_context():
            for _, provider in domain.providers.items():
                provider._data_reset()

            for _, broker in domain.brokers.items():
                broker._data_reset()

            domain.event_store.store._data_reset()

    return _reset
