import os

import pytest


@pytest.fixture(scope="session")
def _all_domains(request):
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from catalogue.domain import catalogue
    from identity.domain import identity
    from ordering.domain import ordering

    identity.init()
    catalogue.init()
    ordering.init()
    return identity, catalogue, ordering


@pytest.fixture(autouse=True)
def run_around_tests(_all_domains, reset_domain):
    yield

    for domain in _all_domains:
        reset_domain(domain)


@pytest.fixture()
def client(gateway, test_settings):
    from app import create_app
    from fastapi.testclient import TestClient

    return TestClient(create_app(settings=test_settings, gateway=gateway))
