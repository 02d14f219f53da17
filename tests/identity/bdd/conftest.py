"""Shared BDD fixtures and step definitions for the Identity domain."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from identity.api import router
from identity.user.user import User
from protean import current_domain
from pytest_bdd import given, parsers, then
from shared.http import register_exception_handlers


def _payload(username, password, confirm_password):
    return {
        "username": username,
        "password": password,
        "confirmPassword": confirm_password,
        "email": f"{username}@example.com",
        "name": username.title(),
        "phone": "+5511999999999",
    }


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def registration_payload():
    """Build a register request body for a username."""
    return _payload


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(router)
    register_exception_handlers(app)
    return TestClient(app)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('no account named "{username}" exists'))
def no_account(username):
    assert current_domain.repository_for(User).find_by_username(username) is None


@given(parsers.cfparse('"{username}" has already registered'))
def already_registered(client, username):
    response = client.post("/api/register", json=_payload(username, "secret123", "secret123"))
    assert response.status_code == 201


@given("the shopper logs out")
def logs_out(client):
    assert client.post("/api/logout").status_code == 200


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the profile of the signed-in user is "{username}"'))
def profile_is(client, username):
    response = client.get("/api/user")
    assert response.status_code == 200
    assert response.json()["username"] == username
