"""Cross-context tests against the assembled application."""

import asyncio
import json
import time
from decimal import Decimal

import httpx
import pytest
from fastapi.testclient import TestClient

from shared.settings import Settings

pytestmark = pytest.mark.integration

ALICE = {
    "username": "alice",
    "password": "secret123",
    "confirmPassword": "secret123",
    "email": "alice@example.com",
    "name": "Alice",
    "phone": "+5511999999999",
}


class TestApplicationShell:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert set(body["domains"]) == {"identity", "catalogue", "ordering"}

    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_is_generated(self, client):
        assert client.get("/api/products").headers["X-Request-ID"]

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/api/user/orders", "ordering"),
            ("/api/user", "identity"),
            ("/api/user/address", "identity"),
            ("/api/products/abc", "catalogue"),
            ("/api/create-payment-intent", "ordering"),
            ("/api/stripe-webhook", "ordering"),
            ("/api/order/123/confirm", "ordering"),
            ("/api/login", "identity"),
            ("/health", None),
        ],
    )
    def test_route_resolution(self, path, expected):
        from app import _resolve_domain

        domain = _resolve_domain(path)
        assert (domain.name if domain else None) == expected

    def test_startup_seeds_an_empty_catalogue(self, gateway):
        from app import create_app

        settings = Settings(environment="test", seed_catalogue=True)
        with TestClient(create_app(settings=settings, gateway=gateway)) as client:
            products = client.get("/api/products").json()

        assert len(products) == 8

    def test_startup_does_not_reseed(self, gateway):
        from app import create_app

        settings = Settings(environment="test", seed_catalogue=True)
        with TestClient(create_app(settings=settings, gateway=gateway)):
            pass
        with TestClient(create_app(settings=settings, gateway=gateway)) as client:
            products = client.get("/api/products").json()

        assert len(products) == 8

    def test_unexpected_errors_hide_details(self, gateway, monkeypatch):
        from app import create_app
        from catalogue.api import routes

        def explode():
            raise RuntimeError("database password is hunter2")

        monkeypatch.setattr(routes, "list_products", explode)
        client = TestClient(create_app(gateway=gateway), raise_server_exceptions=False)

        response = client.get("/api/products")

        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error"}

    def test_unexpected_errors_carry_request_id(self, gateway, monkeypatch):
        from app import create_app
        from catalogue.api import routes

        def explode():
            raise RuntimeError("boom")

        monkeypatch.setattr(routes, "list_products", explode)
        client = TestClient(create_app(gateway=gateway), raise_server_exceptions=False)

        response = client.get("/api/products", headers={"X-Request-ID": "req-500"})

        assert response.status_code == 500
        assert response.headers["X-Request-ID"] == "req-500"


class TestShoppingJourney:
    def test_register_browse_pay_and_review_history(self, gateway):
        from app import create_app

        settings = Settings(environment="test", seed_catalogue=True)
        with TestClient(create_app(settings=settings, gateway=gateway)) as client:
            assert client.post("/api/register", json=ALICE).status_code == 201

            products = client.get("/api/products").json()
            mug, coaster = products[0], products[1]
            amount = str(Decimal(mug["price"]) * 2 + Decimal(coaster["price"]))
            checkout = client.post(
                "/api/create-payment-intent",
                json={
                    "amount": amount,
                    "items": [
                        {"id": mug["id"], "price": mug["price"], "quantity": 2},
                        {"id": coaster["id"], "price": coaster["price"], "quantity": 1},
                    ],
                },
            )
            assert checkout.status_code == 200
            order_id = checkout.json()["orderId"]
            intent_id = next(iter(gateway.intents))

            webhook = client.post(
                "/api/stripe-webhook",
                content=json.dumps(
                    {
                        "type": "payment_intent.succeeded",
                        "data": {"object": {"id": intent_id, "metadata": {"order_id": order_id}}},
                    }
                ),
            )
            assert webhook.status_code == 200

            history = client.get("/api/user/orders").json()

        assert len(history) == 1
        assert history[0]["id"] == order_id
        assert history[0]["status"] == "completed"
        assert history[0]["paymentIntentId"] == intent_id
        assert sorted(item["quantity"] for item in history[0]["items"]) == [1, 2]

    def test_logout_ends_access_to_history(self, client):
        client.post("/api/register", json=ALICE)
        assert client.get("/api/user/orders").status_code == 200

        client.post("/api/logout")

        assert client.get("/api/user/orders").status_code == 401


class TestSlowWorkDoesNotBlock:
    """Blocking calls (payment processor, password hashing) run off the event loop."""

    DELAY = 1.0

    @staticmethod
    async def _alongside_health(app, slow_request):
        """Fire ``slow_request`` and, 50 ms later, ``GET /health``; return the health latency."""
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://storefront.test") as client:

            async def health():
                await asyncio.sleep(0.05)
                started = time.perf_counter()
                response = await client.get("/health")
                return response, time.perf_counter() - started

            slow, (health_response, latency) = await asyncio.gather(slow_request(client), health())

        return slow, health_response, latency

    def test_slow_checkout(self, test_settings):
        from app import create_app
        from ordering.gateway.fake_adapter import FakeGateway

        delay = self.DELAY

        class SlowGateway(FakeGateway):
            def create_payment_intent(self, amount, currency, metadata):
                time.sleep(delay)
                return super().create_payment_intent(amount, currency, metadata)

        app = create_app(settings=test_settings, gateway=SlowGateway())
        body = {"amount": "29.99", "items": [{"id": "p-1", "price": "29.99", "quantity": 1}]}

        checkout, health, latency = asyncio.run(
            self._alongside_health(app, lambda client: client.post("/api/create-payment-intent", json=body))
        )

        assert checkout.status_code == 200
        assert health.status_code == 200
        assert latency < self.DELAY / 2

    def test_slow_password_hashing(self, gateway, test_settings, monkeypatch):
        from app import create_app
        from identity.session import authentication

        real_hash = authentication.hash_password

        def slow_hash(password):
            time.sleep(self.DELAY)
            return real_hash(password)

        monkeypatch.setattr(authentication, "hash_password", slow_hash)
        app = create_app(settings=test_settings, gateway=gateway)

        registered, health, latency = asyncio.run(
            self._alongside_health(app, lambda client: client.post("/api/register", json=ALICE))
        )

        assert registered.status_code == 201
        assert health.status_code == 200
        assert latency < self.DELAY / 2
