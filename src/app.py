"""Storefront FastAPI application.

JSON API over the identity, catalogue and ordering contexts. Each request is
wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from catalogue.domain import catalogue
from identity.domain import identity
from ordering.domain import ordering
from ordering.gateway import build_gateway, set_gateway
from ordering.gateway.port import PaymentGateway
from shared.http import register_exception_handlers, unexpected_error_response
from shared.logging import bind_request, unbind_request
from shared.settings import Settings, get_settings, set_settings

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV controls which config overlay is applied (see domain.toml).
identity.init()
catalogue.init()
ordering.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
# Checked in order: the first matching prefix wins.
_ROUTE_DOMAIN_MAP = (
    ("/api/user/orders", ordering),
    ("/api/create-payment-intent", ordering),
    ("/api/stripe-webhook", ordering),
    ("/api/order/", ordering),
    ("/api/products", catalogue),
    ("/api/register", identity),
    ("/api/login", identity),
    ("/api/logout", identity),
    ("/api/user", identity),
)


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP:
        if path.startswith(prefix):
            return domain
    return None


def _seed_catalogue():
    from catalogue.product.seeding import seed_catalogue

    with catalogue.domain_context():
        seed_catalogue(source="startup")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if app.state.settings.seed_catalogue:
        _seed_catalogue()
    logger.info("storefront_started", environment=app.state.settings.environment)
    yield


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
def create_app(settings: Settings | None = None, gateway: PaymentGateway | None = None) -> FastAPI:
    """Build the application around explicit settings and payment gateway.

    Both default to what the environment describes. They are installed as the
    process-wide settings and gateway used by the domain services.
    """
    settings = settings or get_settings()
    set_settings(settings)
    set_gateway(gateway or build_gateway(settings))

    app = FastAPI(
        title="Storefront API",
        description="Online storefront: accounts, catalog, checkout and payments",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the correct Protean domain context for each request."""
        request_id = bind_request(request.method, request.url.path, request.headers.get("X-Request-ID"))
        try:
            domain = _resolve_domain(request.url.path)
            if domain is not None:
                with domain.domain_context():
                    response = await call_next(request)
            else:
                # No domain match: pass through (health check, docs, etc.)
                response = await call_next(request)
        except Exception as exc:
            response = await unexpected_error_response(request, exc)
        finally:
            unbind_request()
        response.headers["X-Request-ID"] = request_id
        return response

    register_exception_handlers(app)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    from catalogue.api import product_router
    from identity.api import router as identity_router
    from ordering.api import router as ordering_router

    app.include_router(identity_router)
    app.include_router(product_router)
    app.include_router(ordering_router)

    # -----------------------------------------------------------------------
    # Health
    # -----------------------------------------------------------------------
    @app.get("/health")
    async def health():
        return JSONResponse(
            content={
                "status": "ok",
                "domains": {
                    "identity": {"name": identity.name},
                    "catalogue": {"name": catalogue.name},
                    "ordering": {"name": ordering.name},
                },
            }
        )

    return app


app = create_app()
