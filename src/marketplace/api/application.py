"""FastAPI application factory.

The domain must be initialized (``marketplace.init()``) before the app serves
requests; ``src/app.py`` does that at import time, tests do it in conftest.
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketplace.api.errors import register_exception_handlers
from marketplace.catalogue.api import product_router
from marketplace.domain import marketplace
from marketplace.identity.api import auth_router, user_router
from marketplace.ordering.api import cart_router, order_router
from marketplace.payments.api import payment_router
from marketplace.payments.gateway import get_gateway
from marketplace.utils.logging import add_context, clear_context, get_logger

logger = get_logger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Marketplace API",
        description="Multi-vendor marketplace: accounts, catalogue, carts, orders and payments",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the marketplace domain context and bind request log context."""
        add_context(
            request_id=request.headers.get("x-request-id") or uuid4().hex,
            method=request.method,
            path=request.url.path,
        )
        try:
            with marketplace.domain_context():
                return await call_next(request)
        finally:
            clear_context()

    register_exception_handlers(app)

    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(product_router)
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(payment_router)

    @app.get("/health")
    async def health():
        return JSONResponse(
            content={
                "status": "ok",
                "domain": marketplace.name,
                "payment_gateway": get_gateway().name,
            }
        )

    return app
