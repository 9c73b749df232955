"""Marketplace FastAPI application.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml; PAYMENT_GATEWAY
# selects the payment adapter.
from marketplace.api.application import create_app
from marketplace.domain import marketplace
from marketplace.payments.gateway import build_gateway, set_gateway

marketplace.init()
set_gateway(build_gateway())

app = create_app()
