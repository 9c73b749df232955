"""Payment gateway factory.

The adapter is chosen once at startup by build_gateway() from the
PAYMENT_GATEWAY environment variable and installed with set_gateway().
Without PAYMENT_GATEWAY, Stripe is used when STRIPE_SECRET_KEY is set:
- FakeGateway ("fake") for development and testing
- StripeGateway ("stripe") for production

Call sites only ever use get_gateway().
"""

import os

from marketplace.payments.gateway.fake_adapter import FakeGateway
from marketplace.payments.gateway.port import PaymentGateway, PaymentIntent, SettlementEvent, SettlementOutcome
from marketplace.payments.gateway.stripe_adapter import StripeGateway

__all__ = [
    "FakeGateway",
    "PaymentGateway",
    "PaymentIntent",
    "SettlementEvent",
    "SettlementOutcome",
    "StripeGateway",
    "build_gateway",
    "get_gateway",
    "reset_gateway",
    "set_gateway",
]

_current_gateway: PaymentGateway | None = None


def build_gateway(kind: str | None = None) -> PaymentGateway:
    """Construct the adapter named by ``kind`` (or ``PAYMENT_GATEWAY``)."""
    default = "stripe" if os.getenv("STRIPE_SECRET_KEY") else "fake"
    kind = (kind or os.getenv("PAYMENT_GATEWAY", default)).lower()

    if kind == "fake":
        return FakeGateway()
    if kind == "stripe":
        api_key = os.getenv("STRIPE_SECRET_KEY")
        webhook_secret = os.getenv("STRIPE_WEBHOOK_SECRET")
        if not api_key or not webhook_secret:
            raise RuntimeError("PAYMENT_GATEWAY=stripe needs STRIPE_SECRET_KEY and STRIPE_WEBHOOK_SECRET")
        return StripeGateway(api_key=api_key, webhook_secret=webhook_secret)

    raise RuntimeError(f"Unknown PAYMENT_GATEWAY {kind!r}; expected 'fake' or 'stripe'")


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway. Defaults to FakeGateway."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = FakeGateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Install the active payment gateway (at startup, or in tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
