"""Payments API package."""

from marketplace.payments.api.routes import payment_router

__all__ = ["payment_router"]
