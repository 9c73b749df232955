"""Configurable fake payment gateway for development and testing.

This adapter simulates a real payment gateway without any external calls.
Intent ids look like ``mock_pi_<hex>`` and client secrets like
``mock_client_secret_<hex>``. Callbacks are authenticated with a shared token,
sent either as the signature header or as ``token`` in the JSON body:

    {"token": "test_webhook_token", "paymentIntentId": "mock_pi_...", "status": "paid"}

It can be configured at runtime to refuse new intents, which is useful for
manual API testing via /payments/gateway/configure and for tests that need a
gateway outage.
"""

import json
import os
import secrets
from uuid import uuid4

from marketplace.exceptions import PaymentGatewayError, VerificationError
from marketplace.payments.gateway.port import PaymentGateway, PaymentIntent, SettlementEvent, SettlementOutcome

DEFAULT_WEBHOOK_TOKEN = "test_webhook_token"

_FAILURE_STATUSES = {"failed", "payment_failed", "canceled", "cancelled"}


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    name = "fake"

    def __init__(self, webhook_token: str | None = None) -> None:
        self.webhook_token = webhook_token or os.getenv("MOCK_WEBHOOK_TOKEN", DEFAULT_WEBHOOK_TOKEN)
        self.should_succeed: bool = True
        self.failure_reason: str = "Payment gateway unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Payment gateway unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_intent(self, amount: float, currency: str, metadata: dict | None = None) -> PaymentIntent:
        self.calls.append(
            {
                "method": "create_intent",
                "amount": amount,
                "currency": currency,
                "metadata": dict(metadata or {}),
            }
        )

        if not self.should_succeed:
            raise PaymentGatewayError(self.failure_reason)

        return PaymentIntent(
            intent_id=f"mock_pi_{uuid4().hex[:24]}",
            client_secret=f"mock_client_secret_{uuid4().hex[:24]}",
            amount=amount,
            currency=currency,
        )

    def verify_callback(self, payload: bytes, signature: str | None) -> SettlementEvent | None:
        self.calls.append({"method": "verify_callback", "signature": signature})

        try:
            body = json.loads(payload or b"{}")
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise VerificationError("Webhook payload is not valid JSON") from exc
        if not isinstance(body, dict):
            raise VerificationError("Webhook payload must be a JSON object")

        token = signature or body.get("token") or ""
        if not secrets.compare_digest(str(token), self.webhook_token):
            raise VerificationError("Webhook verification failed")

        intent_id = body.get("paymentIntentId") or body.get("payment_intent_id")
        if not intent_id:
            return None

        status = str(body.get("status") or "succeeded").lower()
        if status in _FAILURE_STATUSES:
            return SettlementEvent(
                payment_intent_id=intent_id,
                outcome=SettlementOutcome.FAILED,
                event_type="payment_intent.payment_failed",
                failure_reason=body.get("reason") or "Payment failed",
            )
        return SettlementEvent(
            payment_intent_id=intent_id,
            outcome=SettlementOutcome.SUCCEEDED,
            event_type="payment_intent.succeeded",
        )
