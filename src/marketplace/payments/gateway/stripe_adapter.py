"""Stripe payment gateway adapter.

Uses the stripe-python SDK to:
- Create PaymentIntents (amounts in the currency's minor unit)
- Verify webhook signatures using Stripe's signing secret
"""

import json

import stripe

from marketplace.exceptions import PaymentGatewayError, VerificationError
from marketplace.payments.gateway.port import PaymentGateway, PaymentIntent, SettlementEvent, SettlementOutcome
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

_SUCCEEDED = "payment_intent.succeeded"
_FAILED = {"payment_intent.payment_failed", "payment_intent.canceled"}


def to_minor_units(amount: float) -> int:
    return int(round(amount * 100))


class StripeGateway(PaymentGateway):
    """Production Stripe gateway adapter."""

    name = "stripe"

    def __init__(self, api_key: str, webhook_secret: str) -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def create_intent(self, amount: float, currency: str, metadata: dict | None = None) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.api_key,
                amount=to_minor_units(amount),
                currency=currency,
                automatic_payment_methods={"enabled": True},
                metadata={k: str(v) for k, v in (metadata or {}).items()},
            )
        except stripe.StripeError as exc:
            logger.error("stripe_intent_failed", error=str(exc), amount=amount, currency=currency)
            raise PaymentGatewayError(f"Payment gateway error: {exc.user_message or 'request failed'}") from exc

        return PaymentIntent(
            intent_id=intent["id"],
            client_secret=intent["client_secret"],
            amount=amount,
            currency=currency,
        )

    def verify_callback(self, payload: bytes, signature: str | None) -> SettlementEvent | None:
        if not signature:
            raise VerificationError("Missing Stripe-Signature header")

        try:
            stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except ValueError as exc:
            raise VerificationError("Invalid webhook payload") from exc
        except stripe.SignatureVerificationError as exc:
            raise VerificationError("Webhook signature verification failed") from exc

        # Verified; read the plain JSON rather than the SDK's object wrappers.
        event = json.loads(payload)
        event_type = event.get("type", "")
        intent = event.get("data", {}).get("object", {})

        if event_type == _SUCCEEDED:
            return SettlementEvent(
                payment_intent_id=intent["id"],
                outcome=SettlementOutcome.SUCCEEDED,
                event_type=event_type,
            )
        if event_type in _FAILED:
            last_error = intent.get("last_payment_error") or {}
            return SettlementEvent(
                payment_intent_id=intent["id"],
                outcome=SettlementOutcome.FAILED,
                event_type=event_type,
                failure_reason=last_error.get("message") or event_type,
            )

        logger.info("stripe_event_ignored", event_type=event_type)
        return None
