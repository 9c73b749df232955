"""Tests for the payment gateway adapters and factory."""

import hashlib
import hmac
import json
import time

import pytest
import stripe

from marketplace.exceptions import PaymentGatewayError, VerificationError
from marketplace.payments.gateway import (
    FakeGateway,
    SettlementOutcome,
    StripeGateway,
    build_gateway,
    get_gateway,
    reset_gateway,
    set_gateway,
)


class TestFakeGatewayIntents:
    def test_creates_mock_intent(self):
        intent = FakeGateway().create_intent(50.0, "usd", {"order_id": "o-1"})
        assert intent.intent_id.startswith("mock_pi_")
        assert intent.client_secret.startswith("mock_client_secret_")
        assert intent.amount == 50.0

    def test_records_calls(self):
        gateway = FakeGateway()
        gateway.create_intent(10.0, "usd", {"order_id": "o-1"})
        assert gateway.calls[0]["metadata"] == {"order_id": "o-1"}

    def test_configured_failure(self):
        gateway = FakeGateway()
        gateway.configure(should_succeed=False, failure_reason="Card network down")
        with pytest.raises(PaymentGatewayError) as exc:
            gateway.create_intent(10.0, "usd")
        assert exc.value.message == "Card network down"


class TestFakeGatewayCallbacks:
    @pytest.fixture()
    def gateway(self):
        return FakeGateway(webhook_token="tok")

    def test_token_in_body(self, gateway):
        payload = json.dumps({"token": "tok", "paymentIntentId": "mock_pi_1", "status": "paid"}).encode()
        event = gateway.verify_callback(payload, None)
        assert event.payment_intent_id == "mock_pi_1"
        assert event.outcome == SettlementOutcome.SUCCEEDED
        assert event.succeeded

    def test_token_in_signature(self, gateway):
        payload = json.dumps({"payment_intent_id": "mock_pi_1"}).encode()
        event = gateway.verify_callback(payload, "tok")
        assert event.outcome == SettlementOutcome.SUCCEEDED

    @pytest.mark.parametrize("status", ["failed", "payment_failed", "canceled", "cancelled"])
    def test_failure_statuses(self, gateway, status):
        payload = json.dumps({"token": "tok", "paymentIntentId": "mock_pi_1", "status": status}).encode()
        event = gateway.verify_callback(payload, None)
        assert event.outcome == SettlementOutcome.FAILED
        assert event.failure_reason == "Payment failed"

    def test_wrong_token(self, gateway):
        payload = json.dumps({"token": "nope", "paymentIntentId": "mock_pi_1"}).encode()
        with pytest.raises(VerificationError):
            gateway.verify_callback(payload, None)

    def test_missing_token(self, gateway):
        with pytest.raises(VerificationError):
            gateway.verify_callback(json.dumps({"paymentIntentId": "mock_pi_1"}).encode(), None)

    def test_invalid_json(self, gateway):
        with pytest.raises(VerificationError):
            gateway.verify_callback(b"not json", "tok")

    def test_authentic_callback_without_intent(self, gateway):
        assert gateway.verify_callback(json.dumps({"token": "tok"}).encode(), None) is None


def _stripe_signature(payload: bytes, secret: str) -> str:
    timestamp = int(time.time())
    signed = f"{timestamp}.{payload.decode()}".encode()
    digest = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def _stripe_event(event_type, intent):
    return json.dumps(
        {"id": "evt_1", "object": "event", "type": event_type, "data": {"object": intent}}
    ).encode()


class TestStripeGateway:
    @pytest.fixture()
    def gateway(self):
        return StripeGateway(api_key="sk_test_123", webhook_secret="whsec_test")

    def test_create_intent_sends_minor_units(self, gateway, monkeypatch):
        captured = {}

        def fake_create(**kwargs):
            captured.update(kwargs)
            return {"id": "pi_123", "client_secret": "pi_123_secret"}

        monkeypatch.setattr(stripe.PaymentIntent, "create", fake_create)

        intent = gateway.create_intent(19.99, "usd", {"order_id": "o-1"})

        assert intent.intent_id == "pi_123"
        assert intent.client_secret == "pi_123_secret"
        assert captured["amount"] == 1999
        assert captured["api_key"] == "sk_test_123"
        assert captured["metadata"] == {"order_id": "o-1"}

    def test_stripe_error_becomes_gateway_error(self, gateway, monkeypatch):
        def failing_create(**kwargs):
            raise stripe.StripeError("boom")

        monkeypatch.setattr(stripe.PaymentIntent, "create", failing_create)

        with pytest.raises(PaymentGatewayError):
            gateway.create_intent(10.0, "usd")

    def test_succeeded_event(self, gateway):
        payload = _stripe_event("payment_intent.succeeded", {"id": "pi_123", "object": "payment_intent"})
        event = gateway.verify_callback(payload, _stripe_signature(payload, "whsec_test"))
        assert event.payment_intent_id == "pi_123"
        assert event.outcome == SettlementOutcome.SUCCEEDED

    def test_failed_event_carries_reason(self, gateway):
        intent = {"id": "pi_123", "object": "payment_intent", "last_payment_error": {"message": "Card declined"}}
        payload = _stripe_event("payment_intent.payment_failed", intent)
        event = gateway.verify_callback(payload, _stripe_signature(payload, "whsec_test"))
        assert event.outcome == SettlementOutcome.FAILED
        assert event.failure_reason == "Card declined"

    def test_unrelated_event_is_ignored(self, gateway):
        payload = _stripe_event("charge.refunded", {"id": "ch_1", "object": "charge"})
        assert gateway.verify_callback(payload, _stripe_signature(payload, "whsec_test")) is None

    def test_bad_signature(self, gateway):
        payload = _stripe_event("payment_intent.succeeded", {"id": "pi_123", "object": "payment_intent"})
        with pytest.raises(VerificationError):
            gateway.verify_callback(payload, _stripe_signature(payload, "whsec_other"))

    def test_missing_signature(self, gateway):
        with pytest.raises(VerificationError):
            gateway.verify_callback(b"{}", None)


class TestGatewayFactory:
    def test_defaults_to_fake(self, monkeypatch):
        monkeypatch.delenv("PAYMENT_GATEWAY", raising=False)
        monkeypatch.delenv("STRIPE_SECRET_KEY", raising=False)
        assert isinstance(build_gateway(), FakeGateway)

    def test_stripe_when_key_present(self, monkeypatch):
        monkeypatch.delenv("PAYMENT_GATEWAY", raising=False)
        monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")
        monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_test")
        assert isinstance(build_gateway(), StripeGateway)

    def test_stripe_needs_credentials(self, monkeypatch):
        monkeypatch.delenv("STRIPE_SECRET_KEY", raising=False)
        monkeypatch.delenv("STRIPE_WEBHOOK_SECRET", raising=False)
        with pytest.raises(RuntimeError):
            build_gateway("stripe")

    def test_stripe_from_environment(self, monkeypatch):
        monkeypatch.setenv("PAYMENT_GATEWAY", "stripe")
        monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")
        monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_test")
        assert isinstance(build_gateway(), StripeGateway)

    def test_unknown_kind(self):
        with pytest.raises(RuntimeError):
            build_gateway("paypal")

    def test_set_and_reset(self):
        stripe_gateway = StripeGateway(api_key="sk", webhook_secret="wh")
        set_gateway(stripe_gateway)
        assert get_gateway() is stripe_gateway

        reset_gateway()
        assert isinstance(get_gateway(), FakeGateway)
