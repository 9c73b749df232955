"""Pydantic request/response schemas for the Payments API."""

from pydantic import BaseModel

from marketplace.api.schemas import Envelope
from marketplace.ordering.api.schemas import OrderResponse


class MockPaymentRequest(BaseModel):
    order_id: str


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Payment gateway unavailable"


class WebhookAck(BaseModel):
    received: bool = True


class PaymentEnvelope(Envelope):
    order: OrderResponse


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    failure_reason: str
