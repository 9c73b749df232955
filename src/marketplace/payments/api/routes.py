"""FastAPI routes for payment settlement."""

import os

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from protean.utils.globals import current_domain

from marketplace.api.dependencies import requires
from marketplace.identity.access import Actor, Permission
from marketplace.ordering.api.schemas import OrderResponse
from marketplace.ordering.order.queries import get_order
from marketplace.payments.api.schemas import (
    ConfigureGatewayRequest,
    GatewayConfigResponse,
    MockPaymentRequest,
    PaymentEnvelope,
    WebhookAck,
)
from marketplace.payments.gateway import get_gateway
from marketplace.payments.gateway.fake_adapter import FakeGateway
from marketplace.payments.settlement import ConfirmPayment, SettlePayment

payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.post("/webhook", response_model=WebhookAck)
async def process_webhook(
    request: Request,
    stripe_signature: str | None = Header(default=None),
) -> WebhookAck:
    """Settle an order from a gateway callback.

    The raw body is handed to the gateway untouched; signature checks need the
    exact bytes that were signed.
    """
    payload = await request.body()
    event = get_gateway().verify_callback(payload, stripe_signature)
    if event is not None and event.payment_intent_id:
        command = SettlePayment(
            payment_intent_id=event.payment_intent_id,
            outcome=event.outcome.value,
            failure_reason=event.failure_reason,
        )
        await run_in_threadpool(current_domain.process, command, asynchronous=False)
    return WebhookAck(received=True)


@payment_router.post("/mock", response_model=PaymentEnvelope)
async def mock_payment(
    body: MockPaymentRequest,
    actor: Actor = Depends(requires(Permission.CONFIRM_PAYMENT)),
) -> PaymentEnvelope:
    """Confirm payment for one of the caller's own pending orders."""
    command = ConfirmPayment(
        order_id=body.order_id,
        actor_id=actor.user_id,
        actor_role=actor.role.value,
    )
    current_domain.process(command, asynchronous=False)
    return PaymentEnvelope(
        message="Payment processed successfully (mock)",
        order=OrderResponse.from_order(get_order(actor, body.order_id)),
    )


@payment_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(
    body: ConfigureGatewayRequest,
    actor: Actor = Depends(requires(Permission.CONFIGURE_GATEWAY)),
) -> GatewayConfigResponse:
    """Toggle the fake gateway between accepting and refusing new intents.

    Not available when PROTEAN_ENV is 'production'.
    """
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    gateway.configure(
        should_succeed=body.should_succeed,
        failure_reason=body.failure_reason,
    )
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
    )
