"""Payment gateway port (abstract interface).

Defines the contract that all payment gateway adapters must implement.
This enables swapping between FakeGateway (dev/test) and StripeGateway
(production) without changing any domain or application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum


class SettlementOutcome(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class PaymentIntent:
    """Handle for an in-progress payment, returned to the client to complete it."""

    intent_id: str
    client_secret: str
    amount: float
    currency: str


@dataclass(frozen=True)
class SettlementEvent:
    """A verified gateway notification about the outcome of a payment intent."""

    payment_intent_id: str
    outcome: SettlementOutcome
    event_type: str = ""
    failure_reason: str | None = None
    metadata: dict = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.outcome == SettlementOutcome.SUCCEEDED


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    name: str = "abstract"

    @abstractmethod
    def create_intent(self, amount: float, currency: str, metadata: dict | None = None) -> PaymentIntent:
        """Open a payment intent for ``amount`` (in major units).

        Raises ``PaymentGatewayError`` when the gateway refuses or is unreachable.
        """
        ...

    @abstractmethod
    def verify_callback(self, payload: bytes, signature: str | None) -> SettlementEvent | None:
        """Authenticate a callback and translate it into a settlement event.

        Returns None for authentic callbacks that carry no settlement outcome.
        Raises ``VerificationError`` when the callback is not authentic.
        """
        ...
