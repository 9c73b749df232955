"""Business exceptions raised by the marketplace domain.

Each maps to one HTTP status in ``marketplace.api.errors``. Stock and state
failures are Protean ``ValidationError`` subclasses so they travel through the
command pipeline like any other invariant violation.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class InsufficientStock(ValidationError):
    """Requested quantity exceeds the product's live stock."""

    def __init__(self, message="Insufficient stock", product_id=None, requested=None, available=None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__({"stock": [message]})


class InvalidState(ValidationError):
    """The aggregate is not in a state that allows the operation."""

    def __init__(self, message, field="state"):
        super().__init__({field: [message]})


class NotFound(ObjectNotFoundError):
    """A referenced user, product, cart, line or order does not exist."""

    def __init__(self, message):
        super().__init__(message)


class Unauthenticated(Exception):
    """Missing, malformed or expired credentials."""

    def __init__(self, message="Not authorized"):
        self.message = message
        super().__init__(message)


class Forbidden(Exception):
    """The caller is authenticated but lacks the role or ownership required."""

    def __init__(self, message="Not authorized"):
        self.message = message
        super().__init__(message)


class VerificationError(Exception):
    """A payment callback failed signature verification."""

    def __init__(self, message="Webhook verification failed"):
        self.message = message
        super().__init__(message)


class PaymentGatewayError(Exception):
    """The payment gateway refused the request or could not be reached."""

    def __init__(self, message="Payment gateway unavailable"):
        self.message = message
        super().__init__(message)


def error_message(exc) -> str:
    """Flatten a Protean exception's messages into one human-readable line."""
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        for errors in messages.values():
            if isinstance(errors, list | tuple) and errors:
                return str(errors[0])
            if errors:
                return str(errors)
    if isinstance(messages, list | tuple) and messages:
        return str(messages[0])
    if messages:
        return str(messages)
    return str(exc)
