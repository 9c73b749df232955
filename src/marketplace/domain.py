"""Marketplace domain: users, catalogue, carts, orders and payment settlement.

A single bounded context: settlement flips an order's payment status and
decrements product stock in the same unit of work, so every aggregate lives
in one domain.
"""

from protean.domain import Domain

from marketplace.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

marketplace = Domain(name="marketplace")
