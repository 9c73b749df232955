"""Aggregate modules of the marketplace domain.

Domain traversal only loads modules one folder below the domain root.
Aggregates live one folder deeper, inside their context, so their commands,
handlers, events and repositories are imported here.
"""
# ruff: noqa: F401

import marketplace.catalogue.product.creation
import marketplace.catalogue.product.details
import marketplace.catalogue.product.events
import marketplace.catalogue.product.lookup
import marketplace.catalogue.product.product
import marketplace.catalogue.product.queries
import marketplace.catalogue.product.repository
import marketplace.identity.user.account
import marketplace.identity.user.events
import marketplace.identity.user.lookup
import marketplace.identity.user.password_reset
import marketplace.identity.user.profile
import marketplace.identity.user.registration
import marketplace.identity.user.repository
import marketplace.identity.user.user
import marketplace.ordering.cart.cart
import marketplace.ordering.cart.events
import marketplace.ordering.cart.items
import marketplace.ordering.cart.management
import marketplace.ordering.cart.repository
import marketplace.ordering.order.creation
import marketplace.ordering.order.events
import marketplace.ordering.order.order
import marketplace.ordering.order.queries
import marketplace.ordering.order.repository
