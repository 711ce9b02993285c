"""
Checkout — prescription gate, order snapshot, submission.

    from pharmacart import checkout as CH

    intent = CH.prepare_order(store.state, identity, prescription)   # pure
    order = await CH.CheckoutCoordinator(store, client, gate).place_order(identity, prescription)
"""

from pharmacart.checkout._types import Identity, Prescription, OrderIntent
from pharmacart.checkout._coordinator import (
    PLACE_ORDER_KEY,
    PRESCRIPTION_CONTENT_TYPES,
    MAX_PRESCRIPTION_BYTES,
    validate_prescription,
    prepare_order,
    CheckoutCoordinator,
)

__all__ = (
    "Identity",
    "Prescription",
    "OrderIntent",
    "PLACE_ORDER_KEY",
    "PRESCRIPTION_CONTENT_TYPES",
    "MAX_PRESCRIPTION_BYTES",
    "validate_prescription",
    "prepare_order",
    "CheckoutCoordinator",
)
