"""
Checkout — gate the cart, snapshot it, submit it, clear it.

    cart ──▶ prepare_order ──▶ OrderIntent ──▶ gate.run("place-order") ──▶ backend
                 │                                                           │
                 └─ AuthRequired / PrescriptionRequired / EmptyCart          └─ ok ─▶ clear_cart()
"""

from __future__ import annotations

import logging

from pharmacart.api import StorefrontClient
from pharmacart.cart import CartState, CartStore
from pharmacart.checkout._types import Identity, OrderIntent, Prescription
from pharmacart.errors import (
    AuthRequired,
    EmptyCart,
    InvalidPrescription,
    PrescriptionRequired,
)
from pharmacart.gate import ActionGate
from pharmacart.orders import Order, OrderItem

logger = logging.getLogger(__name__)

PLACE_ORDER_KEY = "place-order"

PRESCRIPTION_CONTENT_TYPES = frozenset({"application/pdf", "image/jpeg", "image/png"})
MAX_PRESCRIPTION_BYTES = 5 * 1024 * 1024


# ═══════════════════════════════════════════════════════════════════════════════
# Validation
# ═══════════════════════════════════════════════════════════════════════════════


def validate_prescription(
    file: Prescription,
    max_bytes: int = MAX_PRESCRIPTION_BYTES,
) -> Prescription:
    """
    Check file metadata only; content is the backend's concern.

    Raises:
        InvalidPrescription: unsupported type or larger than ``max_bytes``
    """
    if file.content_type.lower() not in PRESCRIPTION_CONTENT_TYPES:
        raise InvalidPrescription("Please upload a PDF, JPEG, or PNG file.")
    if file.size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise InvalidPrescription(
            f"Prescription file must be less than {limit_mb:g}MB in size."
        )
    return file


def prepare_order(
    cart: CartState,
    identity: Identity | None,
    prescription: Prescription | None = None,
) -> OrderIntent:
    """
    Validate ``cart`` for submission and snapshot it.

    Checks run in order and stop at the first failure: identity,
    prescription, then emptiness.

    Raises:
        AuthRequired: no identity or empty token
        PrescriptionRequired: prescription-only items without a prescription
        EmptyCart: nothing to order
    """
    if identity is None or not identity.authenticated:
        raise AuthRequired()

    if prescription is None:
        rx_items = cart.prescription_items
        if rx_items:
            raise PrescriptionRequired(
                item_ids=tuple(i.id for i in rx_items),
                item_names=tuple(i.name for i in rx_items),
            )

    if cart.is_empty:
        raise EmptyCart()

    return OrderIntent(
        items=tuple(
            OrderItem(
                product_id=i.id,
                product_name=i.name,
                quantity=i.quantity,
                price=i.price,
            )
            for i in cart.items
        ),
        prescription=prescription,
        customer_id=identity.customer_id,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Coordinator
# ═══════════════════════════════════════════════════════════════════════════════


class CheckoutCoordinator:
    """
    Places the current cart as an order.

    The cart is cleared only after the backend confirms creation; any
    failure, or a gate closed mid-flight, leaves it untouched.
    """

    def __init__(
        self,
        store: CartStore,
        client: StorefrontClient,
        gate: ActionGate,
        max_prescription_bytes: int = MAX_PRESCRIPTION_BYTES,
    ) -> None:
        self._store = store
        self._client = client
        self._gate = gate
        self._max_prescription_bytes = max_prescription_bytes

    @property
    def submitting(self) -> bool:
        return self._gate.busy(PLACE_ORDER_KEY)

    async def place_order(
        self,
        identity: Identity | None,
        prescription: Prescription | None = None,
    ) -> Order:
        intent = prepare_order(self._store.state, identity, prescription)
        if intent.prescription is not None:
            validate_prescription(intent.prescription, self._max_prescription_bytes)

        upload = intent.prescription.as_upload() if intent.prescription else None
        order = await self._gate.run(
            PLACE_ORDER_KEY,
            lambda: self._client.place_order(intent.items, upload),
        )

        self._store.clear_cart()
        logger.info("Placed order %s with %d item(s)", order.order_id, len(intent.items))
        return order


__all__ = (
    "PLACE_ORDER_KEY",
    "PRESCRIPTION_CONTENT_TYPES",
    "MAX_PRESCRIPTION_BYTES",
    "validate_prescription",
    "prepare_order",
    "CheckoutCoordinator",
)
