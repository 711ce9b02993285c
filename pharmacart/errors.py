"""
Error taxonomy.

Every failure raised by pharmacart derives from PharmacartError and
carries a human-readable ``message`` suitable for showing to the user.

    try:
        intent = CH.prepare_order(store.state, identity)
    except PrescriptionRequired as e:
        toast(e.message)
"""

from __future__ import annotations

from dataclasses import dataclass, fields


class PharmacartError(Exception):
    """
    Base class for all pharmacart failures.

    Subclasses are dataclasses; their field values become ``args`` so
    pickle and copy can rebuild them.
    """

    def __post_init__(self) -> None:
        super().__init__(*(getattr(self, f.name) for f in fields(self)))

    @property
    def message(self) -> str:
        return "Something went wrong."

    def __str__(self) -> str:
        return self.message


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(eq=False)
class AuthRequired(PharmacartError):
    """Caller has no identity (or an empty bearer token)."""

    @property
    def message(self) -> str:
        return "Please log in to complete your order."


@dataclass(eq=False)
class PrescriptionRequired(PharmacartError):
    """Cart holds prescription-only items but no prescription is attached."""

    item_ids: tuple[str, ...]
    item_names: tuple[str, ...] = ()

    @property
    def message(self) -> str:
        names = ", ".join(self.item_names or self.item_ids)
        return (
            "Some items in your cart require a valid prescription. "
            f"Please upload it before checkout. ({names})"
        )


@dataclass(eq=False)
class InvalidPrescription(PharmacartError):
    """Attached prescription file has an unsupported type or size."""

    reason: str

    @property
    def message(self) -> str:
        return self.reason


@dataclass(eq=False)
class EmptyCart(PharmacartError):
    @property
    def message(self) -> str:
        return "Your cart is empty."


# ═══════════════════════════════════════════════════════════════════════════════
# Pricing
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(eq=False)
class InvalidPromoCode(PharmacartError):
    code: str

    @property
    def message(self) -> str:
        return "The promo code you entered is invalid or expired."


# ═══════════════════════════════════════════════════════════════════════════════
# Order Lifecycle
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(eq=False)
class ActionNotOffered(PharmacartError):
    """Requested action is not legal from the order's current state."""

    action: str
    status: str

    @property
    def message(self) -> str:
        return f"Cannot {self.action.replace('_', ' ')} an order that is {self.status}."


@dataclass(eq=False)
class PaymentNotApplicable(ActionNotOffered):
    """Payment link requested for an order that cannot be paid."""

    payment_status: str = ""

    @property
    def message(self) -> str:
        return "Payment processing not available for current order status."


# ═══════════════════════════════════════════════════════════════════════════════
# Backend / Transport
# ═══════════════════════════════════════════════════════════════════════════════

NETWORK_ERROR_MESSAGE = "Network error. Please try again."


@dataclass(eq=False)
class BackendRejected(PharmacartError):
    """Backend answered with a structured refusal."""

    reason: str
    status_code: int | None = None

    @property
    def message(self) -> str:
        return self.reason


@dataclass(eq=False)
class TransitionRejected(BackendRejected):
    """Backend refused a status or payment change."""


@dataclass(eq=False)
class RequestRejected(BackendRejected):
    """Backend refused any other request (validation error, not found, ...)."""


@dataclass(eq=False)
class NetworkError(PharmacartError):
    """Transport failure, distinct from a structured backend rejection."""

    detail: str = ""

    @property
    def message(self) -> str:
        return NETWORK_ERROR_MESSAGE


ApiError = BackendRejected | NetworkError


# ═══════════════════════════════════════════════════════════════════════════════
# Request Gate
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(eq=False)
class DuplicateSubmission(PharmacartError):
    """Same action already in flight."""

    key: str

    @property
    def message(self) -> str:
        return "This request is already being processed."


@dataclass(eq=False)
class RequestDropped(PharmacartError):
    """Request completed after its view went away; result was discarded."""

    key: str

    @property
    def message(self) -> str:
        return "The request was cancelled."


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "PharmacartError",
    "AuthRequired",
    "PrescriptionRequired",
    "InvalidPrescription",
    "EmptyCart",
    "InvalidPromoCode",
    "ActionNotOffered",
    "PaymentNotApplicable",
    "NETWORK_ERROR_MESSAGE",
    "BackendRejected",
    "TransitionRejected",
    "RequestRejected",
    "NetworkError",
    "ApiError",
    "DuplicateSubmission",
    "RequestDropped",
)
