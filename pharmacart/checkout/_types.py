"""
Checkout types.
"""

from __future__ import annotations

from dataclasses import dataclass

from pharmacart.orders import OrderItem


@dataclass(frozen=True, slots=True)
class Identity:
    """Authenticated caller, supplied by the auth collaborator."""

    token: str
    customer_id: str | None = None

    @property
    def authenticated(self) -> bool:
        return bool(self.token)


@dataclass(frozen=True, slots=True)
class Prescription:
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    def as_upload(self) -> tuple[str, bytes, str]:
        """httpx file tuple."""
        return (self.filename, self.content, self.content_type)


@dataclass(frozen=True, slots=True)
class OrderIntent:
    """
    Validated, immutable snapshot of a cart ready for submission.

    Items are copied by value; later cart edits do not reach the intent.
    """

    items: tuple[OrderItem, ...]
    prescription: Prescription | None = None
    customer_id: str | None = None


__all__ = ("Identity", "Prescription", "OrderIntent")
