"""
Cart types — items, state, actions.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

# ═══════════════════════════════════════════════════════════════════════════════
# Cart Item
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartItem:
    """
    A purchasable line in the cart.

    Identity is ``id``. Quantity >= 1 and price >= 0 are the caller's
    contract; the reducer does not re-validate them.
    """

    id: str
    name: str
    price: Decimal
    quantity: int = 1
    image_url: str = ""
    requires_prescription: bool = False

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


# ═══════════════════════════════════════════════════════════════════════════════
# Cart State
# ═══════════════════════════════════════════════════════════════════════════════


def line_sum(items: tuple[CartItem, ...]) -> Decimal:
    """Σ price * quantity."""
    return sum((item.line_total for item in items), Decimal("0"))


@dataclass(frozen=True, slots=True)
class CartState:
    """
    Snapshot of the cart.

    Invariant: total == Σ price * quantity. Build through ``of()`` so the
    total is always derived from items.
    """

    items: tuple[CartItem, ...] = ()
    total: Decimal = Decimal("0")

    @classmethod
    def of(cls, items: tuple[CartItem, ...] | list[CartItem]) -> CartState:
        items = tuple(items)
        return cls(items=items, total=line_sum(items))

    def get(self, item_id: str) -> CartItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def prescription_items(self) -> tuple[CartItem, ...]:
        return tuple(item for item in self.items if item.requires_prescription)

    @property
    def requires_prescription(self) -> bool:
        return any(item.requires_prescription for item in self.items)


EMPTY_CART = CartState()


# ═══════════════════════════════════════════════════════════════════════════════
# Actions — tagged union consumed by reduce()
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class AddItem:
    item: CartItem


@dataclass(frozen=True, slots=True)
class RemoveItem:
    item_id: str


@dataclass(frozen=True, slots=True)
class UpdateQuantity:
    item_id: str
    quantity: int


@dataclass(frozen=True, slots=True)
class ClearCart:
    pass


CartAction = Union[AddItem, RemoveItem, UpdateQuantity, ClearCart]

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "CartItem",
    "CartState",
    "EMPTY_CART",
    "line_sum",
    "AddItem",
    "RemoveItem",
    "UpdateQuantity",
    "ClearCart",
    "CartAction",
)
