"""
Cart reducer — the only place cart state changes.

Every transition is pure: (CartState, CartAction) -> CartState.
"""

from __future__ import annotations

from dataclasses import replace

from pharmacart.cart._types import (
    CartState,
    CartAction,
    AddItem,
    RemoveItem,
    UpdateQuantity,
    ClearCart,
    EMPTY_CART,
)


def reduce(state: CartState, action: CartAction) -> CartState:
    """
    Apply one action.

    - AddItem merges quantities into an existing entry with the same id,
      otherwise appends.
    - RemoveItem / UpdateQuantity on an unknown id return ``state`` itself.
    - UpdateQuantity with quantity <= 0 is RemoveItem.
    - ClearCart always yields EMPTY_CART.

    Example:
        state = reduce(EMPTY_CART, AddItem(CartItem("a", "Aspirin", Decimal("10"), 2)))
        state = reduce(state, AddItem(CartItem("a", "Aspirin", Decimal("10"), 3)))
        assert state.items[0].quantity == 5
    """
    match action:
        case AddItem(item):
            existing = state.get(item.id)
            if existing is None:
                return CartState.of((*state.items, item))
            merged = replace(existing, quantity=existing.quantity + item.quantity)
            return CartState.of(
                tuple(merged if i.id == item.id else i for i in state.items)
            )

        case RemoveItem(item_id):
            if state.get(item_id) is None:
                return state
            return CartState.of(tuple(i for i in state.items if i.id != item_id))

        case UpdateQuantity(item_id, quantity) if quantity <= 0:
            return reduce(state, RemoveItem(item_id))

        case UpdateQuantity(item_id, quantity):
            existing = state.get(item_id)
            if existing is None:
                return state
            updated = replace(existing, quantity=quantity)
            return CartState.of(
                tuple(updated if i.id == item_id else i for i in state.items)
            )

        case ClearCart():
            return EMPTY_CART

    raise TypeError(f"Unknown cart action: {action!r}")


def replay(actions: list[CartAction], state: CartState = EMPTY_CART) -> CartState:
    """Fold a sequence of actions over ``state``."""
    for action in actions:
        state = reduce(state, action)
    return state


__all__ = ("reduce", "replay")
