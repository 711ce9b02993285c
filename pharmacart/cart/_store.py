"""
CartStore — the single in-memory cart for a session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pharmacart.cart._types import (
    CartItem,
    CartState,
    CartAction,
    AddItem,
    RemoveItem,
    UpdateQuantity,
    ClearCart,
    EMPTY_CART,
)
from pharmacart.cart._reduce import reduce
from pharmacart.cart._persist import CartPersistence

logger = logging.getLogger(__name__)

Listener = Callable[[CartState], None]


class CartStore:
    """
    Owns the active cart and mirrors it to a persistence port.

    Every operation goes through ``dispatch``: reduce, replace state, save,
    notify. Construct one per session and pass it to whatever needs it.

    Example:
        store = CartStore(KeyValuePersistence(MemoryStorage()))
        store.add_item(CartItem("a", "Aspirin", Decimal("10"), quantity=2))
        store.update_quantity("a", 0)   # same as remove_item("a")
    """

    def __init__(self, persistence: CartPersistence) -> None:
        self._persistence = persistence
        self._listeners: list[Listener] = []
        self._state = EMPTY_CART
        self._rehydrate()

    def _rehydrate(self) -> None:
        # Replay through the reducer so duplicate ids in storage are merged.
        persisted = self._persistence.load()
        state = reduce(self._state, ClearCart())
        for item in persisted.items:
            state = reduce(state, AddItem(item))
        self._state = state
        self._persistence.save(state)
        logger.debug("Cart rehydrated with %d item(s)", len(state.items))

    @property
    def state(self) -> CartState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every transition. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: CartAction) -> CartState:
        new_state = reduce(self._state, action)
        self._state = new_state
        self._persistence.save(new_state)
        logger.debug(
            "%s -> %d item(s), total=%s",
            type(action).__name__,
            len(new_state.items),
            new_state.total,
        )
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    def add_item(self, item: CartItem) -> CartState:
        return self.dispatch(AddItem(item))

    def remove_item(self, item_id: str) -> CartState:
        return self.dispatch(RemoveItem(item_id))

    def update_quantity(self, item_id: str, quantity: int) -> CartState:
        return self.dispatch(UpdateQuantity(item_id, quantity))

    def clear_cart(self) -> CartState:
        return self.dispatch(ClearCart())


__all__ = ("CartStore", "Listener")
