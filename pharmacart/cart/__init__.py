"""
Cart — reducer-driven cart state with pluggable persistence.

    from pharmacart import cart as C

    store = C.CartStore(C.KeyValuePersistence(C.MemoryStorage()))
    store.add_item(C.CartItem("a", "Aspirin", Decimal("10"), quantity=2))
    store.state.total  # Decimal("20")
"""

from pharmacart.cart._types import (
    CartItem,
    CartState,
    EMPTY_CART,
    line_sum,
    AddItem,
    RemoveItem,
    UpdateQuantity,
    ClearCart,
    CartAction,
)
from pharmacart.cart._reduce import reduce, replay
from pharmacart.cart._persist import (
    CartPersistence,
    Storage,
    MemoryStorage,
    JsonFileStorage,
    SQLAlchemyStorage,
    StoredItem,
    StoredCart,
    encode_cart,
    decode_cart,
    KeyValuePersistence,
)
from pharmacart.cart._store import CartStore, Listener

__all__ = (
    # Types
    "CartItem",
    "CartState",
    "EMPTY_CART",
    "line_sum",
    # Actions
    "AddItem",
    "RemoveItem",
    "UpdateQuantity",
    "ClearCart",
    "CartAction",
    # Reducer
    "reduce",
    "replay",
    # Persistence
    "CartPersistence",
    "Storage",
    "MemoryStorage",
    "JsonFileStorage",
    "SQLAlchemyStorage",
    "StoredItem",
    "StoredCart",
    "encode_cart",
    "decode_cart",
    "KeyValuePersistence",
    # Store
    "CartStore",
    "Listener",
)
