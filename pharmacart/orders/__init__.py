"""
Orders — backend-owned order records and the lifecycle that governs them.

    from pharmacart import orders as O

    if O.can_generate_payment(order):
        url = await O.OrderActions(client, gate).generate_payment_url(order)

    O.admin_status_options(order)   # () for completed / cancelled
"""

from pharmacart.orders._types import (
    OrderStatus,
    PaymentStatus,
    TERMINAL_STATUSES,
    ADMIN_STATUSES,
    OrderItem,
    Order,
    OrderPage,
    Payment,
    StockAdjustment,
    Product,
    ProductPage,
    InventoryLog,
    InventoryLogPage,
    SortOrder,
    FilterOperator,
    FILTER_OPERATORS,
    OrderQuery,
)
from pharmacart.orders._lifecycle import (
    Actor,
    OrderAction,
    ADMIN_ACTIONS,
    TRANSITIONS,
    check,
    is_offered,
    can_generate_payment,
    can_cancel,
    available_actions,
    admin_status_options,
    validate_admin_status,
)
from pharmacart.orders._actions import OrderActions

__all__ = (
    # Types
    "OrderStatus",
    "PaymentStatus",
    "TERMINAL_STATUSES",
    "ADMIN_STATUSES",
    "OrderItem",
    "Order",
    "OrderPage",
    "Payment",
    "StockAdjustment",
    "Product",
    "ProductPage",
    "InventoryLog",
    "InventoryLogPage",
    # Query
    "SortOrder",
    "FilterOperator",
    "FILTER_OPERATORS",
    "OrderQuery",
    # Lifecycle
    "Actor",
    "OrderAction",
    "ADMIN_ACTIONS",
    "TRANSITIONS",
    "check",
    "is_offered",
    "can_generate_payment",
    "can_cancel",
    "available_actions",
    "admin_status_options",
    "validate_admin_status",
    # Actions
    "OrderActions",
)
