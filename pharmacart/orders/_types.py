"""
Order types — statuses, records, queries.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Literal

from pharmacart.cart import CartItem

# ═══════════════════════════════════════════════════════════════════════════════
# Status Axes
# ═══════════════════════════════════════════════════════════════════════════════


class OrderStatus(Enum):
    """
    Customer/admin-visible lifecycle.

        payment_pending → {payment_failed, paid/approved} → processing/shipped → completed
        cancelled is reachable from any non-terminal state
    """

    PENDING = "pending"
    PAYMENT_PENDING = "payment_pending"
    PAYMENT_FAILED = "payment_failed"
    APPROVED = "approved"
    PAID = "paid"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: str | OrderStatus) -> OrderStatus:
        if isinstance(value, OrderStatus):
            return value
        return cls(value.strip().lower())

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})

# Values an admin may pick from the status dropdown.
ADMIN_STATUSES = (
    OrderStatus.APPROVED,
    OrderStatus.SHIPPED,
    OrderStatus.COMPLETED,
    OrderStatus.CANCELLED,
)


class PaymentStatus(Enum):
    """Payment axis. Only the backend moves it."""

    PAYMENT_PENDING = "payment_pending"
    COMPLETE = "complete"
    FAILED = "failed"

    @classmethod
    def parse(cls, value: str | PaymentStatus | None) -> PaymentStatus:
        if value is None:
            return cls.PAYMENT_PENDING
        if isinstance(value, PaymentStatus):
            return value
        return cls(value.strip().lower())


# ═══════════════════════════════════════════════════════════════════════════════
# Records
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderItem:
    """Line snapshot taken at placement; never follows catalog price changes."""

    product_id: str
    product_name: str
    quantity: int
    price: Decimal | None = None

    @property
    def line_total(self) -> Decimal:
        return (self.price or Decimal("0")) * self.quantity


@dataclass(frozen=True, slots=True)
class Order:
    order_id: str
    items: tuple[OrderItem, ...]
    status: OrderStatus
    payment_status: PaymentStatus = PaymentStatus.PAYMENT_PENDING
    customer_id: str | None = None
    subtotal: Decimal = Decimal("0")
    shipping_cost: Decimal = Decimal("0")
    prescription_url: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.shipping_cost


@dataclass(frozen=True, slots=True)
class OrderPage:
    orders: tuple[Order, ...]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return math.ceil(self.total / self.limit)


@dataclass(frozen=True, slots=True)
class Payment:
    id: str
    order_id: str
    amount: Decimal
    status: str
    payment_url: str | None = None
    payment_method: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog and Inventory
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class StockAdjustment:
    """Sign and magnitude are forwarded to the backend unchanged."""

    quantity_change: int
    reason: str


@dataclass(frozen=True, slots=True)
class Product:
    id: str
    name: str
    price: Decimal
    stock: int
    description: str = ""
    image_url: str = ""
    requires_prescription: bool = False

    def to_cart_item(self, quantity: int = 1) -> CartItem:
        """Cart line for this product at its current catalog price."""
        return CartItem(
            id=self.id,
            name=self.name,
            price=self.price,
            quantity=quantity,
            image_url=self.image_url,
            requires_prescription=self.requires_prescription,
        )


@dataclass(frozen=True, slots=True)
class ProductPage:
    products: tuple[Product, ...]
    total: int
    page: int
    limit: int


@dataclass(frozen=True, slots=True)
class InventoryLog:
    id: str
    product_id: str
    quantity_change: int
    change_type: str = ""
    reason: str = ""
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class InventoryLogPage:
    logs: tuple[InventoryLog, ...]
    total: int
    page: int
    limit: int


# ═══════════════════════════════════════════════════════════════════════════════
# Query — paging, sorting, filtering for order lists
# ═══════════════════════════════════════════════════════════════════════════════

SortOrder = Literal["asc", "desc"]
FilterOperator = Literal["eq", "gt", "lt", "ilike"]

FILTER_OPERATORS: frozenset[str] = frozenset({"eq", "gt", "lt", "ilike"})


@dataclass(frozen=True, slots=True)
class OrderQuery:
    """
    Order list query.

    Immutable; every method returns a new query.

    Example:
        q = OrderQuery().toggle_sort("subtotal").where("status", "eq", "shipped")
        params = q.to_params()
    """

    page: int = 1
    limit: int = 10
    sort_by: str = "created_at"
    sort_order: SortOrder = "desc"
    filter_column: str = ""
    filter_operator: str = "eq"
    filter_value: str = ""

    def toggle_sort(self, column: str) -> OrderQuery:
        """Same column flips direction; a new column starts descending."""
        if column == self.sort_by:
            return replace(self, sort_order="asc" if self.sort_order == "desc" else "desc")
        return replace(self, sort_by=column, sort_order="desc")

    def where(self, column: str, operator: str, value: str) -> OrderQuery:
        if operator not in FILTER_OPERATORS:
            raise ValueError(f"Unsupported filter operator: {operator}")
        return replace(
            self,
            filter_column=column,
            filter_operator=operator,
            filter_value=value,
            page=1,
        )

    def clear_filter(self) -> OrderQuery:
        return replace(self, filter_column="", filter_operator="eq", filter_value="")

    def goto(self, page: int, total_pages: int) -> OrderQuery:
        """Move to ``page``; out-of-range pages leave the query unchanged."""
        if page < 1 or page > total_pages:
            return self
        return replace(self, page=page)

    @property
    def has_filter(self) -> bool:
        return bool(self.filter_column and self.filter_operator and self.filter_value)

    def to_params(self) -> dict[str, str | int]:
        params: dict[str, str | int] = {
            "page": self.page,
            "limit": self.limit,
            "sort_by": self.sort_by,
            "sort_order": self.sort_order,
        }
        if self.has_filter:
            params["filter_column"] = self.filter_column
            params["filter_operator"] = self.filter_operator
            params["filter_value"] = self.filter_value
        return params


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
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
    "SortOrder",
    "FilterOperator",
    "FILTER_OPERATORS",
    "OrderQuery",
)
