"""
Wire models for the storefront backend.

Inbound models decode backend JSON and expose ``to_domain()``; outbound
models are built with ``from_domain()`` and serialized as request bodies.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field, field_serializer

from pharmacart.orders import (
    InventoryLog,
    InventoryLogPage,
    Order,
    OrderItem,
    OrderPage,
    OrderStatus,
    Payment,
    PaymentStatus,
    Product,
    ProductPage,
    StockAdjustment,
)

# Backend ids arrive as either numbers or strings.
_Id = Annotated[str, BeforeValidator(lambda v: str(v) if isinstance(v, int) else v)]
_Status = Annotated[OrderStatus, BeforeValidator(OrderStatus.parse)]
_PaymentStatus = Annotated[PaymentStatus, BeforeValidator(PaymentStatus.parse)]


# ═══════════════════════════════════════════════════════════════════════════════
# Orders (inbound)
# ═══════════════════════════════════════════════════════════════════════════════


class OrderItemIn(BaseModel):
    product_id: _Id
    product_name: str
    quantity: int = Field(ge=1)
    price: Decimal | None = None

    def to_domain(self) -> OrderItem:
        return OrderItem(
            product_id=self.product_id,
            product_name=self.product_name,
            quantity=self.quantity,
            price=self.price,
        )


class OrderIn(BaseModel):
    order_id: _Id
    items: list[OrderItemIn] = Field(default_factory=list)
    status: _Status = OrderStatus.PENDING
    payment_status: _PaymentStatus = PaymentStatus.PAYMENT_PENDING
    customer_id: _Id | None = None
    subtotal: Decimal = Decimal("0")
    shipping_cost: Decimal = Decimal("0")
    prescription_url: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_domain(self) -> Order:
        return Order(
            order_id=self.order_id,
            items=tuple(i.to_domain() for i in self.items),
            status=self.status,
            payment_status=self.payment_status,
            customer_id=self.customer_id,
            subtotal=self.subtotal,
            shipping_cost=self.shipping_cost,
            prescription_url=self.prescription_url,
            notes=self.notes,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class OrderPageIn(BaseModel):
    orders: list[OrderIn] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    def to_domain(self) -> OrderPage:
        return OrderPage(
            orders=tuple(o.to_domain() for o in self.orders),
            total=self.total,
            page=self.page,
            limit=self.limit,
        )


class PaymentUrlIn(BaseModel):
    payment_url: str


class PaymentIn(BaseModel):
    id: _Id
    order_id: _Id
    amount: Decimal
    status: str
    payment_url: str | None = None
    payment_method: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_domain(self) -> Payment:
        return Payment(
            id=self.id,
            order_id=self.order_id,
            amount=self.amount,
            status=self.status,
            payment_url=self.payment_url,
            payment_method=self.payment_method,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Inventory (inbound)
# ═══════════════════════════════════════════════════════════════════════════════


class ProductIn(BaseModel):
    id: _Id
    name: str
    price: Decimal
    stock: int
    description: str | None = ""
    image_url: str | None = ""
    requires_prescription: bool | None = False

    def to_domain(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            price=self.price,
            stock=self.stock,
            description=self.description or "",
            image_url=self.image_url or "",
            requires_prescription=bool(self.requires_prescription),
        )


class ProductPageIn(BaseModel):
    products: list[ProductIn] = Field(default_factory=list)
    total: int | None = None
    page: int = 1
    limit: int = 10

    def to_domain(self) -> ProductPage:
        return ProductPage(
            products=tuple(p.to_domain() for p in self.products),
            total=len(self.products) if self.total is None else self.total,
            page=self.page,
            limit=self.limit,
        )


class InventoryLogIn(BaseModel):
    id: _Id
    product_id: _Id
    quantity_change: int
    change_type: str | None = ""
    reason: str | None = ""
    created_at: datetime | None = None

    def to_domain(self) -> InventoryLog:
        return InventoryLog(
            id=self.id,
            product_id=self.product_id,
            quantity_change=self.quantity_change,
            change_type=self.change_type or "",
            reason=self.reason or "",
            created_at=self.created_at,
        )


class InventoryLogPageIn(BaseModel):
    logs: list[InventoryLogIn] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    def to_domain(self) -> InventoryLogPage:
        return InventoryLogPage(
            logs=tuple(entry.to_domain() for entry in self.logs),
            total=self.total,
            page=self.page,
            limit=self.limit,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Outbound
# ═══════════════════════════════════════════════════════════════════════════════


class OrderItemOut(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    price: Decimal | None = None

    # Backend expects prices as JSON numbers.
    @field_serializer("price")
    def serialize_price(self, price: Decimal | None) -> float | None:
        return None if price is None else float(price)

    @classmethod
    def from_domain(cls, item: OrderItem) -> OrderItemOut:
        return cls(
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            price=item.price,
        )


class PlaceOrderOut(BaseModel):
    items: list[OrderItemOut]

    @classmethod
    def from_domain(cls, items: tuple[OrderItem, ...]) -> PlaceOrderOut:
        return cls(items=[OrderItemOut.from_domain(i) for i in items])


class StatusUpdateOut(BaseModel):
    status: str
    notes: str | None = None

    @classmethod
    def from_domain(cls, status: OrderStatus, notes: str | None = None) -> StatusUpdateOut:
        return cls(status=status.value, notes=notes)


class StockUpdateOut(BaseModel):
    quantity_change: int
    reason: str

    @classmethod
    def from_domain(cls, adjustment: StockAdjustment) -> StockUpdateOut:
        return cls(quantity_change=adjustment.quantity_change, reason=adjustment.reason)


__all__ = (
    "OrderItemIn",
    "OrderIn",
    "OrderPageIn",
    "PaymentUrlIn",
    "PaymentIn",
    "ProductIn",
    "ProductPageIn",
    "InventoryLogIn",
    "InventoryLogPageIn",
    "OrderItemOut",
    "PlaceOrderOut",
    "StatusUpdateOut",
    "StockUpdateOut",
)
