"""
API — async HTTP client for the storefront backend.

    from pharmacart import api

    async with api.StorefrontClient.from_settings(settings, credentials=get_token) as client:
        page = await client.list_orders(OrderQuery().toggle_sort("subtotal"))
"""

from pharmacart.api._payloads import (
    OrderItemIn,
    OrderIn,
    OrderPageIn,
    PaymentUrlIn,
    PaymentIn,
    ProductIn,
    ProductPageIn,
    InventoryLogIn,
    InventoryLogPageIn,
    OrderItemOut,
    PlaceOrderOut,
    StatusUpdateOut,
    StockUpdateOut,
)
from pharmacart.api._client import StorefrontClient, Credentials

__all__ = (
    # Client
    "StorefrontClient",
    "Credentials",
    # Inbound
    "OrderItemIn",
    "OrderIn",
    "OrderPageIn",
    "PaymentUrlIn",
    "PaymentIn",
    "ProductIn",
    "ProductPageIn",
    "InventoryLogIn",
    "InventoryLogPageIn",
    # Outbound
    "OrderItemOut",
    "PlaceOrderOut",
    "StatusUpdateOut",
    "StockUpdateOut",
)
