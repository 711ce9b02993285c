"""
Async client for the storefront backend.

    client = StorefrontClient.from_settings(settings, credentials=lambda: session.token)
    order = await client.get_order("42")

Every call either returns a domain record or raises one of:

    BackendRejected  (TransitionRejected | RequestRejected)  backend said no
    NetworkError                                             transport failed / bad payload
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from pharmacart.api._payloads import (
    InventoryLogPageIn,
    OrderIn,
    OrderPageIn,
    PaymentIn,
    PaymentUrlIn,
    PlaceOrderOut,
    ProductIn,
    ProductPageIn,
    StatusUpdateOut,
    StockUpdateOut,
)
from pharmacart.config import Settings
from pharmacart.errors import (
    BackendRejected,
    NetworkError,
    RequestRejected,
    TransitionRejected,
)
from pharmacart.orders import (
    InventoryLogPage,
    Order,
    OrderItem,
    OrderPage,
    OrderQuery,
    OrderStatus,
    Payment,
    Product,
    ProductPage,
    StockAdjustment,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

Credentials = Callable[[], str | None]

DEFAULT_FALLBACK = "Request failed."


class StorefrontClient:
    """
    Thin typed wrapper over ``httpx.AsyncClient``.

    The bearer token is read from ``credentials`` on every request; the
    client never stores, refreshes or validates it.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        credentials: Credentials | None = None,
        api_prefix: str = "/api/v1",
    ) -> None:
        self._http = http
        self._credentials = credentials
        self._prefix = api_prefix.rstrip("/")

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        credentials: Credentials | None = None,
    ) -> StorefrontClient:
        http = httpx.AsyncClient(
            base_url=settings.backend_url,
            timeout=settings.request_timeout,
        )
        return cls(http, credentials=credentials, api_prefix=settings.api_prefix)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> StorefrontClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    # ═══════════════════════════════════════════════════════════════════════════
    # Orders
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_order(self, order_id: str) -> Order:
        data = await self._send("GET", f"/orders/{order_id}", fallback="Failed to load order.")
        return self._decode(OrderIn, data).to_domain()

    async def list_orders(self, query: OrderQuery | None = None) -> OrderPage:
        """Orders belonging to the authenticated customer."""
        params = (query or OrderQuery()).to_params()
        data = await self._send("GET", "/orders", params=params, fallback="Failed to load orders.")
        return self._decode(OrderPageIn, data).to_domain()

    async def list_all_orders(self, query: OrderQuery | None = None) -> OrderPage:
        """All orders (admin)."""
        params = (query or OrderQuery()).to_params()
        data = await self._send(
            "GET", "/admin/orders", params=params, fallback="Failed to load orders."
        )
        return self._decode(OrderPageIn, data).to_domain()

    async def place_order(
        self,
        items: tuple[OrderItem, ...],
        prescription: tuple[str, bytes, str] | None = None,
    ) -> Order:
        """
        Submit an order as multipart form data.

        ``prescription`` is an httpx file tuple ``(filename, content, content_type)``.
        """
        # (None, value) parts are plain form fields; keeps the body multipart
        # even without a file.
        files: dict[str, Any] = {
            "items": (None, PlaceOrderOut.from_domain(items).model_dump_json()),
        }
        if prescription is not None:
            files["prescription"] = prescription
        data = await self._send(
            "POST",
            "/orders",
            files=files,
            fallback="Failed to place order.",
        )
        return self._decode(OrderIn, data).to_domain()

    async def generate_payment_url(self, order_id: str) -> str:
        data = await self._send(
            "POST",
            f"/orders/{order_id}/payment",
            json={},
            fallback="Failed to generate payment URL.",
            rejected=TransitionRejected,
        )
        return self._decode(PaymentUrlIn, data).payment_url

    async def update_order_status(
        self,
        order_id: str,
        status: OrderStatus,
        notes: str | None = None,
    ) -> Order:
        body = StatusUpdateOut.from_domain(status, notes).model_dump(exclude_none=True)
        data = await self._send(
            "PUT",
            f"/admin/orders/{order_id}",
            json=body,
            fallback="Failed to update order status.",
            rejected=TransitionRejected,
        )
        return self._decode(OrderIn, data).to_domain()

    # ═══════════════════════════════════════════════════════════════════════════
    # Catalog
    # ═══════════════════════════════════════════════════════════════════════════

    async def list_products(
        self,
        search: str | None = None,
        params: dict[str, str | int] | None = None,
    ) -> ProductPage:
        """Public catalog. ``search`` is sent only when non-empty."""
        query: dict[str, str | int] = dict(params or {})
        if search:
            query["search"] = search
        data = await self._send(
            "GET", "/products", params=query, fallback="Failed to load products."
        )
        return self._decode(ProductPageIn, data).to_domain()

    async def get_product(self, product_id: str) -> Product:
        data = await self._send(
            "GET", f"/products/{product_id}", fallback="Failed to load product."
        )
        return self._decode(ProductIn, data).to_domain()

    # ═══════════════════════════════════════════════════════════════════════════
    # Payments
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_payment_by_order(self, order_id: str) -> Payment:
        data = await self._send(
            "GET", f"/payments/order/{order_id}", fallback="Failed to load payment."
        )
        return self._decode(PaymentIn, data).to_domain()

    # ═══════════════════════════════════════════════════════════════════════════
    # Inventory
    # ═══════════════════════════════════════════════════════════════════════════

    async def update_product_stock(self, product_id: str, adjustment: StockAdjustment) -> Product:
        data = await self._send(
            "PUT",
            f"/admin/products/{product_id}/stock",
            json=StockUpdateOut.from_domain(adjustment).model_dump(),
            fallback="Failed to update stock.",
        )
        return self._decode(ProductIn, data).to_domain()

    async def get_inventory_logs(self, product_id: str) -> InventoryLogPage:
        data = await self._send(
            "GET",
            f"/admin/products/{product_id}/logs",
            fallback="Failed to load inventory logs.",
        )
        return self._decode(InventoryLogPageIn, data).to_domain()

    # ═══════════════════════════════════════════════════════════════════════════
    # Transport
    # ═══════════════════════════════════════════════════════════════════════════

    def _headers(self) -> dict[str, str]:
        token = self._credentials() if self._credentials is not None else None
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    async def _send(
        self,
        method: str,
        path: str,
        *,
        fallback: str = DEFAULT_FALLBACK,
        rejected: type[BackendRejected] = RequestRejected,
        **kwargs: Any,
    ) -> Any:
        url = f"{self._prefix}{path}"
        try:
            response = await self._http.request(method, url, headers=self._headers(), **kwargs)
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise NetworkError(str(e)) from e
        return _handle_response(response, fallback=fallback, rejected=rejected)

    @staticmethod
    def _decode(model: type[M], data: Any) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning("Unexpected %s payload: %s", model.__name__, e)
            raise NetworkError(f"invalid {model.__name__} payload") from e


def _handle_response(
    response: httpx.Response,
    *,
    fallback: str,
    rejected: type[BackendRejected],
) -> Any:
    """Return decoded JSON for 2xx, raise ``rejected`` otherwise."""
    # JSONDecodeError and UnicodeDecodeError are both ValueError.
    if response.is_success:
        try:
            return response.json()
        except ValueError as e:
            logger.warning("Undecodable response from %s: %s", response.request.url, e)
            raise NetworkError("undecodable response body") from e

    reason = fallback
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            reason = message

    logger.info(
        "Backend rejected %s %s (%s): %s",
        response.request.method,
        response.request.url,
        response.status_code,
        reason,
    )
    raise rejected(reason, response.status_code)


__all__ = ("StorefrontClient", "Credentials")
