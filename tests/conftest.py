"""Shared fixtures for pharmacart tests."""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from typing import Any

import httpx
import pytest

from pharmacart import cart as C
from pharmacart import orders as O
from pharmacart.api import StorefrontClient
from pharmacart.gate import ActionGate

Handler = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """Route table for httpx.MockTransport that records every request."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    def on(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Any = None,
        content: bytes | None = None,
        handler: Handler | None = None,
    ) -> None:
        if handler is None:
            def handler(request: httpx.Request) -> httpx.Response:
                if content is not None:
                    return httpx.Response(status, content=content)
                return httpx.Response(status, json=json)

        self.routes[(method, f"/api/v1{path}")] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"message": "Not found"})
        return handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def order_payload(
    order_id: Any = 1,
    status: str = "payment_pending",
    payment_status: str | None = "payment_pending",
    **extra: Any,
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "order_id": order_id,
        "customer_id": 7,
        "items": [
            {"product_id": 3, "product_name": "Ibuprofen 200mg", "quantity": 2, "price": 4.5},
        ],
        "subtotal": "9.00",
        "shipping_cost": "10.00",
        "status": status,
        "created_at": "2024-05-01T10:00:00",
    }
    if payment_status is not None:
        data["payment_status"] = payment_status
    data.update(extra)
    return data


@pytest.fixture
def make_item() -> Callable[..., C.CartItem]:
    def make(
        id: str = "a",
        price: str = "10",
        quantity: int = 1,
        name: str | None = None,
        rx: bool = False,
    ) -> C.CartItem:
        return C.CartItem(
            id=id,
            name=name or f"Item {id}",
            price=Decimal(price),
            quantity=quantity,
            requires_prescription=rx,
        )

    return make


@pytest.fixture
def make_order() -> Callable[..., O.Order]:
    def make(
        status: O.OrderStatus = O.OrderStatus.PAYMENT_PENDING,
        payment_status: O.PaymentStatus = O.PaymentStatus.PAYMENT_PENDING,
        order_id: str = "1",
    ) -> O.Order:
        return O.Order(
            order_id=order_id,
            items=(O.OrderItem("3", "Ibuprofen 200mg", 2, Decimal("4.50")),),
            status=status,
            payment_status=payment_status,
            subtotal=Decimal("9.00"),
            shipping_cost=Decimal("10.00"),
        )

    return make


@pytest.fixture
def storage() -> C.MemoryStorage:
    return C.MemoryStorage()


@pytest.fixture
def store(storage: C.MemoryStorage) -> C.CartStore:
    return C.CartStore(C.KeyValuePersistence(storage))


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def token() -> dict[str, str | None]:
    """Mutable credential slot read by the client on every request."""
    return {"value": "tok-123"}


@pytest.fixture
def client(backend: FakeBackend, token: dict[str, str | None]) -> StorefrontClient:
    http = httpx.AsyncClient(
        transport=httpx.MockTransport(backend),
        base_url="http://backend.test",
    )
    return StorefrontClient(http, credentials=lambda: token["value"])


@pytest.fixture
def gate() -> ActionGate:
    return ActionGate()
