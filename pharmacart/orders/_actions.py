"""
OrderActions — lifecycle check, then one gated backend request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pharmacart.gate import ActionGate
from pharmacart.orders._lifecycle import OrderAction, check, validate_admin_status
from pharmacart.orders._types import Order, OrderStatus

if TYPE_CHECKING:
    from pharmacart.api import StorefrontClient

logger = logging.getLogger(__name__)


class OrderActions:
    """
    Customer and admin actions on a single order.

    Example:
        actions = OrderActions(client, gate)
        url = await actions.generate_payment_url(order)
        order = await actions.update_status(order, "shipped", notes="UPS 1Z...")
    """

    def __init__(self, client: StorefrontClient, gate: ActionGate) -> None:
        self._client = client
        self._gate = gate

    async def generate_payment_url(self, order: Order) -> str:
        """
        Raises:
            PaymentNotApplicable: order is not awaiting payment
            TransitionRejected: backend refused
            NetworkError: transport failure
        """
        check(order, OrderAction.REQUEST_PAYMENT)
        return await self._gate.run(
            f"payment:{order.order_id}",
            lambda: self._client.generate_payment_url(order.order_id),
        )

    async def cancel(self, order: Order) -> Order:
        """Customer-initiated cancellation."""
        target = check(order, OrderAction.CANCEL)
        return await self._gate.run(
            f"status:{order.order_id}",
            lambda: self._client.update_order_status(order.order_id, target),
        )

    async def update_status(
        self,
        order: Order,
        new_status: str | OrderStatus,
        notes: str | None = None,
    ) -> Order:
        """
        Admin status change. Legality beyond the allowed targets is the
        backend's call; its refusal surfaces as TransitionRejected.

        Raises:
            ValueError: ``new_status`` is not an admin-settable status
        """
        target = validate_admin_status(new_status)
        if target is order.status:
            logger.debug("Order %s already %s; nothing to send", order.order_id, target.value)
            return order
        return await self._gate.run(
            f"status:{order.order_id}",
            lambda: self._client.update_order_status(order.order_id, target, notes),
        )


__all__ = ("OrderActions",)
