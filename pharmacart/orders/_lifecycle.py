"""
Order lifecycle — one transition table, one lookup.

    (status, action) ─▶ TRANSITIONS ─▶ next status
                             │
                             └─ missing ─▶ ActionNotOffered / PaymentNotApplicable

Customer actions and the admin status dropdown are both derived from the
table, so nothing else compares status strings.
"""

from __future__ import annotations

from enum import Enum

from pharmacart.errors import ActionNotOffered, PaymentNotApplicable
from pharmacart.orders._types import (
    ADMIN_STATUSES,
    Order,
    OrderStatus,
    PaymentStatus,
)

# ═══════════════════════════════════════════════════════════════════════════════
# Actions
# ═══════════════════════════════════════════════════════════════════════════════


class Actor(Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


class OrderAction(Enum):
    REQUEST_PAYMENT = "request_payment"
    CANCEL = "cancel"
    # Admin dropdown targets
    APPROVE = "approve"
    SHIP = "ship"
    COMPLETE = "complete"
    ADMIN_CANCEL = "admin_cancel"

    @property
    def actor(self) -> Actor:
        if self in (OrderAction.REQUEST_PAYMENT, OrderAction.CANCEL):
            return Actor.CUSTOMER
        return Actor.ADMIN


ADMIN_ACTIONS: dict[OrderStatus, OrderAction] = {
    OrderStatus.APPROVED: OrderAction.APPROVE,
    OrderStatus.SHIPPED: OrderAction.SHIP,
    OrderStatus.COMPLETED: OrderAction.COMPLETE,
    OrderStatus.CANCELLED: OrderAction.ADMIN_CANCEL,
}


# ═══════════════════════════════════════════════════════════════════════════════
# Transition Table
# ═══════════════════════════════════════════════════════════════════════════════


def _build_transitions() -> dict[tuple[OrderStatus, OrderAction], OrderStatus]:
    table: dict[tuple[OrderStatus, OrderAction], OrderStatus] = {
        # Payment link does not move status; the backend does that later.
        (OrderStatus.PAYMENT_PENDING, OrderAction.REQUEST_PAYMENT): OrderStatus.PAYMENT_PENDING,
        (OrderStatus.PENDING, OrderAction.CANCEL): OrderStatus.CANCELLED,
        (OrderStatus.PROCESSING, OrderAction.CANCEL): OrderStatus.CANCELLED,
    }
    for status in OrderStatus:
        if status.is_terminal:
            continue
        for target in ADMIN_STATUSES:
            if target is not status:
                table[(status, ADMIN_ACTIONS[target])] = target
    return table


TRANSITIONS: dict[tuple[OrderStatus, OrderAction], OrderStatus] = _build_transitions()


# ═══════════════════════════════════════════════════════════════════════════════
# Queries
# ═══════════════════════════════════════════════════════════════════════════════


def check(order: Order, action: OrderAction) -> OrderStatus:
    """
    Return the status ``action`` leads to from ``order``.

    Raises:
        PaymentNotApplicable: REQUEST_PAYMENT on an order that cannot be paid
        ActionNotOffered: any other action not legal from the current status
    """
    if action is OrderAction.REQUEST_PAYMENT:
        if order.payment_status is PaymentStatus.COMPLETE:
            raise PaymentNotApplicable(
                action.value, order.status.value, order.payment_status.value
            )
        target = TRANSITIONS.get((order.status, action))
        if target is None:
            raise PaymentNotApplicable(
                action.value, order.status.value, order.payment_status.value
            )
        return target

    target = TRANSITIONS.get((order.status, action))
    if target is None:
        raise ActionNotOffered(action.value, order.status.value)
    return target


def is_offered(order: Order, action: OrderAction) -> bool:
    try:
        check(order, action)
    except ActionNotOffered:
        return False
    return True


def can_generate_payment(order: Order) -> bool:
    return is_offered(order, OrderAction.REQUEST_PAYMENT)


def can_cancel(order: Order) -> bool:
    return is_offered(order, OrderAction.CANCEL)


def available_actions(order: Order, actor: Actor | None = None) -> tuple[OrderAction, ...]:
    """Actions legal from ``order``'s state, optionally narrowed to one actor."""
    return tuple(
        action
        for action in OrderAction
        if (actor is None or action.actor is actor) and is_offered(order, action)
    )


def admin_status_options(order: Order) -> tuple[OrderStatus, ...]:
    """Statuses the admin dropdown offers; empty for terminal orders."""
    return tuple(
        target for target in ADMIN_STATUSES if is_offered(order, ADMIN_ACTIONS[target])
    )


def validate_admin_status(value: str | OrderStatus) -> OrderStatus:
    """
    Parse an admin-chosen status.

    Raises:
        ValueError: unknown status, or one the admin may not set
    """
    status = OrderStatus.parse(value)
    if status not in ADMIN_STATUSES:
        raise ValueError(f"Admins cannot set status {status.value!r}")
    return status


__all__ = (
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
)
