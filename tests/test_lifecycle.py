"""Tests for the order lifecycle table and OrderActions."""

import asyncio
import json

import pytest

from conftest import order_payload
from pharmacart import orders as O
from pharmacart.errors import (
    ActionNotOffered,
    PaymentNotApplicable,
    TransitionRejected,
)

S = O.OrderStatus
PS = O.PaymentStatus


class TestPaymentGating:
    """Payment links only for payment_pending orders not yet paid."""

    def test_payment_pending_offered(self, make_order):
        """payment_pending with payment still pending can pay."""
        order = make_order(S.PAYMENT_PENDING, PS.PAYMENT_PENDING)

        assert O.can_generate_payment(order)
        assert O.check(order, O.OrderAction.REQUEST_PAYMENT) is S.PAYMENT_PENDING

    def test_failed_payment_can_retry(self, make_order):
        """A failed payment attempt does not block a new link."""
        assert O.can_generate_payment(make_order(S.PAYMENT_PENDING, PS.FAILED))

    def test_shipped_not_applicable(self, make_order):
        """A shipped order cannot be paid."""
        with pytest.raises(PaymentNotApplicable) as exc:
            O.check(make_order(S.SHIPPED), O.OrderAction.REQUEST_PAYMENT)

        assert exc.value.message == "Payment processing not available for current order status."

    def test_complete_payment_not_applicable(self, make_order):
        """Already-paid orders cannot be paid again."""
        order = make_order(S.PAYMENT_PENDING, PS.COMPLETE)

        assert not O.can_generate_payment(order)
        with pytest.raises(PaymentNotApplicable):
            O.check(order, O.OrderAction.REQUEST_PAYMENT)


class TestCancel:
    """Customers may cancel pending or processing orders only."""

    @pytest.mark.parametrize("status", [S.PENDING, S.PROCESSING])
    def test_cancellable(self, make_order, status):
        """pending and processing offer cancel."""
        assert O.check(make_order(status), O.OrderAction.CANCEL) is S.CANCELLED

    @pytest.mark.parametrize("status", [S.SHIPPED, S.PAYMENT_PENDING, S.APPROVED, S.COMPLETED])
    def test_not_cancellable(self, make_order, status):
        """Other states refuse cancel."""
        with pytest.raises(ActionNotOffered) as exc:
            O.check(make_order(status), O.OrderAction.CANCEL)

        assert exc.value.status == status.value
        assert not isinstance(exc.value, PaymentNotApplicable)


class TestTerminal:
    """completed and cancelled offer nothing."""

    @pytest.mark.parametrize("status", [S.COMPLETED, S.CANCELLED])
    def test_no_actions(self, make_order, status):
        """Neither customer actions nor admin options."""
        order = make_order(status)

        assert O.available_actions(order) == ()
        assert O.admin_status_options(order) == ()
        assert status.is_terminal

    def test_no_outgoing_edges(self):
        """The table has no rows leaving a terminal state."""
        assert not [key for key in O.TRANSITIONS if key[0] in O.TERMINAL_STATUSES]
        assert not S.SHIPPED.is_terminal


class TestAdminOptions:
    """Admin dropdown derives from the table."""

    def test_options_exclude_current(self, make_order):
        """The current status is not offered again."""
        options = O.admin_status_options(make_order(S.APPROVED))

        assert options == (S.SHIPPED, S.COMPLETED, S.CANCELLED)

    def test_customer_actions_filtered(self, make_order):
        """Actor narrows the action list."""
        actions = O.available_actions(make_order(S.PROCESSING), O.Actor.CUSTOMER)

        assert actions == (O.OrderAction.CANCEL,)

    @pytest.mark.parametrize("value", ["paid", "processing", "payment_pending", "bogus"])
    def test_validate_admin_status_rejects(self, value):
        """Only approved/shipped/completed/cancelled are settable."""
        with pytest.raises(ValueError):
            O.validate_admin_status(value)

    def test_validate_admin_status_case_insensitive(self):
        """Status strings are parsed case-insensitively."""
        assert O.validate_admin_status("Shipped") is S.SHIPPED


class TestOrderActions:
    """OrderActions checks locally, then sends one gated request."""

    def test_payment_url(self, client, backend, gate, make_order):
        """A payable order returns the backend's URL."""
        backend.on("POST", "/orders/1/payment", json={"payment_url": "https://pay.test/abc"})

        url = asyncio.run(O.OrderActions(client, gate).generate_payment_url(make_order()))

        assert url == "https://pay.test/abc"
        assert backend.last.headers["Authorization"] == "Bearer tok-123"

    def test_payment_url_refused_locally(self, client, backend, gate, make_order):
        """A shipped order never reaches the backend."""
        with pytest.raises(PaymentNotApplicable):
            asyncio.run(O.OrderActions(client, gate).generate_payment_url(make_order(S.SHIPPED)))

        assert backend.requests == []

    def test_update_status_sends_body(self, client, backend, gate, make_order):
        """Admin update sends status and notes and returns the new order."""
        backend.on("PUT", "/admin/orders/1", json=order_payload(status="shipped"))

        updated = asyncio.run(
            O.OrderActions(client, gate).update_status(make_order(S.APPROVED), "shipped", "UPS")
        )

        assert updated.status is S.SHIPPED
        assert json.loads(backend.last.content) == {"status": "shipped", "notes": "UPS"}

    def test_update_status_omits_missing_notes(self, client, backend, gate, make_order):
        """notes is left out when not given."""
        backend.on("PUT", "/admin/orders/1", json=order_payload(status="approved"))

        asyncio.run(O.OrderActions(client, gate).update_status(make_order(S.PAID), S.APPROVED))

        assert json.loads(backend.last.content) == {"status": "approved"}

    def test_same_status_is_noop(self, client, backend, gate, make_order):
        """Choosing the current status sends nothing."""
        order = make_order(S.SHIPPED)

        result = asyncio.run(O.OrderActions(client, gate).update_status(order, "shipped"))

        assert result is order
        assert backend.requests == []

    def test_invalid_target(self, client, backend, gate, make_order):
        """Non-admin statuses are refused before sending."""
        with pytest.raises(ValueError):
            asyncio.run(O.OrderActions(client, gate).update_status(make_order(), "paid"))

        assert backend.requests == []

    def test_backend_rejection_verbatim(self, client, backend, gate, make_order):
        """Illegal transitions come back as TransitionRejected with the backend message."""
        backend.on(
            "PUT",
            "/admin/orders/1",
            status=400,
            json={"message": "Cannot move completed order to approved"},
        )

        with pytest.raises(TransitionRejected) as exc:
            asyncio.run(
                O.OrderActions(client, gate).update_status(make_order(S.COMPLETED), "approved")
            )

        assert exc.value.message == "Cannot move completed order to approved"

    def test_rejection_fallback(self, client, backend, gate, make_order):
        """Missing message falls back to the per-call text."""
        backend.on("PUT", "/admin/orders/1", status=500, json={"detail": "boom"})

        with pytest.raises(TransitionRejected) as exc:
            asyncio.run(O.OrderActions(client, gate).update_status(make_order(), "approved"))

        assert exc.value.message == "Failed to update order status."

    def test_customer_cancel(self, client, backend, gate, make_order):
        """Cancel sends the cancelled status for a processing order."""
        backend.on("PUT", "/admin/orders/1", json=order_payload(status="cancelled"))

        updated = asyncio.run(O.OrderActions(client, gate).cancel(make_order(S.PROCESSING)))

        assert updated.status is S.CANCELLED
        assert json.loads(backend.last.content) == {"status": "cancelled"}
