"""Application tests for order status updates, cancellation and placement."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder, is_guest_token
from storefront.order.pricing import OrderTotals
from storefront.order.status import CancelOrder, UpdateOrderStatus
from storefront.shared.errors import Forbidden, InvalidArgument, NotFound, Unavailable


def _place(user_id="user-1", session_id="cs_test_1", items=None):
    placed = current_domain.process(
        PlaceOrder(
            session_id=session_id,
            customer_email="shopper@example.com",
            user_id=user_id,
            items=json.dumps(items or [{"name": "Item", "price": 400, "quantity": 2}]),
        ),
        asynchronous=False,
    )
    return current_domain.repository_for(Order).get(placed["order_id"])


class TestPlaceOrder:
    def test_order_number_format(self):
        order = _place()
        assert order.order_number.startswith("NYH")
        assert len(order.order_number) == 15

    def test_shipping_charged_below_threshold(self):
        order = _place()
        assert order.subtotal == 800.0
        assert order.shipping_cost == 100.0
        assert order.tax == 144.0
        assert order.total_amount == 1044.0

    def test_same_session_returns_existing_order(self):
        first = _place()
        placed = current_domain.process(
            PlaceOrder(session_id="cs_test_1", customer_email="shopper@example.com", user_id="user-1", items="[]"),
            asynchronous=False,
        )
        assert placed == {"order_id": str(first.id), "order_number": first.order_number, "created": False}

    def test_empty_items_are_invalid(self):
        with pytest.raises(InvalidArgument):
            current_domain.process(
                PlaceOrder(session_id="cs_test_2", customer_email="a@b.com", user_id="user-1", items="[]"),
                asynchronous=False,
            )

    def test_guest_tokens(self):
        assert is_guest_token("guest-1700000000000")
        assert is_guest_token(None)
        assert not is_guest_token("user-1")


class TestUpdateOrderStatus:
    def test_update_persists(self):
        order = _place()
        current_domain.process(
            UpdateOrderStatus(order_id=str(order.id), status="shipped", tracking_number="AWB123"),
            asynchronous=False,
        )
        updated = current_domain.repository_for(Order).get(order.id)
        assert updated.status == "shipped"
        assert updated.tracking_number == "AWB123"

    def test_backward_transition_is_allowed(self):
        order = _place()
        current_domain.process(UpdateOrderStatus(order_id=str(order.id), status="delivered"), asynchronous=False)
        current_domain.process(UpdateOrderStatus(order_id=str(order.id), status="processing"), asynchronous=False)
        assert current_domain.repository_for(Order).get(order.id).status == "processing"

    def test_unknown_status(self):
        order = _place()
        with pytest.raises(InvalidArgument):
            current_domain.process(UpdateOrderStatus(order_id=str(order.id), status="lost"), asynchronous=False)

    def test_unknown_order(self):
        with pytest.raises(NotFound):
            current_domain.process(UpdateOrderStatus(order_id="missing", status="shipped"), asynchronous=False)


class TestCancelOrder:
    def test_owner_can_cancel(self):
        order = _place()
        current_domain.process(CancelOrder(order_id=str(order.id), actor_id="user-1"), asynchronous=False)
        cancelled = current_domain.repository_for(Order).get(order.id)
        assert cancelled.status == "cancelled"
        assert cancelled.cancelled_by == "customer"

    def test_admin_can_cancel(self):
        order = _place()
        current_domain.process(
            CancelOrder(order_id=str(order.id), actor_id="admin-1", actor_is_admin=True),
            asynchronous=False,
        )
        assert current_domain.repository_for(Order).get(order.id).cancelled_by == "admin"

    def test_other_user_cannot_cancel(self):
        order = _place()
        with pytest.raises(Forbidden):
            current_domain.process(CancelOrder(order_id=str(order.id), actor_id="user-2"), asynchronous=False)
        assert current_domain.repository_for(Order).get(order.id).status == "confirmed"

    def test_owner_cannot_cancel_delivered_order(self):
        order = _place()
        current_domain.process(UpdateOrderStatus(order_id=str(order.id), status="delivered"), asynchronous=False)

        with pytest.raises(Unavailable):
            current_domain.process(CancelOrder(order_id=str(order.id), actor_id="user-1"), asynchronous=False)

        delivered = current_domain.repository_for(Order).get(order.id)
        assert delivered.status == "delivered"
        assert delivered.cancelled_by is None

    def test_owner_cannot_cancel_twice(self):
        order = _place()
        current_domain.process(CancelOrder(order_id=str(order.id), actor_id="user-1"), asynchronous=False)

        with pytest.raises(Unavailable):
            current_domain.process(CancelOrder(order_id=str(order.id), actor_id="user-1"), asynchronous=False)

    def test_admin_can_still_cancel_delivered_order(self):
        order = _place()
        current_domain.process(UpdateOrderStatus(order_id=str(order.id), status="delivered"), asynchronous=False)
        current_domain.process(
            CancelOrder(order_id=str(order.id), actor_id="admin-1", actor_is_admin=True),
            asynchronous=False,
        )
        assert current_domain.repository_for(Order).get(order.id).status == "cancelled"


class TestTransactionIdUniqueness:
    def test_repeated_placement_keeps_one_order_per_session(self):
        for _ in range(3):
            _place(session_id="cs_test_repeat")

        orders = current_domain.repository_for(Order).all_orders()
        assert [order.transaction_id for order in orders] == ["cs_test_repeat"]

    def test_store_rejects_second_order_for_same_session(self):
        """Two verifications racing past the lookup must not both persist."""
        first = _place(session_id="cs_test_race")
        repo = current_domain.repository_for(Order)

        duplicate = Order.place_paid(
            user_id="user-1",
            order_number="NYH000000RACE01",
            items=[],
            totals=OrderTotals(subtotal=800.0, shipping_cost=100.0, tax=144.0, total=1044.0),
            transaction_id="cs_test_race",
            customer_name="shopper",
        )
        with pytest.raises(ValidationError):
            repo.add(duplicate)

        assert [str(order.id) for order in repo.all_orders()] == [str(first.id)]
