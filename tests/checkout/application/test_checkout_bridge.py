"""Application tests for hosted checkout: session creation and payment verification."""

from unittest.mock import patch

import pytest
from protean import current_domain
from storefront.cart.cart import Cart
from storefront.cart.items import AddToCart
from storefront.checkout.bridge import CheckoutBridge, resolve_email
from storefront.customer.customer import Customer
from storefront.identity.principal import Principal
from storefront.order.order import Order, OrderStatus, PaymentStatus
from storefront.shared.errors import InvalidArgument, UpstreamError

CART = [{"name": "Item", "price": 1000, "quantity": 2}]


@pytest.fixture()
def bridge(gateway, settings):
    return CheckoutBridge(gateway, settings)


def _orders():
    return current_domain.repository_for(Order)._dao.query.all().items


class TestResolveEmail:
    def test_principal_email_wins(self):
        principal = Principal(id="u1", email="member@example.com")
        assert resolve_email(principal, "guest@example.com", "other@example.com") == "member@example.com"

    def test_guest_email_before_generic_email(self):
        assert resolve_email(None, "guest@example.com", "other@example.com") == "guest@example.com"

    def test_blank_values_are_skipped(self):
        assert resolve_email(None, "   ", "other@example.com") == "other@example.com"

    def test_nothing_usable(self):
        assert resolve_email(None, None, "") is None


class TestCreateSession:
    def test_creates_session_without_local_state(self, bridge, gateway):
        started = bridge.create_session(CART, email="a@b.com")

        assert started.url.endswith(started.session_id)
        assert started.customer_email == "a@b.com"
        assert started.user_id.startswith("guest-")
        assert _orders() == []

        session = gateway.sessions[started.session_id]
        assert session["metadata"]["customer_email"] == "a@b.com"
        assert session["metadata"]["cart_0"]

    def test_line_items_use_minor_units(self, bridge, gateway):
        started = bridge.create_session([{"name": "Bunny", "price": 19.99, "quantity": 3}], email="a@b.com")
        line = gateway.sessions[started.session_id]["line_items"][0]
        assert line.unit_amount == 1999
        assert line.quantity == 3
        assert line.currency == "inr"

    def test_success_url_carries_session_placeholder(self, bridge, gateway):
        started = bridge.create_session(CART, email="a@b.com")
        assert gateway.sessions[started.session_id]["success_url"].endswith(f"/success?session_id={started.session_id}")

    def test_authenticated_user_id_is_recorded(self, bridge, gateway):
        principal = Principal(id="user-1", email="member@example.com")
        started = bridge.create_session(CART, principal=principal)
        assert started.user_id == "user-1"
        assert gateway.sessions[started.session_id]["customer_email"] == "member@example.com"

    def test_empty_cart(self, bridge):
        with pytest.raises(InvalidArgument) as exc:
            bridge.create_session([], email="a@b.com")
        assert exc.value.messages == {"cartItems": ["Cart is empty"]}

    def test_email_is_required(self, bridge):
        with pytest.raises(InvalidArgument) as exc:
            bridge.create_session(CART)
        assert exc.value.messages == {"email": ["Email is required for checkout"]}

    def test_processor_failure_is_upstream_error(self, bridge, gateway):
        gateway.configure(should_succeed=False)
        with pytest.raises(UpstreamError):
            bridge.create_session(CART, email="a@b.com")


class TestVerifyPayment:
    def test_session_id_is_required(self, bridge):
        with pytest.raises(InvalidArgument):
            bridge.verify_payment(None)

    def test_unpaid_session_creates_nothing(self, bridge):
        started = bridge.create_session(CART, email="a@b.com")
        result = bridge.verify_payment(started.session_id)
        assert result.paid is False
        assert result.payment_status == "unpaid"
        assert _orders() == []

    def test_paid_session_places_confirmed_order(self, bridge, gateway):
        started = bridge.create_session(CART, email="a@b.com")
        gateway.mark_paid(started.session_id)

        result = bridge.verify_payment(started.session_id)
        assert result.paid is True
        assert result.order_created is True
        assert result.amount == 200000

        order = current_domain.repository_for(Order).get(result.order_id)
        assert order.status == OrderStatus.CONFIRMED.value
        assert order.payment_status == PaymentStatus.COMPLETED.value
        assert order.transaction_id == started.session_id
        assert order.subtotal == 2000.0
        assert order.shipping_cost == 0.0
        assert order.tax == 360.0
        assert order.total_amount == 2360.0
        assert order.shipping_address.is_placeholder
        assert all(item.product_id is None for item in order.items)

    def test_verification_is_idempotent(self, bridge, gateway):
        started = bridge.create_session(CART, email="a@b.com")
        gateway.mark_paid(started.session_id)

        first = bridge.verify_payment(started.session_id)
        second = bridge.verify_payment(started.session_id)

        assert first.order_id == second.order_id
        assert first.order_number == second.order_number
        assert second.order_created is False
        assert len(_orders()) == 1

    def test_guest_purchase_creates_guest_customer(self, bridge, gateway):
        started = bridge.create_session(CART, guest_email="Guest@Example.com")
        gateway.mark_paid(started.session_id)
        result = bridge.verify_payment(started.session_id)

        customer = current_domain.repository_for(Customer).find_by_email("guest@example.com")
        assert customer.is_guest is True
        order = current_domain.repository_for(Order).get(result.order_id)
        assert str(order.user_id) == str(customer.id)

    def test_member_purchase_clears_their_cart(self, bridge, gateway, product):
        current_domain.process(AddToCart(user_id="user-1", product_id=str(product.id), quantity=1), asynchronous=False)
        principal = Principal(id="user-1", email="member@example.com")

        items = [{"name": product.name, "price": product.price, "quantity": 1}]
        started = bridge.create_session(items, principal=principal)
        gateway.mark_paid(started.session_id)
        result = bridge.verify_payment(started.session_id)

        order = current_domain.repository_for(Order).get(result.order_id)
        assert str(order.user_id) == "user-1"
        assert current_domain.repository_for(Cart).for_user("user-1").item_count == 0

    def test_processor_failure_leaves_no_order(self, bridge, gateway):
        started = bridge.create_session(CART, email="a@b.com")
        gateway.mark_paid(started.session_id)
        gateway.configure(should_succeed=False)

        with pytest.raises(UpstreamError):
            bridge.verify_payment(started.session_id)
        assert _orders() == []

    def test_unknown_session_is_upstream_error(self, bridge):
        with pytest.raises(UpstreamError):
            bridge.verify_payment("cs_test_missing")

    def test_verification_racing_an_earlier_one_returns_its_order(self, bridge, gateway):
        started = bridge.create_session(CART, email="a@b.com")
        gateway.mark_paid(started.session_id)
        first = bridge.verify_payment(started.session_id)
        stored = current_domain.repository_for(Order).get(first.order_id)

        # The second call misses the stored order on lookup, as a concurrent poll would
        with patch(
            "storefront.order.order.OrderRepository.find_by_transaction_id",
            side_effect=[None, stored],
        ):
            second = bridge.verify_payment(started.session_id)

        assert second.order_id == first.order_id
        assert second.order_created is False
        assert len(_orders()) == 1
