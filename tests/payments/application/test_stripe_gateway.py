from unittest.mock import MagicMock

import pytest
import stripe

from storefront.payments.gateway import build_gateway
from storefront.payments.gateway.fake_adapter import FakeCheckoutGateway
from storefront.payments.gateway.port import LineItem, PaymentGatewayError
from storefront.payments.gateway.stripe_adapter import StripeGateway
from storefront.settings import Settings


@pytest.fixture()
def client():
    return MagicMock(spec_set=["v1"])


@pytest.fixture()
def sessions(client):
    return client.v1.checkout.sessions


@pytest.fixture()
def gateway(client):
    return StripeGateway(api_key="sk_test_123", client=client)


def _create(gateway, **overrides):
    params = {
        "line_items": [
            LineItem(name="Knitted Bunny", unit_amount=49900, quantity=2, currency="inr", image="https://i/b.png")
        ],
        "customer_email": "shopper@example.com",
        "success_url": "http://localhost:3000/checkout/success?session_id={CHECKOUT_SESSION_ID}",
        "cancel_url": "http://localhost:3000/cart",
        "metadata": {"cartItems_0": "[]", "cartItemsCount": "1"},
    }
    params.update(overrides)
    return gateway.create_checkout_session(**params)


class TestClientOwnership:
    def test_gateways_own_separate_clients(self):
        retries, http_client = stripe.max_network_retries, stripe.default_http_client

        first = StripeGateway(api_key="sk_test_one")
        second = StripeGateway(api_key="sk_test_two", timeout=5)

        assert isinstance(first.client, stripe.StripeClient)
        assert first.client is not second.client
        assert stripe.max_network_retries == retries
        assert stripe.default_http_client is http_client


class TestCreateCheckoutSession:
    def test_builds_hosted_payment_session(self, gateway, sessions):
        sessions.create.return_value = MagicMock(id="cs_test_1", url="https://checkout.stripe.com/c/cs_test_1")

        session = _create(gateway, client_reference_id="user-1")

        assert session.id == "cs_test_1"
        assert session.url == "https://checkout.stripe.com/c/cs_test_1"
        params = sessions.create.call_args.kwargs["params"]
        assert params["mode"] == "payment"
        assert params["client_reference_id"] == "user-1"
        line = params["line_items"][0]
        assert line["quantity"] == 2
        assert line["price_data"]["unit_amount"] == 49900
        assert line["price_data"]["product_data"] == {"name": "Knitted Bunny", "images": ["https://i/b.png"]}

    def test_guest_session_has_no_client_reference(self, gateway, sessions):
        sessions.create.return_value = MagicMock(id="cs_test_2", url="https://checkout.stripe.com/c/cs_test_2")
        _create(gateway)
        assert "client_reference_id" not in sessions.create.call_args.kwargs["params"]

    def test_stripe_failure_becomes_gateway_error(self, gateway, sessions):
        sessions.create.side_effect = stripe.StripeError("card network down")
        with pytest.raises(PaymentGatewayError, match="card network down"):
            _create(gateway)


class TestRetrieveSession:
    def test_reads_status_and_metadata(self, gateway, sessions):
        sessions.retrieve.return_value = stripe.checkout.Session.construct_from(
            {
                "id": "cs_test_1",
                "payment_status": "paid",
                "amount_total": 118000,
                "customer_email": None,
                "customer_details": {"email": "shopper@example.com"},
                "metadata": {"cartItemsCount": "1"},
            },
            "sk_test_123",
        )

        state = gateway.retrieve_session("cs_test_1")

        sessions.retrieve.assert_called_once_with("cs_test_1")
        assert state.is_paid
        assert state.amount_total == 118000
        assert state.customer_email == "shopper@example.com"
        assert state.metadata == {"cartItemsCount": "1"}

    def test_unknown_session_becomes_gateway_error(self, gateway, sessions):
        sessions.retrieve.side_effect = stripe.StripeError("No such session")
        with pytest.raises(PaymentGatewayError):
            gateway.retrieve_session("cs_missing")


class TestBuildGateway:
    def test_stripe_when_key_configured(self):
        assert isinstance(build_gateway(Settings(stripe_secret_key="sk_test_123")), StripeGateway)

    def test_fake_otherwise(self):
        assert isinstance(build_gateway(Settings()), FakeCheckoutGateway)
