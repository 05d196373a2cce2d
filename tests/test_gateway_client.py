import warnings
from unittest.mock import Mock

from event_checkout.bookings.form_service import BookingForm
from event_checkout.bookings.schemas import BuyerUpdateRequest
from event_checkout.gateway.client import InlineCheckoutGateway
from event_checkout.gateway.schemas import PaymentSetupConfig


def make_config(ref, callback=None, on_close=None):
    return PaymentSetupConfig(
        key="pk_test_123",
        email="ama@example.com",
        amount=30000,
        ref=ref,
        currency="ghs",
        callback=callback or Mock(),
        on_close=on_close or Mock()
    )


class TestInlineCheckoutGateway:
    def test_launch_payload_omits_callbacks(self):
        handler = InlineCheckoutGateway().setup(make_config("100"))

        launch = handler.launch

        assert launch.ref == "100"
        assert launch.amount == 30000
        assert launch.currency == "GHS"
        assert not hasattr(launch, "callback")

    def test_complete_and_close_relay_to_callbacks(self):
        callback, on_close = Mock(), Mock()
        handler = InlineCheckoutGateway().setup(make_config("100", callback, on_close))

        handler.complete({"reference": "R1"})
        handler.close()

        callback.assert_called_once_with({"reference": "R1"})
        on_close.assert_called_once_with()

    def test_keeps_only_current_and_previous_attempts(self):
        gateway = InlineCheckoutGateway()
        first = gateway.setup(make_config("100"))
        second = gateway.setup(make_config("101"))
        third = gateway.setup(make_config("102"))

        assert gateway.handler_for("100") is None
        assert gateway.handler_for("101") is second
        assert gateway.handler_for("102") is third
        assert gateway.active_handler is third
        assert first is not second

    def test_unknown_ref(self):
        assert InlineCheckoutGateway().handler_for("missing") is None


def test_model_updates_emit_no_deprecation_warnings():
    form = BookingForm()
    handler = InlineCheckoutGateway().setup(make_config("100"))

    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        form.update_field("name", "Ama Boateng")
        form.set_ticket_type("vip")
        form.apply_update(BuyerUpdateRequest(quantity="3"))
        launch = handler.launch

    assert form.details.name == "Ama Boateng"
    assert form.details.quantity == "3"
    assert launch.ref == "100"
