"""Maps a checkout snapshot onto what the page renders.

The landing page stays underneath the booking modal and the loading overlay;
the success page is only ever shown on its own.
"""

from event_checkout.checkout.schemas import CheckoutSnapshot, CheckoutState, CheckoutView, ViewPage
from event_checkout.gateway.schemas import GatewayReadiness

def select_view(snapshot: CheckoutSnapshot) -> CheckoutView:
    in_progress = snapshot.state == CheckoutState.PAYMENT_IN_PROGRESS
    busy = in_progress or snapshot.gateway_readiness != GatewayReadiness.READY

    return CheckoutView(
        page=ViewPage.SUCCESS if snapshot.state == CheckoutState.SUCCESS else ViewPage.LANDING,
        show_booking_modal=snapshot.state in (CheckoutState.MODAL_OPEN, CheckoutState.PAYMENT_IN_PROGRESS),
        show_loading_overlay=in_progress,
        pay_button_label="Loading..." if busy else "Pay Now",
        pay_button_enabled=snapshot.can_pay,
        total_label=f"Total: {snapshot.quote.display_label}",
        alert=snapshot.message
    )
