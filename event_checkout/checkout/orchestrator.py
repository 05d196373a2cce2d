from typing import Any, Callable, Dict, Optional, Tuple
import logging
import threading
import time

from event_checkout.config import settings
from event_checkout.exceptions import (
    CheckoutError, CheckoutValidationError, GatewayNotReadyError,
    InvalidTransitionError, PaymentLaunchError
)
from event_checkout.bookings.form_service import BookingForm
from event_checkout.bookings.schemas import BuyerDetails, BuyerUpdateRequest
from event_checkout.checkout.schemas import CheckoutState, CheckoutSnapshot, PaymentAttempt
from event_checkout.gateway.client import PaymentGateway, PaymentHandler
from event_checkout.gateway.loader import ReadinessSignal
from event_checkout.gateway.schemas import PaymentSetupConfig
from event_checkout.pricing.service import PricingService

logger = logging.getLogger(__name__)

class AttemptReferenceGenerator:
    """Millisecond-timestamp references, bumped so no two are equal"""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> str:
        with self._lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return str(candidate)

_default_references = AttemptReferenceGenerator()

class CheckoutOrchestrator:
    """Drives landing -> modal -> payment -> success for one page session.

    Gateway callbacks are bound to the attempt that registered them. Only a
    callback for the active attempt, delivered while payment is in progress,
    has any effect; anything else is logged and ignored.
    """

    def __init__(
        self,
        form: BookingForm,
        pricing: PricingService,
        readiness: ReadinessSignal,
        gateway: PaymentGateway,
        public_key: Optional[str] = None,
        currency: Optional[str] = None,
        references: Optional[AttemptReferenceGenerator] = None
    ):
        self.form = form
        self.pricing = pricing
        self.readiness = readiness
        self.gateway = gateway
        self.public_key = public_key or settings.PAYSTACK_PUBLIC_KEY
        self.currency = currency or pricing.currency
        self.references = references or _default_references

        self.state = CheckoutState.LANDING
        self.active_attempt: Optional[PaymentAttempt] = None
        self.active_handler: Optional[PaymentHandler] = None
        self.confirmation_reference: Optional[str] = None
        self.message: Optional[str] = None

    # Page navigation

    def open_booking(self) -> CheckoutState:
        """Book Now: show the booking modal"""
        if self.state == CheckoutState.MODAL_OPEN:
            return self.state
        if self.state != CheckoutState.LANDING:
            raise self._reject(InvalidTransitionError("open the booking form", self.state.value))
        return self._transition(CheckoutState.MODAL_OPEN)

    def close_booking(self) -> CheckoutState:
        """Close the modal; buyer details are kept for next time"""
        if self.state == CheckoutState.LANDING:
            return self.state
        if self.state != CheckoutState.MODAL_OPEN:
            raise self._reject(InvalidTransitionError("close the booking form", self.state.value))
        return self._transition(CheckoutState.LANDING)

    def return_to_landing(self) -> CheckoutState:
        """Leave the success page with a fresh form"""
        if self.state == CheckoutState.LANDING:
            return self.state
        if self.state != CheckoutState.SUCCESS:
            raise self._reject(InvalidTransitionError("return to the main page", self.state.value))
        self.form.reset()
        self.confirmation_reference = None
        return self._transition(CheckoutState.LANDING)

    # Buyer input

    def update_buyer(self, update: BuyerUpdateRequest) -> BuyerDetails:
        if self.state in (CheckoutState.PAYMENT_IN_PROGRESS, CheckoutState.SUCCESS):
            raise self._reject(InvalidTransitionError("edit booking details", self.state.value))
        try:
            return self.form.apply_update(update)
        except CheckoutError as e:
            raise self._reject(e)

    def can_pay(self) -> bool:
        """Whether the Pay control is enabled"""
        return (
            self.state == CheckoutState.MODAL_OPEN
            and self.form.is_submittable()
            and self.readiness.is_ready
        )

    # Payment

    def request_payment(self) -> PaymentAttempt:
        """Pay: start one gateway attempt, or return the one already running"""
        attempt, _ = self.begin_payment()
        return attempt

    def begin_payment(self) -> Tuple[PaymentAttempt, bool]:
        """Like request_payment, also reporting whether this call launched the attempt"""
        if self.state == CheckoutState.PAYMENT_IN_PROGRESS:
            logger.info("Payment %s already in progress; ignoring repeat request",
                        self.active_attempt.reference_id)
            return self.active_attempt, False

        if self.state != CheckoutState.MODAL_OPEN:
            raise self._reject(InvalidTransitionError("start a payment", self.state.value))

        field_errors = self.form.validation_errors()
        if field_errors:
            raise self._reject(CheckoutValidationError(field_errors=field_errors))

        if not self.readiness.is_ready:
            logger.warning("Payment requested while gateway is %s", self.readiness.current.value)
            raise self._reject(GatewayNotReadyError())

        details = self.form.details
        attempt = PaymentAttempt(
            reference_id=self.references.next(),
            amount_minor_units=self.pricing.calculate_total_amount(details.ticket_type, details.quantity),
            currency_code=self.currency
        )
        self.active_attempt = attempt
        self._transition(CheckoutState.PAYMENT_IN_PROGRESS)

        try:
            config = PaymentSetupConfig(
                key=self.public_key,
                email=details.email.strip(),
                amount=attempt.amount_minor_units,
                ref=attempt.reference_id,
                currency=attempt.currency_code,
                callback=lambda response: self._on_gateway_success(attempt, response),
                on_close=lambda: self._on_gateway_close(attempt)
            )
            handler = self.gateway.setup(config)
            handler.open_iframe()
        except Exception as e:
            logger.exception("Payment gateway failed to open for ref %s", attempt.reference_id)
            if self._is_active(attempt):
                self._clear_attempt()
                self._transition(CheckoutState.MODAL_OPEN)
            raise self._reject(PaymentLaunchError()) from e

        if self._is_active(attempt):
            self.active_handler = handler
        logger.info(
            "Payment %s launched: %d %s",
            attempt.reference_id, attempt.amount_minor_units, attempt.currency_code
        )
        return attempt, True

    def _on_gateway_success(self, attempt: PaymentAttempt, response: Optional[Dict[str, Any]]):
        if not self._is_active(attempt):
            logger.info("Ignoring success callback for resolved payment %s", attempt.reference_id)
            return

        reference = (response or {}).get("reference")
        if not reference:
            logger.warning("Gateway reported success for %s without a reference; treating as cancelled",
                           attempt.reference_id)
            self._clear_attempt()
            self._transition(CheckoutState.MODAL_OPEN)
            self.message = "Payment was not completed. Please try again."
            return

        logger.info("Payment %s successful. Reference: %s", attempt.reference_id, reference)
        self._clear_attempt()
        self.confirmation_reference = str(reference)
        self._transition(CheckoutState.SUCCESS)

    def _on_gateway_close(self, attempt: PaymentAttempt):
        if not self._is_active(attempt):
            logger.info("Ignoring close callback for resolved payment %s", attempt.reference_id)
            return

        logger.info("Payment %s closed by buyer", attempt.reference_id)
        self._clear_attempt()
        self._transition(CheckoutState.MODAL_OPEN)

    # Helpers

    def _is_active(self, attempt: PaymentAttempt) -> bool:
        return (
            self.state == CheckoutState.PAYMENT_IN_PROGRESS
            and self.active_attempt is not None
            and self.active_attempt.reference_id == attempt.reference_id
        )

    def _clear_attempt(self):
        self.active_attempt = None
        self.active_handler = None

    def _transition(self, target: CheckoutState) -> CheckoutState:
        logger.debug("Checkout %s -> %s", self.state.value, target.value)
        self.state = target
        self.message = None
        return self.state

    def _reject(self, error: CheckoutError) -> CheckoutError:
        self.message = error.message
        return error

    def snapshot(self, session_id: Optional[str] = None) -> CheckoutSnapshot:
        details = self.form.details
        return CheckoutSnapshot(
            session_id=session_id,
            state=self.state,
            buyer=details,
            quote=self.pricing.quote(details.ticket_type, details.quantity),
            gateway_readiness=self.readiness.current,
            can_pay=self.can_pay(),
            field_errors=self.form.validation_errors(),
            active_attempt=self.active_attempt,
            confirmation_reference=self.confirmation_reference,
            message=self.message
        )
