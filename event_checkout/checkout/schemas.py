from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from enum import Enum

from event_checkout.bookings.schemas import BuyerDetails, FieldError
from event_checkout.gateway.schemas import GatewayReadiness, PaymentLaunch
from event_checkout.pricing.schemas import PriceQuote

class CheckoutState(str, Enum):
    """Page-level checkout state; exactly one is active"""
    LANDING = "landing"
    MODAL_OPEN = "modal_open"
    PAYMENT_IN_PROGRESS = "payment_in_progress"
    SUCCESS = "success"

class ViewPage(str, Enum):
    LANDING = "landing"
    SUCCESS = "success"

class PaymentAttempt(BaseModel):
    """One invocation of the payment gateway; dropped once resolved"""
    reference_id: str
    amount_minor_units: int
    currency_code: str
    started_at: datetime = Field(default_factory=datetime.now)

    class Config:
        frozen = True

class CheckoutSnapshot(BaseModel):
    """Everything the page needs to render the current state"""
    session_id: Optional[str] = None
    state: CheckoutState
    buyer: BuyerDetails
    quote: PriceQuote
    gateway_readiness: GatewayReadiness
    can_pay: bool
    field_errors: List[FieldError] = []
    active_attempt: Optional[PaymentAttempt] = None
    confirmation_reference: Optional[str] = None
    message: Optional[str] = None

class CheckoutView(BaseModel):
    """Page and overlays to render for a snapshot"""
    page: ViewPage
    show_booking_modal: bool
    show_loading_overlay: bool
    pay_button_label: str
    pay_button_enabled: bool
    total_label: str
    alert: Optional[str] = None

class PaymentStartResponse(BaseModel):
    """Snapshot after a Pay action plus the widget launch payload"""
    snapshot: CheckoutSnapshot
    launched: bool = False  # False when Pay repeated while an attempt was running
    launch: Optional[PaymentLaunch] = None

class PaymentCallbackRequest(BaseModel):
    """Success callback relayed from the payment widget"""
    ref: str  # Attempt reference the widget was opened with
    reference: Optional[str] = None  # Gateway transaction reference

class PaymentCancelRequest(BaseModel):
    """Widget closed without completing payment"""
    ref: str
