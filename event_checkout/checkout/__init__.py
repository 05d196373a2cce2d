"""
Checkout Module

The booking-and-payment state machine behind the event landing page:

    landing -> modal_open -> payment_in_progress -> success -> landing

Key Components:
- orchestrator.py: CheckoutOrchestrator, the guards and gateway callbacks
- session_service.py: Per-page checkout sessions and their gateway loaders
- view_selector.py: Which page and overlays a snapshot renders as
- router.py: FastAPI endpoints driving a session
- schemas.py: Checkout state, payment attempt and snapshot models

Rules:
- Pay needs complete buyer details, a ready gateway and no attempt in flight
- A repeated Pay while an attempt is in flight starts nothing new
- At most one of the success/cancel callbacks takes effect per attempt
- A success callback without a reference counts as a cancellation
"""

from .router import router
from .orchestrator import CheckoutOrchestrator, AttemptReferenceGenerator
from .session_service import CheckoutSession, CheckoutSessionService, session_service
from .view_selector import select_view
from .schemas import (
    CheckoutState, ViewPage, PaymentAttempt, CheckoutSnapshot, CheckoutView,
    PaymentStartResponse, PaymentCallbackRequest, PaymentCancelRequest
)

__all__ = [
    "router",
    "CheckoutOrchestrator",
    "AttemptReferenceGenerator",
    "CheckoutSession",
    "CheckoutSessionService",
    "session_service",
    "select_view",
    "CheckoutState",
    "ViewPage",
    "PaymentAttempt",
    "CheckoutSnapshot",
    "CheckoutView",
    "PaymentStartResponse",
    "PaymentCallbackRequest",
    "PaymentCancelRequest"
]
