"""
Booking Form Module

Holds the buyer's details while the booking modal is used and decides whether
they are complete enough to pay. The same submittable check drives the Pay
control and the checkout guard.
"""

from .form_service import BookingForm, EDITABLE_FIELDS
from .schemas import BuyerDetails, BuyerUpdateRequest, FieldError

__all__ = [
    "BookingForm",
    "EDITABLE_FIELDS",
    "BuyerDetails",
    "BuyerUpdateRequest",
    "FieldError"
]
