from typing import List, Optional, Union

from event_checkout.config import settings
from event_checkout.exceptions import UnknownFieldError, UnknownTicketTypeError
from event_checkout.bookings.schemas import BuyerDetails, BuyerUpdateRequest, FieldError
from event_checkout.pricing.catalog import TICKET_CATALOG, ensure_default_ticket_type
from event_checkout.pricing.schemas import TicketCatalog
from event_checkout.pricing.service import parse_quantity

EDITABLE_FIELDS = ("name", "email", "quantity", "ticket_type")

class BookingForm:
    """Mutable buyer details for one checkout session"""

    def __init__(
        self,
        catalog: TicketCatalog = TICKET_CATALOG,
        default_ticket_type: Optional[str] = None,
        default_quantity: Optional[str] = None
    ):
        self.catalog = catalog
        self.default_ticket_type = ensure_default_ticket_type(
            catalog, default_ticket_type or settings.DEFAULT_TICKET_TYPE
        )
        self.default_quantity = default_quantity if default_quantity is not None else settings.DEFAULT_QUANTITY
        self.details = self._fresh_details()

    def _fresh_details(self) -> BuyerDetails:
        return BuyerDetails(quantity=self.default_quantity, ticket_type=self.default_ticket_type)

    def update_field(self, name: str, value: Union[str, int]) -> BuyerDetails:
        """Replace exactly one field, leaving the others untouched"""
        if name not in EDITABLE_FIELDS:
            raise UnknownFieldError(f"Unknown booking field '{name}'")
        if name == "ticket_type":
            return self.set_ticket_type(value)

        if value is None:
            value = ""
        elif name != "quantity":
            value = str(value)
        self.details = self.details.model_copy(update={name: value})
        return self.details

    def set_ticket_type(self, identifier: str) -> BuyerDetails:
        if identifier not in self.catalog:
            raise UnknownTicketTypeError(f"Unknown ticket type '{identifier}'")
        self.details = self.details.model_copy(update={"ticket_type": identifier})
        return self.details

    def apply_update(self, update: BuyerUpdateRequest) -> BuyerDetails:
        """Apply every field present in a partial update"""
        changes = update.model_dump(exclude_none=True)

        # Validate the ticket type first so a bad update changes nothing
        if "ticket_type" in changes and changes["ticket_type"] not in self.catalog:
            raise UnknownTicketTypeError(f"Unknown ticket type '{changes['ticket_type']}'")

        for field_name in EDITABLE_FIELDS:
            if field_name in changes:
                self.update_field(field_name, changes[field_name])
        return self.details

    def validation_errors(self) -> List[FieldError]:
        """Per-field problems that block payment"""
        errors = []

        if not self.details.name.strip():
            errors.append(FieldError(
                field="name",
                error_code="NAME_REQUIRED",
                error_message="Full name is required"
            ))

        # Any non-empty email is accepted
        if not self.details.email.strip():
            errors.append(FieldError(
                field="email",
                error_code="EMAIL_REQUIRED",
                error_message="Email address is required"
            ))

        if parse_quantity(self.details.quantity) < 1:
            errors.append(FieldError(
                field="quantity",
                error_code="QUANTITY_INVALID",
                error_message="Quantity must be at least 1"
            ))

        return errors

    def is_submittable(self) -> bool:
        return not self.validation_errors()

    def reset(self) -> BuyerDetails:
        self.details = self._fresh_details()
        return self.details
