from typing import Optional, Union
from decimal import Decimal, ROUND_HALF_UP
import math
import re

from event_checkout.config import settings
from event_checkout.pricing.catalog import TICKET_CATALOG
from event_checkout.pricing.schemas import TicketCatalog, PriceQuote, CatalogEntryResponse

_LEADING_INTEGER = re.compile(r"^\s*([+-]?[0-9]+)")

RawQuantity = Union[str, int, float, None]

def parse_quantity(raw: RawQuantity) -> int:
    """Parse a quantity field the way a number input reports it.

    Strings are read as a leading base-10 integer ("3 tickets" -> 3), so
    empty or non-numeric input yields 0. Numbers are truncated.
    """
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if math.isfinite(raw) else 0
    match = _LEADING_INTEGER.match(str(raw))
    if not match:
        return 0
    return int(match.group(1))

class PricingService:
    """Price calculation for the ticket catalog"""

    def __init__(
        self,
        catalog: TicketCatalog = TICKET_CATALOG,
        currency: Optional[str] = None,
        currency_symbol: Optional[str] = None,
        minor_unit_factor: Optional[int] = None
    ):
        self.catalog = catalog
        self.currency = currency or settings.CURRENCY_CODE
        self.currency_symbol = currency_symbol or settings.CURRENCY_SYMBOL
        self.minor_unit_factor = minor_unit_factor or settings.MINOR_UNIT_FACTOR

    def unit_price(self, ticket_type: str) -> Decimal:
        """Unit price in major units, 0 for an unknown identifier"""
        option = self.catalog.find(ticket_type)
        return option.price if option else Decimal('0')

    def calculate_total_amount(self, ticket_type: str, quantity: RawQuantity) -> int:
        """Total price in minor currency units; never negative"""
        parsed = max(parse_quantity(quantity), 0)
        total = self.unit_price(ticket_type) * parsed * self.minor_unit_factor
        return int(total.to_integral_value(rounding=ROUND_HALF_UP))

    def display_price(self, amount_minor_units: int) -> Decimal:
        """Convert minor units back to a two-decimal display amount"""
        major = Decimal(amount_minor_units) / Decimal(self.minor_unit_factor)
        return major.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    def format_amount(self, amount: Decimal) -> str:
        return f"{self.currency_symbol}{amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}"

    def quote(self, ticket_type: str, quantity: RawQuantity) -> PriceQuote:
        """Full price breakdown for a selection"""
        amount = self.calculate_total_amount(ticket_type, quantity)
        display_amount = self.display_price(amount)

        return PriceQuote(
            ticket_type=ticket_type,
            unit_price=self.unit_price(ticket_type),
            quantity=max(parse_quantity(quantity), 0),
            amount_minor_units=amount,
            display_amount=display_amount,
            currency=self.currency,
            display_label=self.format_amount(display_amount)
        )

    def list_catalog(self) -> list:
        """Catalog entries with their button labels"""
        return [
            CatalogEntryResponse(
                value=option.value,
                label=option.label,
                price=option.price,
                display_label=f"{option.label} ({self.format_amount(option.price)})"
            )
            for option in self.catalog.options
        ]
