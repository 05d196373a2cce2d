"""
Ticket Pricing Module

Prices a ticket selection for the booking form. Amounts handed to the payment
gateway are integers in minor currency units (pesewas); the display price is
derived from them and rounded to two decimals.

Key Components:
- catalog.py: The fixed ticket catalog
- service.py: Quantity parsing and price calculation
- router.py: FastAPI endpoints for the catalog and price quotes
- schemas.py: Pydantic models for catalog entries and quotes
"""

from .router import router
from .catalog import TICKET_CATALOG
from .service import PricingService, parse_quantity
from .schemas import TicketOption, TicketCatalog, PriceQuote, CatalogEntryResponse

__all__ = [
    "router",
    "TICKET_CATALOG",
    "PricingService",
    "parse_quantity",
    "TicketOption",
    "TicketCatalog",
    "PriceQuote",
    "CatalogEntryResponse"
]
