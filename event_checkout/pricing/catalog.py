from decimal import Decimal

from event_checkout.pricing.schemas import TicketCatalog, TicketOption

# Ticket types and their prices, in display order
TICKET_CATALOG = TicketCatalog(options=[
    TicketOption(value="regular", label="Regular Ticket", price=Decimal("50")),
    TicketOption(value="vip", label="VIP Pass", price=Decimal("150")),
])

def ensure_default_ticket_type(catalog: TicketCatalog, default_ticket_type: str) -> str:
    """Fail fast when the configured default is not a catalog entry"""
    if default_ticket_type not in catalog:
        raise ValueError(
            f"Default ticket type '{default_ticket_type}' is not in the catalog "
            f"({', '.join(catalog.identifiers())})"
        )
    return default_ticket_type
