from pydantic import BaseModel, validator
from typing import List, Optional
from decimal import Decimal

class TicketOption(BaseModel):
    """Single purchasable ticket type"""
    value: str  # Identifier stored in the booking form
    label: str
    price: Decimal  # Unit price in major currency units

    class Config:
        frozen = True

class TicketCatalog(BaseModel):
    """Ordered, immutable set of ticket options"""
    options: List[TicketOption]

    class Config:
        frozen = True

    @validator('options')
    def validate_unique_identifiers(cls, v):
        if not v:
            raise ValueError('Ticket catalog cannot be empty')
        identifiers = [option.value for option in v]
        if len(set(identifiers)) != len(identifiers):
            raise ValueError('Ticket identifiers must be unique')
        return v

    def find(self, identifier: str) -> Optional[TicketOption]:
        for option in self.options:
            if option.value == identifier:
                return option
        return None

    def __contains__(self, identifier: str) -> bool:
        return self.find(identifier) is not None

    def identifiers(self) -> List[str]:
        return [option.value for option in self.options]

class PriceQuote(BaseModel):
    """Price breakdown shown next to the Pay control"""
    ticket_type: str
    unit_price: Decimal
    quantity: int
    amount_minor_units: int
    display_amount: Decimal
    currency: str
    display_label: str

class CatalogEntryResponse(BaseModel):
    """Ticket option as rendered on a ticket selector button"""
    value: str
    label: str
    price: Decimal
    display_label: str
