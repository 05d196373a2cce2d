from fastapi import APIRouter, Depends, Query
from typing import List

from event_checkout.pricing.schemas import PriceQuote, CatalogEntryResponse
from event_checkout.pricing.service import PricingService

router = APIRouter()

def get_pricing_service() -> PricingService:
    return PricingService()

@router.get("/catalog", response_model=List[CatalogEntryResponse])
def get_ticket_catalog(pricing: PricingService = Depends(get_pricing_service)):
    """List ticket types with their unit prices"""
    return pricing.list_catalog()

@router.get("/quote", response_model=PriceQuote)
def get_price_quote(
    ticket_type: str = Query(..., description="Ticket type identifier"),
    quantity: str = Query("", description="Raw quantity as typed by the buyer"),
    pricing: PricingService = Depends(get_pricing_service)
):
    """Calculate the total for a ticket selection"""
    return pricing.quote(ticket_type, quantity)
