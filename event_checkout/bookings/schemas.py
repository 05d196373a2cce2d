from pydantic import BaseModel
from typing import Optional, Union

class BuyerDetails(BaseModel):
    """Buyer input as typed into the booking form; never persisted"""
    name: str = ""
    email: str = ""
    quantity: Union[str, int] = "1"  # Raw number input value
    ticket_type: str = "regular"

class BuyerUpdateRequest(BaseModel):
    """Partial update of the booking form; omitted fields are left alone"""
    name: Optional[str] = None
    email: Optional[str] = None
    quantity: Optional[Union[str, int]] = None
    ticket_type: Optional[str] = None

class FieldError(BaseModel):
    """Inline validation message for one form field"""
    field: str
    error_code: str
    error_message: str
