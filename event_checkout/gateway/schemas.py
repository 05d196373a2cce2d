from pydantic import BaseModel, validator
from typing import Any, Callable, Dict, List, Optional
from enum import Enum

class GatewayReadiness(str, Enum):
    """Readiness of the hosted payment library, forward-only"""
    NOT_REQUESTED = "not_requested"
    LOADING = "loading"
    READY = "ready"

class PaymentSetupConfig(BaseModel):
    """Arguments handed to the gateway's setup call for one attempt"""
    key: str  # Public key
    email: str
    amount: int  # Minor units
    ref: str  # Unique per attempt
    currency: str
    callback: Callable[[Dict[str, Any]], None]  # Success, receives {"reference": ...}
    on_close: Callable[[], None]  # Widget closed without completing

    @validator('amount')
    def validate_amount(cls, v):
        if v <= 0:
            raise ValueError('Amount must be a positive number of minor units')
        return v

    @validator('currency')
    def validate_currency(cls, v):
        if len(v) != 3 or not v.isalpha():
            raise ValueError('Currency must be a three-letter code')
        return v.upper()

class PaymentLaunch(BaseModel):
    """What the browser needs to open the hosted payment widget"""
    key: str
    email: str
    amount: int
    ref: str
    currency: str

class GatewayStatusResponse(BaseModel):
    """Readiness as reported to the page"""
    readiness: GatewayReadiness
    ready: bool
    history: List[GatewayReadiness]
    script_url: Optional[str] = None
