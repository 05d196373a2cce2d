from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # Application
    PROJECT_NAME: str = "AccraEssentials Event Checkout"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]  # React dev servers

    # Currency
    CURRENCY_CODE: str = "GHS"
    CURRENCY_SYMBOL: str = "GH₵"
    MINOR_UNIT_FACTOR: int = 100  # pesewas per cedi

    # Booking form defaults
    DEFAULT_TICKET_TYPE: str = "regular"
    DEFAULT_QUANTITY: str = "1"

    # Payment gateway
    PAYSTACK_PUBLIC_KEY: str = "pk_test_replace_me"
    PAYSTACK_SCRIPT_URL: str = "https://js.paystack.co/v1/inline.js"
    GATEWAY_SETTLE_DELAY_SECONDS: float = 0.2
    GATEWAY_STALL_WARNING_SECONDS: Optional[float] = None
    GATEWAY_FETCH_TIMEOUT_SECONDS: float = 10.0

    # Checkout sessions
    SESSION_IDLE_TIMEOUT_SECONDS: float = 1800.0  # 0 disables expiry
    SESSION_SWEEP_INTERVAL_SECONDS: float = 60.0

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
