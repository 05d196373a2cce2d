from typing import List, Optional

class CheckoutError(ValueError):
    """Base error for rejected checkout actions; `message` is shown to the buyer"""

    default_message = "Something went wrong with your booking. Please try again."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

class CheckoutValidationError(CheckoutError):
    """Buyer details are missing or invalid"""

    default_message = "Please fill in all required fields."

    def __init__(self, message: Optional[str] = None, field_errors: Optional[List] = None):
        super().__init__(message)
        self.field_errors = field_errors or []

class UnknownFieldError(CheckoutValidationError):
    """A form update named a field the booking form does not have"""

class UnknownTicketTypeError(CheckoutValidationError):
    """A ticket type outside the catalog was selected"""

class GatewayNotReadyError(CheckoutError):
    """Payment attempted before the gateway library became ready"""

    default_message = "Payment service is still loading. Please try again in a moment."

class InvalidTransitionError(CheckoutError):
    """The action is not allowed from the current checkout state"""

    def __init__(self, action: str, state: str):
        self.action = action
        self.state = state
        super().__init__(f"Cannot {action} while checkout is {state}")

class PaymentLaunchError(CheckoutError):
    """The gateway rejected or failed to open the payment widget"""

    default_message = "We could not start the payment. Please try again."

class SessionNotFoundError(CheckoutError):
    """No checkout session with the given id"""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__("Checkout session not found")
