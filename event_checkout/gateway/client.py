from typing import Any, Dict, Optional, Protocol
import logging

from event_checkout.gateway.schemas import PaymentSetupConfig, PaymentLaunch

logger = logging.getLogger(__name__)

class PaymentHandler(Protocol):
    def open_iframe(self) -> None:
        ...

class PaymentGateway(Protocol):
    def setup(self, config: PaymentSetupConfig) -> PaymentHandler:
        ...

class InlineCheckoutHandler:
    """Handle for one attempt on the browser-hosted inline widget.

    The widget runs in the buyer's browser; this side publishes the launch
    payload and relays the widget's outcome to the registered callbacks.
    """

    def __init__(self, config: PaymentSetupConfig):
        self.config = config
        self.opened = False

    @property
    def launch(self) -> PaymentLaunch:
        return PaymentLaunch(**self.config.model_dump(exclude={"callback", "on_close"}))

    def open_iframe(self) -> None:
        self.opened = True
        logger.debug("Inline payment widget opened for ref %s", self.config.ref)

    def complete(self, response: Optional[Dict[str, Any]] = None) -> None:
        """Relay the widget's success callback"""
        self.config.callback(response or {})

    def close(self) -> None:
        """Relay the widget being closed without payment"""
        self.config.on_close()

class InlineCheckoutGateway:
    """Gateway whose widget is opened by the page, one per checkout session"""

    def __init__(self):
        self.active_handler: Optional[InlineCheckoutHandler] = None
        self._handlers: Dict[str, InlineCheckoutHandler] = {}

    def setup(self, config: PaymentSetupConfig) -> InlineCheckoutHandler:
        handler = InlineCheckoutHandler(config)
        # Only the current and previous attempts stay addressable
        previous = self.active_handler
        self._handlers = {previous.config.ref: previous} if previous else {}
        self._handlers[config.ref] = handler
        self.active_handler = handler
        return handler

    def handler_for(self, ref: str) -> Optional[InlineCheckoutHandler]:
        """Handler for the current or previous attempt reference"""
        return self._handlers.get(ref)
