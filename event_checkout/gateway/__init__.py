"""
Payment Gateway Module

Integration with the hosted payment widget. The gateway library is loaded
asynchronously once per checkout session; readiness only moves forward
(not_requested -> loading -> ready) and gates every payment attempt.

Key Components:
- loader.py: ReadinessSignal and the one-shot PaymentGatewayLoader
- provider.py: Script provisioning (HTTP fetch of the inline library)
- client.py: Gateway/handler contracts and the inline widget gateway
- schemas.py: Readiness enum, setup config and launch payload
"""

from .loader import ReadinessSignal, PaymentGatewayLoader
from .provider import ScriptProvider, HttpScriptProvider, GatewayScriptError
from .client import PaymentGateway, PaymentHandler, InlineCheckoutGateway, InlineCheckoutHandler
from .schemas import GatewayReadiness, PaymentSetupConfig, PaymentLaunch, GatewayStatusResponse

__all__ = [
    "ReadinessSignal",
    "PaymentGatewayLoader",
    "ScriptProvider",
    "HttpScriptProvider",
    "GatewayScriptError",
    "PaymentGateway",
    "PaymentHandler",
    "InlineCheckoutGateway",
    "InlineCheckoutHandler",
    "GatewayReadiness",
    "PaymentSetupConfig",
    "PaymentLaunch",
    "GatewayStatusResponse"
]
