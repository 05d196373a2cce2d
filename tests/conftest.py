"""Shared fixtures and fakes for checkout tests."""

import asyncio
from typing import List, Optional
from unittest.mock import Mock

import pytest

from event_checkout.bookings.form_service import BookingForm
from event_checkout.checkout.orchestrator import AttemptReferenceGenerator, CheckoutOrchestrator
from event_checkout.gateway.loader import ReadinessSignal
from event_checkout.gateway.schemas import GatewayReadiness
from event_checkout.pricing.service import PricingService


class FakeScriptProvider:
    """Script provider whose load completes only when told to.

    With ``auto_load`` the load completes immediately; with ``error`` it
    raises. Otherwise ``load`` waits for ``signal_loaded`` forever.
    """

    def __init__(self, auto_load: bool = False, error: Optional[Exception] = None):
        self.auto_load = auto_load
        self.error = error
        self.load_calls: List[str] = []
        self.released = False
        self._loaded: Optional[asyncio.Event] = None

    def _event(self) -> asyncio.Event:
        if self._loaded is None:
            self._loaded = asyncio.Event()
        return self._loaded

    def signal_loaded(self):
        self._event().set()

    async def load(self, url: str) -> None:
        self.load_calls.append(url)
        if self.error is not None:
            raise self.error
        if self.auto_load:
            return
        await self._event().wait()

    async def release(self) -> None:
        self.released = True


def ready_signal() -> ReadinessSignal:
    signal = ReadinessSignal()
    signal.advance(GatewayReadiness.LOADING)
    signal.advance(GatewayReadiness.READY)
    return signal


def make_gateway_spy():
    """Gateway mock whose setup returns a handler mock"""
    handler = Mock(name="handler")
    gateway = Mock(name="gateway")
    gateway.setup.return_value = handler
    return gateway, handler


def make_orchestrator(readiness: Optional[ReadinessSignal] = None, gateway=None) -> CheckoutOrchestrator:
    if gateway is None:
        gateway, _ = make_gateway_spy()
    return CheckoutOrchestrator(
        form=BookingForm(),
        pricing=PricingService(),
        readiness=readiness if readiness is not None else ready_signal(),
        gateway=gateway,
        public_key="pk_test_123",
        currency="GHS",
        references=AttemptReferenceGenerator()
    )


def fill_form(orchestrator: CheckoutOrchestrator, name="Ama Boateng", email="ama@example.com",
              quantity="2", ticket_type="vip"):
    form = orchestrator.form
    form.update_field("name", name)
    form.update_field("email", email)
    form.update_field("quantity", quantity)
    form.set_ticket_type(ticket_type)


@pytest.fixture
def gateway_spy():
    return make_gateway_spy()


@pytest.fixture
def orchestrator(gateway_spy):
    gateway, _ = gateway_spy
    return make_orchestrator(gateway=gateway)
