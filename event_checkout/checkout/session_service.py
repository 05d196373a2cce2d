from typing import Callable, Dict, List, Optional
from datetime import datetime
import asyncio
import logging
import time
import uuid

from event_checkout.config import settings
from event_checkout.exceptions import SessionNotFoundError
from event_checkout.bookings.form_service import BookingForm
from event_checkout.checkout.orchestrator import CheckoutOrchestrator
from event_checkout.gateway.client import InlineCheckoutGateway
from event_checkout.gateway.loader import PaymentGatewayLoader
from event_checkout.gateway.provider import HttpScriptProvider, ScriptProvider
from event_checkout.pricing.service import PricingService

logger = logging.getLogger(__name__)

class CheckoutSession:
    """One page session: its own form, gateway loader and state machine"""

    def __init__(
        self,
        session_id: str,
        orchestrator: CheckoutOrchestrator,
        loader: PaymentGatewayLoader,
        gateway: InlineCheckoutGateway,
        last_seen: float = 0.0
    ):
        self.session_id = session_id
        self.orchestrator = orchestrator
        self.loader = loader
        self.gateway = gateway
        self.created_at = datetime.now()
        self.last_seen = last_seen

    def snapshot(self):
        return self.orchestrator.snapshot(self.session_id)

class CheckoutSessionService:
    """Registry of live checkout sessions.

    A page that goes away without deleting its session is caught by idle
    expiry: sessions not looked up for ``idle_timeout`` seconds are torn
    down on the next sweep or the next ``open_session``.
    """

    def __init__(
        self,
        provider_factory: Callable[[], ScriptProvider] = HttpScriptProvider,
        settle_delay: Optional[float] = None,
        stall_warning_after: Optional[float] = None,
        pricing: Optional[PricingService] = None,
        idle_timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.provider_factory = provider_factory
        self.settle_delay = settle_delay
        self.stall_warning_after = stall_warning_after
        self.pricing = pricing or PricingService()
        self.idle_timeout = (
            idle_timeout if idle_timeout is not None
            else settings.SESSION_IDLE_TIMEOUT_SECONDS
        )
        self._clock = clock
        self._sessions: Dict[str, CheckoutSession] = {}

    async def open_session(self) -> CheckoutSession:
        """Create a session and start loading its payment gateway"""
        await self.expire_idle_sessions()
        session_id = str(uuid.uuid4())

        loader = PaymentGatewayLoader(
            self.provider_factory(),
            settle_delay=self.settle_delay,
            stall_warning_after=self.stall_warning_after
        )
        gateway = InlineCheckoutGateway()
        orchestrator = CheckoutOrchestrator(
            form=BookingForm(catalog=self.pricing.catalog),
            pricing=self.pricing,
            readiness=loader.readiness,
            gateway=gateway
        )

        session = CheckoutSession(session_id, orchestrator, loader, gateway, last_seen=self._clock())
        self._sessions[session_id] = session
        loader.start()

        logger.info("Checkout session %s opened", session_id)
        return session

    def get_session(self, session_id: str) -> CheckoutSession:
        """Look a session up, marking it as still in use"""
        session = self._sessions.get(session_id)
        if not session:
            raise SessionNotFoundError(session_id)
        session.last_seen = self._clock()
        return session

    def list_sessions(self) -> List[CheckoutSession]:
        return list(self._sessions.values())

    async def close_session(self, session_id: str) -> None:
        """Tear a session down, releasing its loader"""
        session = self._sessions.pop(session_id, None)
        if not session:
            raise SessionNotFoundError(session_id)
        await session.loader.aclose()
        logger.info("Checkout session %s closed in state %s",
                    session_id, session.orchestrator.state.value)

    async def close_all(self) -> None:
        for session_id in list(self._sessions):
            await self.close_session(session_id)

    async def expire_idle_sessions(self) -> List[str]:
        """Close every session idle for longer than the timeout"""
        if not self.idle_timeout or self.idle_timeout <= 0:
            return []

        cutoff = self._clock() - self.idle_timeout
        expired = [
            session_id for session_id, session in self._sessions.items()
            if session.last_seen < cutoff
        ]
        for session_id in expired:
            if session_id not in self._sessions:
                continue
            logger.info("Checkout session %s idle for over %.0fs; expiring",
                        session_id, self.idle_timeout)
            await self.close_session(session_id)
        return expired

    async def sweep_idle_sessions(self, interval: float) -> None:
        """Expire idle sessions every ``interval`` seconds until cancelled"""
        while True:
            await asyncio.sleep(interval)
            try:
                await self.expire_idle_sessions()
            except Exception:
                logger.exception("Idle checkout session sweep failed")

# Global session registry
session_service = CheckoutSessionService()
