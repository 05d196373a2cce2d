from typing import Callable, List, Optional
import asyncio
import logging
import threading

from event_checkout.config import settings
from event_checkout.gateway.provider import ScriptProvider
from event_checkout.gateway.schemas import GatewayReadiness

logger = logging.getLogger(__name__)

ReadinessObserver = Callable[[GatewayReadiness, GatewayReadiness], None]

_READINESS_ORDER = [
    GatewayReadiness.NOT_REQUESTED,
    GatewayReadiness.LOADING,
    GatewayReadiness.READY,
]

class ReadinessSignal:
    """Single-writer, multi-reader readiness flag.

    Moves one step at a time along not_requested -> loading -> ready and never
    backwards. Observers are called with (previous, current) after each step.
    """

    def __init__(self):
        self._state = GatewayReadiness.NOT_REQUESTED
        self._history: List[GatewayReadiness] = [self._state]
        self._lock = threading.Lock()
        self._observers: List[ReadinessObserver] = []
        self._ready_event = asyncio.Event()

    @property
    def current(self) -> GatewayReadiness:
        with self._lock:
            return self._state

    @property
    def is_ready(self) -> bool:
        return self.current == GatewayReadiness.READY

    @property
    def history(self) -> List[GatewayReadiness]:
        with self._lock:
            return list(self._history)

    def advance(self, target: GatewayReadiness) -> None:
        with self._lock:
            previous = self._state
            expected = _READINESS_ORDER.index(previous) + 1
            if expected >= len(_READINESS_ORDER) or _READINESS_ORDER[expected] != target:
                raise ValueError(
                    f"Readiness cannot move from {previous.value} to {target.value}"
                )
            self._state = target
            self._history.append(target)
            observers = list(self._observers)

        if target == GatewayReadiness.READY:
            self._ready_event.set()

        for observer in observers:
            try:
                observer(previous, target)
            except Exception:
                logger.exception("Readiness observer failed on %s -> %s", previous.value, target.value)

    def subscribe(self, observer: ReadinessObserver) -> Callable[[], None]:
        """Register an observer; returns a callable that unsubscribes it"""
        with self._lock:
            self._observers.append(observer)

        def unsubscribe():
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def clear_observers(self) -> None:
        with self._lock:
            self._observers.clear()

    async def wait_ready(self, timeout: Optional[float] = None) -> bool:
        """Wait until ready; False if the timeout expires first"""
        if self.is_ready:
            return True
        try:
            await asyncio.wait_for(self._ready_event.wait(), timeout)
        except asyncio.TimeoutError:
            return False
        return True

class PaymentGatewayLoader:
    """Brings the hosted payment library to ready, once per session"""

    def __init__(
        self,
        provider: ScriptProvider,
        script_url: Optional[str] = None,
        settle_delay: Optional[float] = None,
        stall_warning_after: Optional[float] = None,
        readiness: Optional[ReadinessSignal] = None
    ):
        self.provider = provider
        self.script_url = script_url or settings.PAYSTACK_SCRIPT_URL
        self.settle_delay = settle_delay if settle_delay is not None else settings.GATEWAY_SETTLE_DELAY_SECONDS
        self.stall_warning_after = (
            stall_warning_after if stall_warning_after is not None
            else settings.GATEWAY_STALL_WARNING_SECONDS
        )
        self.readiness = readiness or ReadinessSignal()
        self._task: Optional[asyncio.Task] = None
        self._stall_handle: Optional[asyncio.TimerHandle] = None
        self._closed = False

    @property
    def started(self) -> bool:
        return self._task is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> asyncio.Task:
        """Begin loading; later calls return the same task"""
        if self._task is not None:
            return self._task
        if self._closed:
            raise RuntimeError("Payment gateway loader has been closed")

        self.readiness.advance(GatewayReadiness.LOADING)
        logger.info("Loading payment gateway script from %s", self.script_url)
        self._task = asyncio.create_task(self._load())

        if self.stall_warning_after:
            loop = asyncio.get_running_loop()
            self._stall_handle = loop.call_later(self.stall_warning_after, self._warn_stalled)

        return self._task

    async def _load(self):
        try:
            await self.provider.load(self.script_url)
        except asyncio.CancelledError:
            raise
        except Exception:
            # No retry: readiness stays at loading for the rest of the session
            logger.exception("Payment gateway script failed to load from %s", self.script_url)
            return

        # The script reports loaded slightly before its API is callable
        await asyncio.sleep(self.settle_delay)
        self.readiness.advance(GatewayReadiness.READY)
        self._cancel_stall_warning()
        logger.info("Payment gateway ready")

    def _warn_stalled(self):
        self._stall_handle = None
        if not self.readiness.is_ready:
            logger.warning(
                "Payment gateway still not ready after %.1fs; payments are blocked",
                self.stall_warning_after
            )

    def _cancel_stall_warning(self):
        if self._stall_handle is not None:
            self._stall_handle.cancel()
            self._stall_handle = None

    async def aclose(self) -> None:
        """Release the provider and observers whatever state was reached"""
        if self._closed:
            return
        self._closed = True
        self._cancel_stall_warning()

        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        self.readiness.clear_observers()
        await self.provider.release()
        logger.debug("Payment gateway loader released at %s", self.readiness.current.value)

    async def __aenter__(self):
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
