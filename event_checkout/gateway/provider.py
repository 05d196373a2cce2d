"""Script provisioning for the hosted payment library.

A provider's ``load`` coroutine returns once the library has loaded; it may
raise, or never return, when the resource cannot be fetched.
"""

from typing import Optional, Protocol
import logging

import httpx

from event_checkout.config import settings

logger = logging.getLogger(__name__)

class GatewayScriptError(RuntimeError):
    """The gateway library was fetched but is unusable"""

class ScriptProvider(Protocol):
    async def load(self, url: str) -> None:
        ...

    async def release(self) -> None:
        ...

class HttpScriptProvider:
    """Fetches the gateway's inline script over HTTP"""

    def __init__(
        self,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.timeout = timeout if timeout is not None else settings.GATEWAY_FETCH_TIMEOUT_SECONDS
        self._client = client
        self._owns_client = client is None
        self.script_size: Optional[int] = None

    async def load(self, url: str) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)

        logger.debug("Fetching payment gateway script from %s", url)
        response = await self._client.get(url)
        response.raise_for_status()

        if not response.content.strip():
            raise GatewayScriptError(f"Payment gateway script at {url} is empty")

        self.script_size = len(response.content)

    async def release(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
