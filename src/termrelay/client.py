"""HTTP client for a running termrelay endpoint.

Used by the ``send`` and ``chat`` CLI commands to talk to the server the
same way the browser terminal does.
"""

from __future__ import annotations

import logging
import uuid

import httpx

from termrelay.domain.models import RelayResult
from termrelay.errors import RelayError

logger = logging.getLogger(__name__)


class RelayClientError(RelayError):
    """Raised when the endpoint cannot be reached or returns an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RelayClient:
    """Sends commands to the ``/execute-command`` endpoint.

    Generates a random session id when none is given, so consecutive
    commands from one client share a transcript.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3002",
        session_id: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session_id = session_id or str(uuid.uuid4())
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def session_id(self) -> str:
        return self._session_id

    async def connect(self) -> None:
        """Create the HTTP client."""
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
        logger.debug("Connected to endpoint at %s", self._base_url)

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> RelayClient:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.disconnect()

    async def execute(self, command: str) -> RelayResult:
        """Send one command and return the tagged result."""
        if self._client is None:
            raise RelayClientError("Client is not connected")
        try:
            resp = await self._client.post(
                "/execute-command",
                json={"command": command, "sessionId": self._session_id},
            )
        except httpx.HTTPError as e:
            raise RelayClientError(f"Failed to reach endpoint: {e}") from e

        if resp.status_code != 200:
            try:
                message = resp.json().get("error", resp.text)
            except ValueError:
                message = resp.text
            raise RelayClientError(message, status_code=resp.status_code)
        return RelayResult.model_validate(resp.json())

    async def health(self) -> dict:
        """Fetch the endpoint's health report."""
        if self._client is None:
            raise RelayClientError("Client is not connected")
        try:
            resp = await self._client.get("/health")
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise RelayClientError(f"Health check failed: {e}") from e
        return resp.json()
