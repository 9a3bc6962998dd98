"""
OCAPI HTTP client.

Executes resolved call descriptors against the SFCC instance.
"""

import logging
from typing import Any, Protocol

import httpx

from sfcc_metadata.schemas.calls import ResolvedCall

logger = logging.getLogger(__name__)


class CallExecutor(Protocol):
    async def execute(self, call: ResolvedCall) -> dict[str, Any]: ...


class OCAPIClient:
    """
    Async HTTP client for the OCAPI Data API.

    Features:
    - Client id and bearer token headers on every request
    - Fault responses returned as ``{"error": True, "fault": {...}}``
    - Transport failures raised as ``httpx.HTTPError``
    """

    def __init__(
        self,
        client_id: str,
        access_token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = client_id
        self.access_token = access_token
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def headers(self) -> dict[str, str]:
        """Get default headers for API requests."""
        headers = {
            "Accept": "application/json",
            "x-dw-client-id": self.client_id,
            "User-Agent": "SFCC-Metadata-Explorer/1.0",
        }
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers=self.headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def execute(self, call: ResolvedCall) -> dict[str, Any]:
        """
        Execute a resolved call.

        Args:
            call: Descriptor produced by the call resolver

        Returns:
            Decoded JSON body, ``{}`` for empty responses, or an error shape
            for HTTP error statuses.

        Raises:
            ValueError: If the call carries a setup error
            httpx.HTTPError: On network failures
        """
        if call.setup_error or not call.endpoint:
            raise ValueError(f"Refusing to dispatch unresolved call: {call.setup_err_msg}")

        client = await self._get_client()
        logger.info(f"{call.method} {call.endpoint}")

        response = await client.request(
            call.method,
            call.endpoint,
            headers=call.headers,
            json=call.body,
        )

        if response.is_error:
            logger.warning(f"{call.method} {call.endpoint} returned {response.status_code}")
            return {"error": True, "fault": self._fault(response)}

        if not response.content:
            return {}
        return response.json()

    @staticmethod
    def _fault(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        fault = payload.get("fault") if isinstance(payload, dict) else None
        if isinstance(fault, dict):
            return fault
        return {
            "type": "HTTPError",
            "message": f"HTTP {response.status_code}: {response.reason_phrase}",
        }

    async def __aenter__(self) -> "OCAPIClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
