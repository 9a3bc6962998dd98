"""
OCAPI Service.

Runs catalog calls end to end: resolve, dispatch, and check the response.
"""

import logging
from typing import Any

import httpx

from sfcc_metadata.clients.ocapi_client import CallExecutor
from sfcc_metadata.exceptions import CallSetupError, RemoteFaultError, SchemaMismatchError
from sfcc_metadata.services.resolver import CallResolver

logger = logging.getLogger(__name__)

# Failures of a read call that are shown to the user as a fallback node
FETCH_ERRORS = (CallSetupError, RemoteFaultError, SchemaMismatchError, httpx.HTTPError)


class OCAPIService:
    """Resolves and executes OCAPI calls."""

    def __init__(self, resolver: CallResolver, executor: CallExecutor):
        self.resolver = resolver
        self.executor = executor

    async def call(
        self,
        resource_name: str,
        call_name: str,
        data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Resolve and execute a single call.

        Raises:
            CallSetupError: If the call could not be resolved
            RemoteFaultError: If the instance returned a fault
            SchemaMismatchError: If the response is not a JSON object
            httpx.HTTPError: On transport failures
        """
        call = await self.resolver.resolve(resource_name, call_name, data)
        if call.setup_error:
            raise CallSetupError(call.setup_err_msg.strip())

        result = await self.executor.execute(call)
        if not isinstance(result, dict):
            raise SchemaMismatchError(
                f"Expected a JSON object from {resource_name}.{call_name}, "
                f"got {type(result).__name__}"
            )

        if result.get("error"):
            fault = result.get("fault") or {}
            message = fault.get("message") or fault.get("type") or "Unknown fault"
            raise RemoteFaultError(f"{resource_name}.{call_name} failed: {message}", fault)

        return result

    async def list_data(
        self,
        resource_name: str,
        call_name: str,
        data: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Execute a list call and return its ``data`` rows.

        An empty result may come back as ``{"count": 0}`` without a data array.
        """
        result = await self.call(resource_name, call_name, data)

        if "data" in result:
            rows = result["data"]
            if not isinstance(rows, list):
                raise SchemaMismatchError(
                    f"{resource_name}.{call_name} returned a non-list data field"
                )
            if not all(isinstance(row, dict) for row in rows):
                raise SchemaMismatchError(
                    f"{resource_name}.{call_name} returned a data row that is not an object"
                )
            return rows

        if result.get("count") == 0:
            return []

        raise SchemaMismatchError(f"{resource_name}.{call_name} returned no data array")
