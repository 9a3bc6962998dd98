"""
Call Resolver Service.

Turns a named ``(resource, call)`` pair and a data bag into a fully
resolved OCAPI request descriptor. Problems are reported on the returned
``ResolvedCall`` rather than raised, so callers can degrade gracefully.
"""

import logging
from typing import Any
from urllib.parse import quote, unquote

from sfcc_metadata.config import get_settings
from sfcc_metadata.schemas.calls import CallConfig, ParamConfig, ParamLocation, ResolvedCall
from sfcc_metadata.services.connection import ConnectionCell
from sfcc_metadata.utils.endpoint_catalog import CATALOG

logger = logging.getLogger(__name__)

# Python types accepted for each declared parameter type
PARAM_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "number": (int, float),
    "boolean": (bool,),
}


def _matches_type(value: Any, param_type: str) -> bool:
    # bool is a subclass of int but is never a valid number
    if param_type == "number" and isinstance(value, bool):
        return False
    return isinstance(value, PARAM_TYPES[param_type])


def _format_query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class CallResolver:
    """
    Service for resolving catalog calls into request descriptors.

    Resolution happens in two steps:
    - ``build``: catalog lookup, parameter validation and substitution
    - ``resolve``: ``build`` plus the host of the active connection
    """

    def __init__(
        self,
        connection: ConnectionCell,
        ocapi_version: str | None = None,
        catalog: dict[str, dict[str, CallConfig]] | None = None,
    ):
        self.connection = connection
        self.ocapi_version = ocapi_version or get_settings().ocapi_version
        self.catalog = catalog if catalog is not None else CATALOG

    def build(
        self,
        resource_name: str,
        call_name: str,
        data: dict[str, Any] | None = None,
    ) -> ResolvedCall:
        """
        Resolve a call into a descriptor with a host-relative endpoint.

        Args:
            resource_name: Catalog resource (e.g. "systemObjectDefinitions")
            call_name: Call within the resource (e.g. "getAll")
            data: Parameter values and an optional "body" for write calls

        Returns:
            ResolvedCall; ``setup_error`` is set when any check fails.
        """
        data = data or {}
        errors: list[str] = []

        resource = self.catalog.get(resource_name)
        if resource is None:
            return self._failed(
                call_name,
                [f"Unknown resource: {resource_name}"],
            )

        call_config = resource.get(call_name)
        if call_config is None:
            return self._failed(
                call_name,
                [f"Unknown call: {call_name}", f"- Resource: {resource_name}"],
            )

        endpoint = f"/s/-/dw/{call_config.api}/{self.ocapi_version}/{call_config.path}"
        query_parts: list[str] = []

        for param in call_config.params:
            value = data.get(param.id)
            # An empty path segment would collapse the URL
            if param.location == ParamLocation.PATH and value == "":
                value = None

            if value is None:
                if param.required:
                    errors.extend(self._param_error("Missing call parameter", param, resource_name, call_name))
                continue

            if not _matches_type(value, param.type):
                errors.extend(
                    self._param_error(
                        f"Invalid type {type(value).__name__} for call parameter",
                        param,
                        resource_name,
                        call_name,
                    )
                )
                continue

            if param.location == ParamLocation.PATH:
                placeholder = "{" + param.id + "}"
                if placeholder not in endpoint:
                    errors.extend(
                        self._param_error("Path parameter not in path template", param, resource_name, call_name)
                    )
                    continue
                endpoint = endpoint.replace(placeholder, unquote(str(value)))
            else:
                query_parts.append(
                    f"{quote(param.id, safe='')}={quote(_format_query_value(value), safe='')}"
                )

        if errors:
            return self._failed(call_name, errors)

        for index, part in enumerate(query_parts):
            endpoint += ("?" if index == 0 else "&") + part

        return ResolvedCall(
            call_name=call_name,
            endpoint=endpoint,
            method=call_config.method,
            headers=dict(call_config.headers),
            body=data.get("body"),
        )

    async def resolve(
        self,
        resource_name: str,
        call_name: str,
        data: dict[str, Any] | None = None,
    ) -> ResolvedCall:
        """
        Resolve a call into a descriptor with a fully-qualified endpoint.

        The connection configuration is fetched only when the structural
        resolution succeeded.
        """
        call = self.build(resource_name, call_name, data)
        if call.setup_error:
            logger.warning(
                "Setup error for %s.%s:%s", resource_name, call_name, call.setup_err_msg
            )
            return call

        config = await self.connection.get()
        if not config.ok or not config.endpoint:
            return self._failed(
                call_name,
                ["No sandbox connection is configured (dw.json not found or invalid)"],
            )

        headers = dict(call.headers)
        # A client id in dw.json takes precedence over the configured one
        if config.client_id:
            headers["x-dw-client-id"] = config.client_id

        return call.model_copy(
            update={"endpoint": self._base_url(config.endpoint) + call.endpoint, "headers": headers}
        )

    @staticmethod
    def _base_url(host: str) -> str:
        host = host.strip().rstrip("/")
        if not host.startswith(("http://", "https://")):
            host = f"https://{host}"
        return host

    @staticmethod
    def _param_error(
        message: str,
        param: ParamConfig,
        resource_name: str,
        call_name: str,
    ) -> list[str]:
        return [
            f"{message}: {param.id} ({param.type})",
            f"- Resource: {resource_name}",
            f"- Call type: {call_name}",
        ]

    @staticmethod
    def _failed(call_name: str, errors: list[str]) -> ResolvedCall:
        return ResolvedCall(
            call_name=call_name,
            endpoint=None,
            body=None,
            setup_error=True,
            setup_err_msg="\n" + "\n".join(errors),
        )
