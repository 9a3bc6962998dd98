"""
Pydantic models describing OCAPI calls.

These models define the static endpoint catalog entries, the resolved
request descriptors handed to the HTTP executor, and the sandbox
connection configuration.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


class ParamLocation(str, Enum):
    """Where a call parameter is bound in the request URL."""

    PATH = "PATH_PARAMETER"
    QUERY = "QUERY_PARAMETER"


class ParamConfig(BaseModel):
    """A single declared parameter of a catalog call."""

    id: str
    type: Literal["string", "number", "boolean"]
    location: ParamLocation
    required: bool = True

    model_config = {"frozen": True}


class CallConfig(BaseModel):
    """
    Immutable catalog entry for one OCAPI call.

    Every ``{placeholder}`` in ``path`` must have a matching PATH parameter.
    """

    api: Literal["data", "shop"] = "data"
    path: str
    method: Literal["GET", "POST", "PUT", "PATCH", "DELETE"] = "GET"
    authorization: Literal["BM_USER", "CLIENT_CREDENTIALS"] = "BM_USER"
    headers: dict[str, str] = Field(default_factory=lambda: {"Content-Type": "application/json"})
    params: tuple[ParamConfig, ...] = ()

    model_config = {"frozen": True}


class ResolvedCall(BaseModel):
    """
    A fully resolved request descriptor.

    When ``setup_error`` is set, ``endpoint`` and ``body`` are None and the
    call must not be dispatched; ``setup_err_msg`` lists every violation.
    """

    call_name: str = ""
    endpoint: str | None = None
    method: str = "GET"
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None
    setup_error: bool = False
    setup_err_msg: str = ""


class ConnectionConfig(BaseModel):
    """Sandbox connection settings, as read from a dw.json file."""

    endpoint: str = Field(default="", alias="hostname")
    username: str = ""
    password: str = ""
    client_id: str | None = Field(default=None, alias="client-id")
    ok: bool = False

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }
