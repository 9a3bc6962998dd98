"""
Shared fixtures for the explorer tests.
"""

import asyncio
from typing import Any

import pytest

from sfcc_metadata.config import Settings
from sfcc_metadata.schemas.calls import ConnectionConfig, ResolvedCall
from sfcc_metadata.services.connection import ConnectionCell
from sfcc_metadata.services.materializer import TreeMaterializer
from sfcc_metadata.services.ocapi import OCAPIService
from sfcc_metadata.services.resolver import CallResolver
from sfcc_metadata.services.writer import MetadataWriteService

HOST = "host.example"
BASE_URL = f"https://{HOST}/s/-/dw/data/v20_4"


class StaticConnectionSource:
    """Connection source returning fixed configs and counting fetches."""

    def __init__(self, *configs: ConnectionConfig, delay: float = 0.0):
        self.configs = list(configs)
        self.delay = delay
        self.fetches = 0

    async def fetch(self) -> ConnectionConfig:
        self.fetches += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        index = min(self.fetches, len(self.configs)) - 1
        return self.configs[index]


class FakeExecutor:
    """
    Call executor that records every dispatched call.

    Responses are keyed by call name. A value may be a response dict, a
    callable taking the call, or an exception to raise.
    """

    def __init__(self, responses: dict[str, Any] | None = None):
        self.responses = responses or {}
        self.calls: list[ResolvedCall] = []

    async def execute(self, call: ResolvedCall) -> dict[str, Any]:
        self.calls.append(call)
        response = self.responses.get(call.call_name, {"count": 0})
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(call)
        return response

    def calls_named(self, call_name: str) -> list[ResolvedCall]:
        return [call for call in self.calls if call.call_name == call_name]


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(dw_json_path=tmp_path / "dw.json", ocapi_version="v20_4")


@pytest.fixture
def connection_source() -> StaticConnectionSource:
    return StaticConnectionSource(ConnectionConfig(endpoint=HOST, ok=True))


@pytest.fixture
def connection(connection_source) -> ConnectionCell:
    return ConnectionCell(connection_source)


@pytest.fixture
def resolver(connection) -> CallResolver:
    return CallResolver(connection, "v20_4")


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def ocapi(resolver, executor) -> OCAPIService:
    return OCAPIService(resolver, executor)


@pytest.fixture
def materializer(ocapi, settings) -> TreeMaterializer:
    return TreeMaterializer(ocapi, settings)


@pytest.fixture
def writer(ocapi, settings) -> MetadataWriteService:
    return MetadataWriteService(ocapi, settings)
