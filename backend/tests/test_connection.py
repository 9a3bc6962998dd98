"""
Tests for connection discovery and the connection cell.
"""

import asyncio
import json
from unittest.mock import patch

import pytest

from conftest import StaticConnectionSource
from sfcc_metadata.schemas.calls import ConnectionConfig
from sfcc_metadata.services.connection import ConnectionCell, DWJsonConnectionSource


class TestDWJsonConnectionSource:
    """Tests for reading dw.json."""

    @pytest.mark.asyncio
    async def test_reads_dw_json(self, tmp_path):
        path = tmp_path / "dw.json"
        path.write_text(
            json.dumps(
                {
                    "hostname": "dev01.example.com",
                    "username": "admin",
                    "password": "secret",
                    "client-id": "my-client",
                    "code-version": "version1",
                }
            )
        )

        config = await DWJsonConnectionSource(path).fetch()

        assert config.ok is True
        assert config.endpoint == "dev01.example.com"
        assert config.username == "admin"
        assert config.client_id == "my-client"

    @pytest.mark.asyncio
    async def test_file_is_read_off_the_event_loop(self, tmp_path):
        path = tmp_path / "dw.json"
        path.write_text(json.dumps({"hostname": "dev01.example.com"}))

        with patch.object(asyncio, "to_thread", wraps=asyncio.to_thread) as to_thread:
            config = await DWJsonConnectionSource(path).fetch()

        assert config.ok is True
        to_thread.assert_called_once()
        assert to_thread.call_args.args[0] == path.read_text

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        config = await DWJsonConnectionSource(tmp_path / "dw.json").fetch()
        assert config.ok is False

    @pytest.mark.asyncio
    async def test_malformed_file(self, tmp_path):
        path = tmp_path / "dw.json"
        path.write_text("{not json")

        config = await DWJsonConnectionSource(path).fetch()

        assert config.ok is False

    @pytest.mark.asyncio
    async def test_missing_hostname(self, tmp_path):
        path = tmp_path / "dw.json"
        path.write_text(json.dumps({"username": "admin"}))

        config = await DWJsonConnectionSource(path).fetch()

        assert config.ok is False


class TestConnectionCell:
    """Tests for the once-initialized connection cell."""

    @pytest.mark.asyncio
    async def test_concurrent_gets_fetch_once(self):
        source = StaticConnectionSource(
            ConnectionConfig(endpoint="host.example", ok=True), delay=0.01
        )
        cell = ConnectionCell(source)

        results = await asyncio.gather(*(cell.get() for _ in range(5)))

        assert source.fetches == 1
        assert all(result is results[0] for result in results)
        assert await cell.get() is results[0]
        assert source.fetches == 1

    @pytest.mark.asyncio
    async def test_failed_lookup_is_retried(self):
        source = StaticConnectionSource(
            ConnectionConfig(ok=False),
            ConnectionConfig(endpoint="host.example", ok=True),
        )
        cell = ConnectionCell(source)

        first = await cell.get()
        assert first.ok is False

        second = await cell.get()
        assert second.ok is True
        assert source.fetches == 2

    @pytest.mark.asyncio
    async def test_clear(self):
        source = StaticConnectionSource(ConnectionConfig(endpoint="host.example", ok=True))
        cell = ConnectionCell(source)

        await cell.get()
        await cell.get()
        assert source.fetches == 1

        cell.clear()
        await cell.get()
        assert source.fetches == 2
