"""
Sandbox connection configuration.

Reads the connection settings for the SFCC instance from a dw.json file and
holds them in a lazily-initialized cell shared by every call resolution.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from sfcc_metadata.config import get_settings
from sfcc_metadata.schemas.calls import ConnectionConfig

logger = logging.getLogger(__name__)


class ConnectionSource(Protocol):
    async def fetch(self) -> ConnectionConfig: ...


class DWJsonConnectionSource:
    """
    Loads connection settings from a single dw.json file.

    A missing or malformed file yields a configuration with ``ok=False``.
    """

    def __init__(self, path: Path | None = None):
        self.path = path or get_settings().dw_json_path

    async def fetch(self) -> ConnectionConfig:
        if not self.path.exists():
            logger.warning(f"No dw.json found at {self.path}")
            return ConnectionConfig(ok=False)

        try:
            text = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
            raw = json.loads(text)
            config = ConnectionConfig.model_validate(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Unable to read dw.json at %s: %s", self.path, e)
            return ConnectionConfig(ok=False)

        if not config.endpoint:
            logger.warning(f"dw.json at {self.path} has no hostname")
            return ConnectionConfig(ok=False)

        logger.info(f"Loaded connection settings for {config.endpoint}")
        return config.model_copy(update={"ok": True})


class ConnectionCell:
    """
    Once-initialized holder for the active connection configuration.

    Concurrent callers wait for the same in-flight fetch. Only a usable
    (``ok``) configuration is kept; a failed lookup is retried on the next
    call.
    """

    def __init__(self, source: ConnectionSource):
        self.source = source
        self._value: ConnectionConfig | None = None
        self._lock = asyncio.Lock()

    async def get(self) -> ConnectionConfig:
        if self._value is not None:
            return self._value

        async with self._lock:
            if self._value is not None:
                return self._value

            config = await self.source.fetch()
            if config.ok:
                self._value = config
            return config

    def clear(self) -> None:
        """Forget the cached configuration."""
        self._value = None
