"""
FastAPI dependency injection setup.

Provides factory functions for service instances used across routes.
"""

from functools import lru_cache

from sfcc_metadata.clients.ocapi_client import OCAPIClient
from sfcc_metadata.config import get_settings
from sfcc_metadata.services.connection import ConnectionCell, DWJsonConnectionSource
from sfcc_metadata.services.materializer import TreeMaterializer
from sfcc_metadata.services.ocapi import OCAPIService
from sfcc_metadata.services.resolver import CallResolver
from sfcc_metadata.services.serializer import ExportSerializer
from sfcc_metadata.services.writer import MetadataWriteService


@lru_cache
def get_connection() -> ConnectionCell:
    """Get the session-wide connection cell."""
    settings = get_settings()
    return ConnectionCell(DWJsonConnectionSource(settings.dw_json_path))


@lru_cache
def get_client() -> OCAPIClient:
    """Get cached OCAPI client instance."""
    settings = get_settings()
    return OCAPIClient(
        client_id=settings.ocapi_client_id,
        access_token=settings.ocapi_access_token,
        timeout=settings.request_timeout_seconds,
    )


@lru_cache
def get_resolver() -> CallResolver:
    """Get cached call resolver instance."""
    return CallResolver(get_connection(), get_settings().ocapi_version)


@lru_cache
def get_ocapi() -> OCAPIService:
    return OCAPIService(get_resolver(), get_client())


@lru_cache
def get_materializer() -> TreeMaterializer:
    """Get the tree materializer; it holds the refresh generation."""
    return TreeMaterializer(get_ocapi(), get_settings())


@lru_cache
def get_serializer() -> ExportSerializer:
    """Get cached export serializer instance."""
    return ExportSerializer()


@lru_cache
def get_writer() -> MetadataWriteService:
    """Get cached write service instance."""
    return MetadataWriteService(get_ocapi(), get_settings())
