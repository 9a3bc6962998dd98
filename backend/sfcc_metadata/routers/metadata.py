"""
Metadata endpoints for modifying attribute definitions and groups.

These calls are explicit user actions, so failures are reported as
errors instead of being folded into the tree.
"""

import logging
from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from sfcc_metadata.dependencies import get_writer
from sfcc_metadata.exceptions import MetadataWriteError
from sfcc_metadata.schemas.documents import ObjectAttributeDefinition, ObjectAttributeGroup
from sfcc_metadata.services.writer import MetadataWriteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/metadata", tags=["metadata"])

ResourceName = Literal["systemObjectDefinitions", "customObjectDefinitions"]


class PreferenceValueRequest(BaseModel):
    """New value of a site preference."""

    value: Any = None


class DefaultValueRequest(BaseModel):
    """New default value of an attribute definition; null clears it."""

    value: str | int | float | None = None


class WriteResult(BaseModel):
    """Result of a write operation."""

    success: bool
    detail: str | None = None


def _write_failed(e: MetadataWriteError) -> HTTPException:
    logger.error(str(e))
    return HTTPException(status_code=502, detail={"message": str(e), "fault": e.fault})


@router.put("/{object_type}/attributes/{attribute_id}")
async def create_attribute(
    object_type: str,
    attribute_id: str,
    attribute: ObjectAttributeDefinition,
    writer: Annotated[MetadataWriteService, Depends(get_writer)],
    resource: Annotated[ResourceName, Query(description="Object definition family")] = "systemObjectDefinitions",
) -> dict:
    """Create a custom attribute definition."""
    attribute = attribute.model_copy(update={"id": attribute_id})
    try:
        created = await writer.create_attribute(object_type, attribute, resource)
    except MetadataWriteError as e:
        raise _write_failed(e)
    return created.to_wire()


@router.delete("/{object_type}/attributes/{attribute_id}", response_model=WriteResult)
async def delete_attribute(
    object_type: str,
    attribute_id: str,
    writer: Annotated[MetadataWriteService, Depends(get_writer)],
    resource: Annotated[ResourceName, Query(description="Object definition family")] = "systemObjectDefinitions",
) -> WriteResult:
    try:
        await writer.delete_attribute(object_type, attribute_id, resource)
    except MetadataWriteError as e:
        raise _write_failed(e)
    return WriteResult(success=True, detail=f"Deleted {attribute_id}")


@router.patch("/{object_type}/attributes/{attribute_id}/default-value")
async def set_attribute_default_value(
    object_type: str,
    attribute_id: str,
    request: DefaultValueRequest,
    writer: Annotated[MetadataWriteService, Depends(get_writer)],
    resource: Annotated[ResourceName, Query(description="Object definition family")] = "systemObjectDefinitions",
) -> dict:
    """Set the default value of an attribute definition."""
    try:
        updated = await writer.set_attribute_default_value(
            object_type, attribute_id, request.value, resource
        )
    except MetadataWriteError as e:
        raise _write_failed(e)
    return updated.to_wire()


@router.put("/{object_type}/groups/{group_id}")
async def create_attribute_group(
    object_type: str,
    group_id: str,
    group: ObjectAttributeGroup,
    writer: Annotated[MetadataWriteService, Depends(get_writer)],
) -> dict:
    group = group.model_copy(update={"id": group_id})
    try:
        created = await writer.create_attribute_group(object_type, group)
    except MetadataWriteError as e:
        raise _write_failed(e)
    return created.to_wire()


@router.delete("/{object_type}/groups/{group_id}", response_model=WriteResult)
async def delete_attribute_group(
    object_type: str,
    group_id: str,
    writer: Annotated[MetadataWriteService, Depends(get_writer)],
) -> WriteResult:
    """Delete an attribute group and its assignments."""
    try:
        await writer.delete_attribute_group(object_type, group_id)
    except MetadataWriteError as e:
        raise _write_failed(e)
    return WriteResult(success=True, detail=f"Deleted group {group_id}")


@router.put(
    "/{object_type}/groups/{group_id}/attributes/{attribute_id}",
    response_model=WriteResult,
)
async def assign_attribute_to_group(
    object_type: str,
    group_id: str,
    attribute_id: str,
    writer: Annotated[MetadataWriteService, Depends(get_writer)],
) -> WriteResult:
    try:
        await writer.assign_attribute_to_group(object_type, group_id, attribute_id)
    except MetadataWriteError as e:
        raise _write_failed(e)
    return WriteResult(success=True, detail=f"Assigned {attribute_id} to {group_id}")


@router.delete(
    "/{object_type}/groups/{group_id}/attributes/{attribute_id}",
    response_model=WriteResult,
)
async def unassign_attribute_from_group(
    object_type: str,
    group_id: str,
    attribute_id: str,
    writer: Annotated[MetadataWriteService, Depends(get_writer)],
) -> WriteResult:
    try:
        await writer.unassign_attribute_from_group(object_type, group_id, attribute_id)
    except MetadataWriteError as e:
        raise _write_failed(e)
    return WriteResult(success=True, detail=f"Removed {attribute_id} from {group_id}")


@router.patch(
    "/sites/{site_id}/preferences/{group_id}/{preference_id}",
    response_model=WriteResult,
)
async def set_preference_value(
    site_id: str,
    group_id: str,
    preference_id: str,
    request: PreferenceValueRequest,
    writer: Annotated[MetadataWriteService, Depends(get_writer)],
) -> WriteResult:
    """Set the value of a site preference for one site."""
    try:
        await writer.set_preference_value(site_id, group_id, preference_id, request.value)
    except MetadataWriteError as e:
        raise _write_failed(e)
    return WriteResult(success=True, detail=f"Updated {preference_id} for {site_id}")
