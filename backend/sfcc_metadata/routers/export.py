"""
Export endpoints for generating metadata XML.

Supports single attribute/group nodes and whole object types.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from sfcc_metadata.dependencies import get_materializer, get_serializer
from sfcc_metadata.exceptions import SerializationError
from sfcc_metadata.schemas.tree import TreeNode
from sfcc_metadata.services.materializer import SYSTEM_OBJECTS, TreeMaterializer
from sfcc_metadata.services.ocapi import FETCH_ERRORS
from sfcc_metadata.services.serializer import ExportSerializer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/export", tags=["export"])

XML_MEDIA_TYPE = "application/xml"


@router.post("/xml")
async def export_node(
    node: TreeNode,
    serializer: Annotated[ExportSerializer, Depends(get_serializer)],
) -> Response:
    """
    Get the import/export XML of an attribute definition or group node.
    """
    try:
        content = serializer.serialize(node)
    except SerializationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return Response(
        content=content,
        media_type=XML_MEDIA_TYPE,
        headers={"Content-Disposition": f'inline; filename="{node.key}.xml"'},
    )


@router.get("/object-types/{object_type}")
async def export_object_type(
    object_type: str,
    materializer: Annotated[TreeMaterializer, Depends(get_materializer)],
    serializer: Annotated[ExportSerializer, Depends(get_serializer)],
) -> Response:
    """
    Get the full type-extension XML of a system object type.

    Includes every attribute definition and attribute group.
    """
    try:
        attributes = await materializer.fetch_attribute_definitions(object_type, SYSTEM_OBJECTS)
        groups = await materializer.fetch_attribute_groups(object_type, SYSTEM_OBJECTS)
        content = serializer.serialize_type_extension(object_type, attributes, groups)
    except SerializationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except FETCH_ERRORS as e:
        logger.exception(f"Failed to export {object_type}")
        raise HTTPException(status_code=502, detail=str(e))

    return Response(
        content=content,
        media_type=XML_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{object_type}-extensions.xml"'
        },
    )
