"""
Tree endpoints for browsing instance metadata.

The host UI requests the root nodes, posts a node back to expand it, and
triggers a refresh to discard everything materialized so far.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from sfcc_metadata.dependencies import get_materializer
from sfcc_metadata.schemas.tree import TreeNode
from sfcc_metadata.services.materializer import TreeMaterializer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tree", tags=["tree"])


class RefreshResponse(BaseModel):
    """Response after a tree refresh."""

    generation: int


@router.get("/roots", response_model=list[TreeNode])
async def get_root_nodes(
    materializer: Annotated[TreeMaterializer, Depends(get_materializer)],
) -> list[TreeNode]:
    """Get the enabled top-level categories."""
    return materializer.get_root_nodes()


@router.post("/expand", response_model=list[TreeNode])
async def expand_node(
    node: TreeNode,
    materializer: Annotated[TreeMaterializer, Depends(get_materializer)],
) -> list[TreeNode]:
    """
    Get the children of a node.

    Loading problems come back as a single informational child node.
    """
    if not node.expandable:
        raise HTTPException(status_code=400, detail=f"Node {node.key} cannot be expanded")
    return await materializer.expand(node)


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_tree(
    materializer: Annotated[TreeMaterializer, Depends(get_materializer)],
) -> RefreshResponse:
    """Invalidate all nodes materialized so far."""
    return RefreshResponse(generation=materializer.refresh())
