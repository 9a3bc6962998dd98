"""
Pydantic schemas for OCAPI documents, calls and tree nodes.
"""

from sfcc_metadata.schemas.calls import (
    CallConfig,
    ConnectionConfig,
    ParamConfig,
    ResolvedCall,
)
from sfcc_metadata.schemas.documents import (
    ObjectAttributeDefinition,
    ObjectAttributeGroup,
    ObjectAttributeValueDefinition,
    ObjectTypeDefinition,
)
from sfcc_metadata.schemas.tree import Informational, NodeVariant, SiteScope, TreeNode

__all__ = [
    "CallConfig",
    "ParamConfig",
    "ResolvedCall",
    "ConnectionConfig",
    "ObjectTypeDefinition",
    "ObjectAttributeDefinition",
    "ObjectAttributeGroup",
    "ObjectAttributeValueDefinition",
    "TreeNode",
    "NodeVariant",
    "Informational",
    "SiteScope",
]
