"""
Pydantic models for the metadata tree.

A TreeNode is created by one expansion and never changed afterwards; a
refresh rebuilds the nodes from scratch.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator

from sfcc_metadata.schemas.documents import (
    ObjectAttributeDefinition,
    ObjectAttributeGroup,
    ObjectAttributeValueDefinition,
    ObjectTypeDefinition,
)

ROOT_PATH = "root"


class NodeVariant(str, Enum):
    """Closed set of tree node kinds."""

    ROOT = "root"
    BASE_CATEGORY = "baseCategory"
    OBJECT_TYPE_DEFINITION = "objectTypeDefinition"
    PARENT_CONTAINER = "parentContainer"
    OBJECT_ATTRIBUTE_DEFINITION = "objectAttributeDefinition"
    OBJECT_ATTRIBUTE_GROUP = "objectAttributeGroup"
    OBJECT_ATTRIBUTE_VALUE_DEFINITION = "objectAttributeValueDefinition"
    VALUE_DEFINITION_LIST = "valueDefinitionList"
    STRING_LIST = "stringList"
    SITE = "site"
    LEAF = "leaf"


class Informational(BaseModel):
    """
    Payload of a message-only node.

    ``failed`` separates "could not load" from "loaded, nothing there".
    """

    message: str
    failed: bool = False


class SiteScope(BaseModel):
    """Payload of site preference nodes; no site_id means the site list."""

    group_id: str
    site_id: str | None = None


class TreeNode(BaseModel):
    """A single node of the metadata tree."""

    key: str
    label: str
    variant: NodeVariant
    expandable: bool = False
    parent_path: str = ROOT_PATH
    description: str | None = None
    payload: Any = None
    generation: int = 0

    model_config = {"frozen": True}

    @field_validator("payload", mode="before")
    @classmethod
    def parse_payload(cls, v, info):
        """Coerce raw payloads into the model matching the node variant."""
        variant = info.data.get("variant")
        if v is None or variant is None:
            return v

        model = PAYLOAD_TYPES.get(NodeVariant(variant))
        if model is None:
            return v
        if variant == NodeVariant.VALUE_DEFINITION_LIST:
            return [
                item if isinstance(item, model) else model.model_validate(item)
                for item in v
            ]
        if isinstance(v, model):
            return v
        return model.model_validate(v)

    @property
    def path(self) -> str:
        """Lineage of this node's children."""
        return f"{self.parent_path}.{self.key}"

    @property
    def path_segments(self) -> list[str]:
        return self.parent_path.split(".")

    @property
    def informational(self) -> Informational | None:
        if isinstance(self.payload, Informational):
            return self.payload
        return None


PAYLOAD_TYPES: dict[NodeVariant, type[BaseModel]] = {
    NodeVariant.OBJECT_TYPE_DEFINITION: ObjectTypeDefinition,
    NodeVariant.OBJECT_ATTRIBUTE_DEFINITION: ObjectAttributeDefinition,
    NodeVariant.OBJECT_ATTRIBUTE_GROUP: ObjectAttributeGroup,
    NodeVariant.OBJECT_ATTRIBUTE_VALUE_DEFINITION: ObjectAttributeValueDefinition,
    NodeVariant.VALUE_DEFINITION_LIST: ObjectAttributeValueDefinition,
    NodeVariant.SITE: SiteScope,
    NodeVariant.LEAF: Informational,
}
