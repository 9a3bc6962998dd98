"""
Tree Materializer Service.

Expands metadata tree nodes on demand. Each node variant has one expansion
strategy that issues zero or more OCAPI calls and maps the responses to the
next level of nodes. Read failures never escape: they become a single
informational node.
"""

import logging
from collections.abc import Awaitable, Callable

from sfcc_metadata.config import Settings, get_settings
from sfcc_metadata.schemas.documents import (
    LocalizedString,
    ObjectAttributeDefinition,
    ObjectAttributeGroup,
    ObjectTypeDefinition,
    localized_default,
)
from sfcc_metadata.schemas.tree import ROOT_PATH, NodeVariant, TreeNode
from sfcc_metadata.services.ocapi import FETCH_ERRORS, OCAPIService
from sfcc_metadata.services.site_preferences import SitePreferencesService
from sfcc_metadata.utils.tree_helpers import format_value, leaf_node, message_node

logger = logging.getLogger(__name__)

SYSTEM_OBJECTS = "systemObjectDefinitions"
CUSTOM_OBJECTS = "customObjectDefinitions"
SITE_PREFERENCES = "sitePreferences"

# (key, label, settings toggle) in display order
CATEGORIES: list[tuple[str, str, str]] = [
    (SYSTEM_OBJECTS, "System Object Definitions", "enable_system_objects"),
    (CUSTOM_OBJECTS, "Custom Object Definitions", "enable_custom_objects"),
    (SITE_PREFERENCES, "Site Preferences", "enable_site_preferences"),
]

ATTRIBUTE_DEFINITIONS = "attributeDefinitions"
ATTRIBUTE_GROUPS = "attributeGroups"

# Document fields that get their own child node instead of a leaf
NESTED_FIELDS = {"doc_type", "resource_state", "default_value", "value_definitions", "key_attribute_definition"}

GROUP_LEAF_FIELDS = ["id", "description", "display_name", "internal", "position", "link"]
VALUE_DEFINITION_LEAF_FIELDS = ["value", "display_value", "description", "position", "image"]

RefreshListener = Callable[[int], None]


class TreeMaterializer:
    """
    Service for materializing the metadata tree level by level.

    Expansion strategies by node variant:
    - root / baseCategory: category and object type listings
    - objectTypeDefinition / parentContainer: attribute and group listings
    - objectAttributeDefinition / objectAttributeGroup: field enumeration
    - value definitions, string lists, sites: in-memory or site lookups
    """

    def __init__(self, ocapi: OCAPIService, settings: Settings | None = None):
        self.ocapi = ocapi
        self.settings = settings or get_settings()
        self.site_preferences = SitePreferencesService(ocapi, self.settings)
        self.generation = 0
        self._listeners: list[RefreshListener] = []

        self._strategies: dict[NodeVariant, Callable[[TreeNode], Awaitable[list[TreeNode]]]] = {
            NodeVariant.ROOT: self._expand_root,
            NodeVariant.BASE_CATEGORY: self._expand_base_category,
            NodeVariant.OBJECT_TYPE_DEFINITION: self._expand_object_type,
            NodeVariant.PARENT_CONTAINER: self._expand_container,
            NodeVariant.OBJECT_ATTRIBUTE_DEFINITION: self._expand_attribute,
            NodeVariant.OBJECT_ATTRIBUTE_GROUP: self._expand_group,
            NodeVariant.OBJECT_ATTRIBUTE_VALUE_DEFINITION: self._expand_value_definition,
            NodeVariant.VALUE_DEFINITION_LIST: self._expand_value_definition_list,
            NodeVariant.STRING_LIST: self._expand_string_list,
            NodeVariant.SITE: self._expand_site,
            NodeVariant.LEAF: self._expand_leaf,
        }

    # ------------------------------------------------------------------
    # Host-facing operations
    # ------------------------------------------------------------------

    def get_root_nodes(self) -> list[TreeNode]:
        """Get the enabled top-level category nodes."""
        return [
            TreeNode(
                key=key,
                label=label,
                variant=NodeVariant.BASE_CATEGORY,
                expandable=True,
                parent_path=ROOT_PATH,
                generation=self.generation,
            )
            for key, label, toggle in CATEGORIES
            if getattr(self.settings, toggle)
        ]

    async def expand(self, node: TreeNode) -> list[TreeNode]:
        """
        Get the children of a node.

        Args:
            node: The node being expanded

        Returns:
            Child nodes; a single informational node when loading failed.
        """
        if node.generation < self.generation:
            logger.debug(f"Expanding node {node.path} from generation {node.generation}")

        strategy = self._strategies[node.variant]
        try:
            return await strategy(node)
        except FETCH_ERRORS as e:
            logger.warning(f"Unable to expand {node.path}: {e}")
            return [message_node(node, f"Unable to load {node.label}", self.generation, failed=True)]

    def refresh(self) -> int:
        """Invalidate every node materialized so far."""
        self.generation += 1
        logger.info(f"Tree refreshed (generation {self.generation})")
        for listener in self._listeners:
            listener(self.generation)
        return self.generation

    def on_refresh(self, listener: RefreshListener) -> None:
        self._listeners.append(listener)

    def is_stale(self, node: TreeNode) -> bool:
        return node.generation < self.generation

    # ------------------------------------------------------------------
    # Listing calls
    # ------------------------------------------------------------------

    async def fetch_object_types(self) -> list[ObjectTypeDefinition]:
        rows = await self.ocapi.list_data(
            SYSTEM_OBJECTS,
            "getAll",
            {"select": "(**)", "count": self.settings.object_page_size},
        )
        return [ObjectTypeDefinition.from_wire(row) for row in rows]

    async def fetch_attribute_definitions(
        self, object_type: str, resource_name: str = SYSTEM_OBJECTS
    ) -> list[ObjectAttributeDefinition]:
        rows = await self.ocapi.list_data(
            resource_name,
            "getAttributes",
            {
                "objectType": object_type,
                "select": "(**)",
                "count": self.settings.attribute_page_size,
            },
        )
        return [ObjectAttributeDefinition.from_wire(row) for row in rows]

    async def fetch_attribute_groups(
        self, object_type: str, resource_name: str = SYSTEM_OBJECTS
    ) -> list[ObjectAttributeGroup]:
        rows = await self.ocapi.list_data(
            resource_name,
            "getAttributeGroups",
            {
                "objectType": object_type,
                "select": "(**)",
                "count": self.settings.attribute_group_page_size,
                "expand": "definition",
            },
        )
        return [ObjectAttributeGroup.from_wire(row) for row in rows]

    async def fetch_attribute_definition(
        self, object_type: str, attribute_id: str, resource_name: str = SYSTEM_OBJECTS
    ) -> ObjectAttributeDefinition:
        """Get one attribute definition with its value definitions expanded."""
        result = await self.ocapi.call(
            resource_name,
            "getAttribute",
            {"objectType": object_type, "id": attribute_id, "select": "(**)"},
        )
        return ObjectAttributeDefinition.from_wire(result)

    # ------------------------------------------------------------------
    # Expansion strategies
    # ------------------------------------------------------------------

    async def _expand_root(self, node: TreeNode) -> list[TreeNode]:
        return self.get_root_nodes()

    async def _expand_base_category(self, node: TreeNode) -> list[TreeNode]:
        if node.key == SITE_PREFERENCES:
            return await self.site_preferences.get_preference_groups(node, self.generation)

        want_custom = node.key == CUSTOM_OBJECTS
        return [
            TreeNode(
                key=object_type.type_id,
                label=object_type.type_id,
                variant=NodeVariant.OBJECT_TYPE_DEFINITION,
                expandable=True,
                parent_path=node.path,
                description="(CustomObject)" if object_type.is_custom else None,
                payload=object_type,
                generation=self.generation,
            )
            for object_type in await self.fetch_object_types()
            if object_type.is_custom == want_custom
        ]

    async def _expand_object_type(self, node: TreeNode) -> list[TreeNode]:
        object_type: ObjectTypeDefinition = node.payload
        return [
            TreeNode(
                key=ATTRIBUTE_DEFINITIONS,
                label="Attribute Definitions",
                variant=NodeVariant.PARENT_CONTAINER,
                expandable=True,
                parent_path=node.path,
                description=f"({object_type.attribute_definition_count})",
                generation=self.generation,
            ),
            TreeNode(
                key=ATTRIBUTE_GROUPS,
                label="Attribute Groups",
                variant=NodeVariant.PARENT_CONTAINER,
                # Attribute groups are not available for custom object types
                expandable=not object_type.is_custom,
                parent_path=node.path,
                description=f"({object_type.attribute_group_count})",
                generation=self.generation,
            ),
        ]

    async def _expand_container(self, node: TreeNode) -> list[TreeNode]:
        object_type = node.path_segments[-1]
        resource_name = self._resource_for(node)

        if node.key == ATTRIBUTE_GROUPS:
            groups = await self.fetch_attribute_groups(object_type, resource_name)
            if not groups:
                return [message_node(node, "No attribute groups defined", self.generation)]
            return [
                TreeNode(
                    key=group.id,
                    label=group.id,
                    variant=NodeVariant.OBJECT_ATTRIBUTE_GROUP,
                    expandable=True,
                    parent_path=node.parent_path,
                    description=localized_default(group.display_name),
                    payload=group,
                    generation=self.generation,
                )
                for group in groups
            ]

        attributes = await self.fetch_attribute_definitions(object_type, resource_name)
        if not attributes:
            return [message_node(node, "No attribute definitions defined", self.generation)]
        return [
            TreeNode(
                key=attribute.id,
                label=attribute.id,
                variant=NodeVariant.OBJECT_ATTRIBUTE_DEFINITION,
                expandable=True,
                parent_path=node.parent_path,
                description=localized_default(attribute.display_name),
                payload=attribute,
                generation=self.generation,
            )
            for attribute in attributes
        ]

    async def _expand_attribute(self, node: TreeNode) -> list[TreeNode]:
        attribute: ObjectAttributeDefinition = node.payload
        children = [
            leaf_node(node, name, f"{name}: {self._display(value)}", self.generation)
            for name, value in self._scalar_fields(attribute)
        ]

        if attribute.default_value is not None:
            children.append(
                TreeNode(
                    key="defaultValue",
                    label="Default Value",
                    variant=NodeVariant.OBJECT_ATTRIBUTE_VALUE_DEFINITION,
                    expandable=True,
                    parent_path=node.path,
                    description=attribute.default_value.label,
                    payload=attribute.default_value,
                    generation=self.generation,
                )
            )

        if attribute.is_enum:
            children.extend(await self._value_definitions_nodes(node, attribute))

        return children

    async def _value_definitions_nodes(
        self, node: TreeNode, attribute: ObjectAttributeDefinition
    ) -> list[TreeNode]:
        # The attribute listing does not include value definitions
        try:
            expanded = await self.fetch_attribute_definition(
                node.path_segments[-1], attribute.id, self._resource_for(node)
            )
        except FETCH_ERRORS as e:
            logger.warning(f"Unable to load value definitions of {node.path}: {e}")
            return [message_node(node, "Unable to load value definitions", self.generation, failed=True)]

        if not expanded.value_definitions:
            return []
        return [
            TreeNode(
                key="valueDefinitions",
                label="Value Definitions",
                variant=NodeVariant.VALUE_DEFINITION_LIST,
                expandable=True,
                parent_path=node.path,
                description=f"({len(expanded.value_definitions)})",
                payload=expanded.value_definitions,
                generation=self.generation,
            )
        ]

    async def _expand_group(self, node: TreeNode) -> list[TreeNode]:
        group: ObjectAttributeGroup = node.payload
        attribute_ids = group.attribute_ids
        children = [
            TreeNode(
                key="attributes",
                label="Attributes",
                variant=NodeVariant.STRING_LIST,
                expandable=bool(attribute_ids),
                parent_path=node.path,
                description=f"({group.member_count})",
                payload=attribute_ids,
                generation=self.generation,
            )
        ]
        children.extend(
            leaf_node(node, name, f"{name}: {self._display(value)}", self.generation)
            for name, value in self._selected_fields(group, GROUP_LEAF_FIELDS)
        )

        if node.path_segments[1:2] == [SITE_PREFERENCES]:
            children.append(self.site_preferences.site_values_node(node, self.generation))

        return children

    async def _expand_value_definition(self, node: TreeNode) -> list[TreeNode]:
        return [
            leaf_node(node, name, f"{name}: {self._display(value)}", self.generation)
            for name, value in self._selected_fields(node.payload, VALUE_DEFINITION_LEAF_FIELDS)
        ]

    async def _expand_value_definition_list(self, node: TreeNode) -> list[TreeNode]:
        return [
            TreeNode(
                key=format_value(value_definition.value),
                label=value_definition.label,
                variant=NodeVariant.OBJECT_ATTRIBUTE_VALUE_DEFINITION,
                expandable=True,
                parent_path=node.path,
                description=format_value(value_definition.value),
                payload=value_definition,
                generation=self.generation,
            )
            for value_definition in node.payload
        ]

    async def _expand_string_list(self, node: TreeNode) -> list[TreeNode]:
        return [leaf_node(node, value, value, self.generation) for value in node.payload]

    async def _expand_site(self, node: TreeNode) -> list[TreeNode]:
        return await self.site_preferences.expand_site(node, self.generation)

    async def _expand_leaf(self, node: TreeNode) -> list[TreeNode]:
        return []

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _resource_for(node: TreeNode) -> str:
        if node.path_segments[1:2] == [CUSTOM_OBJECTS]:
            return CUSTOM_OBJECTS
        return SYSTEM_OBJECTS

    @staticmethod
    def _display(value) -> str:
        if isinstance(value, dict):
            return localized_default(value)
        return format_value(value)

    @staticmethod
    def _scalar_fields(document: ObjectAttributeDefinition) -> list[tuple[str, object]]:
        """Fields of a document that are shown as leaves, in declaration order."""
        return [
            (name, getattr(document, name))
            for name, field in type(document).model_fields.items()
            if name not in NESTED_FIELDS
            and getattr(document, name) is not None
            and (field.annotation != LocalizedString or localized_default(getattr(document, name)))
        ]

    @staticmethod
    def _selected_fields(document, names: list[str]) -> list[tuple[str, object]]:
        fields = []
        for name in names:
            value = getattr(document, name)
            if value is None or value == "":
                continue
            if isinstance(value, dict) and not localized_default(value):
                continue
            fields.append((name, value))
        return fields
