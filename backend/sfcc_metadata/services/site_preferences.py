"""
Site Preferences Service.

Builds the Site Preferences branch of the tree: preference groups (attribute
groups of the SitePreferences system object), the sites of the instance,
and the per-site preference values of a group.
"""

import logging

from sfcc_metadata.config import Settings, get_settings
from sfcc_metadata.schemas.documents import ObjectAttributeGroup, Site, localized_default
from sfcc_metadata.schemas.tree import NodeVariant, SiteScope, TreeNode
from sfcc_metadata.services.ocapi import OCAPIService
from sfcc_metadata.utils.tree_helpers import format_value, leaf_node, message_node

logger = logging.getLogger(__name__)

SITE_PREFERENCES_OBJECT = "SitePreferences"

# Custom attribute values are returned as "c_<attributeId>" fields
CUSTOM_ATTRIBUTE_PREFIX = "c_"


class SitePreferencesService:
    """Tree expansion strategies for site preferences."""

    def __init__(self, ocapi: OCAPIService, settings: Settings | None = None):
        self.ocapi = ocapi
        self.settings = settings or get_settings()

    async def get_preference_groups(self, parent: TreeNode, generation: int) -> list[TreeNode]:
        """
        List the preference groups of the instance.

        Group nodes are placed under the SitePreferences object type so that
        exports of their attributes use the SitePreferences branch.
        """
        rows = await self.ocapi.list_data(
            "systemObjectDefinitions",
            "getAttributeGroups",
            {
                "objectType": SITE_PREFERENCES_OBJECT,
                "select": "(**)",
                "count": self.settings.attribute_group_page_size,
                "expand": "definition",
            },
        )

        if not rows:
            return [message_node(parent, "No attribute groups defined", generation)]

        group_path = f"{parent.path}.{SITE_PREFERENCES_OBJECT}"
        nodes = []
        for row in rows:
            group = ObjectAttributeGroup.from_wire(row)
            nodes.append(
                TreeNode(
                    key=group.id,
                    label=group.id,
                    variant=NodeVariant.OBJECT_ATTRIBUTE_GROUP,
                    expandable=True,
                    parent_path=group_path,
                    description=localized_default(group.display_name),
                    payload=group,
                    generation=generation,
                )
            )
        return nodes

    def site_values_node(self, group_node: TreeNode, generation: int) -> TreeNode:
        """Container that lists the sites a group's values can be read for."""
        return TreeNode(
            key="siteValues",
            label="Site Values",
            variant=NodeVariant.SITE,
            expandable=True,
            parent_path=group_node.path,
            payload=SiteScope(group_id=group_node.payload.id),
            generation=generation,
        )

    async def expand_site(self, node: TreeNode, generation: int) -> list[TreeNode]:
        scope: SiteScope = node.payload
        if scope.site_id is None:
            return await self.get_sites(node, generation)
        return await self.get_preference_values(node, generation)

    async def get_sites(self, parent: TreeNode, generation: int) -> list[TreeNode]:
        scope: SiteScope = parent.payload
        rows = await self.ocapi.list_data("sites", "getAll", {"select": "(**)"})

        if not rows:
            return [message_node(parent, "No sites defined", generation)]

        sites = [Site.from_wire(row) for row in rows]
        return [
            TreeNode(
                key=site.id,
                label=site.id,
                variant=NodeVariant.SITE,
                expandable=True,
                parent_path=parent.path,
                description=localized_default(site.display_name),
                payload=SiteScope(group_id=scope.group_id, site_id=site.id),
                generation=generation,
            )
            for site in sites
        ]

    async def get_preference_values(self, parent: TreeNode, generation: int) -> list[TreeNode]:
        """Read the values of one preference group for one site."""
        scope: SiteScope = parent.payload
        logger.info(
            "Loading preference values of group %s for site %s", scope.group_id, scope.site_id
        )
        result = await self.ocapi.call(
            "sitePreferences",
            "getPreferenceValues",
            {
                "siteId": scope.site_id,
                "groupId": scope.group_id,
                "instanceType": self.settings.site_preference_instance_type,
            },
        )

        nodes = [
            leaf_node(
                parent,
                field,
                f"{field[len(CUSTOM_ATTRIBUTE_PREFIX):]}: {format_value(value)}",
                generation,
            )
            for field, value in result.items()
            if field.startswith(CUSTOM_ATTRIBUTE_PREFIX)
        ]
        if not nodes:
            return [message_node(parent, "No preference values set", generation)]
        return nodes
