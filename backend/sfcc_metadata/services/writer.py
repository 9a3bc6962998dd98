"""
Metadata Write Service.

Create, delete and assign operations requested explicitly by the user.
Unlike tree reads, every failure is raised so it can be reported.
"""

import logging
from typing import Any

from sfcc_metadata.config import Settings, get_settings
from sfcc_metadata.exceptions import MetadataWriteError, RemoteFaultError, SchemaMismatchError
from sfcc_metadata.schemas.documents import (
    APIDocument,
    ObjectAttributeDefinition,
    ObjectAttributeGroup,
    ObjectAttributeValueDefinition,
)
from sfcc_metadata.services.ocapi import FETCH_ERRORS, OCAPIService

logger = logging.getLogger(__name__)

SYSTEM_OBJECTS = "systemObjectDefinitions"

# Fields sent when creating an attribute definition; everything else is
# left to the instance defaults.
ATTRIBUTE_CREATE_FIELDS = [
    "id",
    "display_name",
    "description",
    "value_type",
    "mandatory",
    "localizable",
    "site_specific",
    "visible",
    "externally_managed",
    "min_length",
    "default_value",
    "value_definitions",
]

GROUP_CREATE_FIELDS = ["id", "display_name", "description", "position"]


class MetadataWriteService:
    """Service for modifying attribute metadata on the instance."""

    def __init__(self, ocapi: OCAPIService, settings: Settings | None = None):
        self.ocapi = ocapi
        self.settings = settings or get_settings()

    async def _write(
        self,
        action: str,
        resource_name: str,
        call_name: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        logger.info(f"{action} ({resource_name}.{call_name})")
        try:
            return await self.ocapi.call(resource_name, call_name, data)
        except RemoteFaultError as e:
            raise MetadataWriteError(f"Unable to {action}: {e}", e.fault) from e
        except FETCH_ERRORS as e:
            raise MetadataWriteError(f"Unable to {action}: {e}") from e

    @staticmethod
    def _parse(document_type: type[APIDocument], result: dict[str, Any], fallback: APIDocument):
        """Parse the document echoed back by a write call."""
        if not result:
            return fallback
        try:
            return document_type.from_wire(result)
        except SchemaMismatchError as e:
            raise MetadataWriteError(str(e)) from e

    async def create_attribute(
        self,
        object_type: str,
        attribute: ObjectAttributeDefinition,
        resource_name: str = SYSTEM_OBJECTS,
    ) -> ObjectAttributeDefinition:
        """Create a custom attribute definition on an object type."""
        if not attribute.id:
            raise MetadataWriteError("An attribute id is required")

        result = await self._write(
            f"create attribute {attribute.id} on {object_type}",
            resource_name,
            "createAttribute",
            {
                "objectType": object_type,
                "id": attribute.id,
                "body": attribute.to_wire(ATTRIBUTE_CREATE_FIELDS),
            },
        )
        return self._parse(ObjectAttributeDefinition, result, attribute)

    async def delete_attribute(
        self,
        object_type: str,
        attribute_id: str,
        resource_name: str = SYSTEM_OBJECTS,
    ) -> None:
        await self._write(
            f"delete attribute {attribute_id} from {object_type}",
            resource_name,
            "deleteAttribute",
            {"objectType": object_type, "id": attribute_id},
        )

    async def set_attribute_default_value(
        self,
        object_type: str,
        attribute_id: str,
        value: str | int | float | None,
        resource_name: str = SYSTEM_OBJECTS,
    ) -> ObjectAttributeDefinition:
        """
        Change the default value of an attribute definition.

        Only ``default_value`` is sent, so the other properties of the
        definition stay as they are. A None value clears the default.
        """
        attribute = ObjectAttributeDefinition(
            id=attribute_id,
            default_value=ObjectAttributeValueDefinition(value=value),
        )
        body = {"default_value": attribute.default_value.to_wire(["value"]) or None}

        result = await self._write(
            f"set default value of {attribute_id} on {object_type}",
            resource_name,
            "updateAttribute",
            {"objectType": object_type, "id": attribute_id, "body": body},
        )
        return self._parse(ObjectAttributeDefinition, result, attribute)

    async def create_attribute_group(
        self,
        object_type: str,
        group: ObjectAttributeGroup,
    ) -> ObjectAttributeGroup:
        if not group.id:
            raise MetadataWriteError("An attribute group id is required")

        result = await self._write(
            f"create attribute group {group.id} on {object_type}",
            SYSTEM_OBJECTS,
            "createAttributeGroup",
            {
                "objectType": object_type,
                "id": group.id,
                "body": group.to_wire(GROUP_CREATE_FIELDS),
            },
        )
        return self._parse(ObjectAttributeGroup, result, group)

    async def delete_attribute_group(self, object_type: str, group_id: str) -> None:
        """Delete an attribute group and all of its assignments."""
        await self._write(
            f"delete attribute group {group_id} from {object_type}",
            SYSTEM_OBJECTS,
            "deleteAttributeGroup",
            {"objectType": object_type, "id": group_id},
        )

    async def assign_attribute_to_group(
        self, object_type: str, group_id: str, attribute_id: str
    ) -> None:
        await self._write(
            f"assign attribute {attribute_id} to group {group_id}",
            SYSTEM_OBJECTS,
            "assignAttributeToGroup",
            {"objectType": object_type, "groupId": group_id, "attributeId": attribute_id},
        )

    async def unassign_attribute_from_group(
        self, object_type: str, group_id: str, attribute_id: str
    ) -> None:
        await self._write(
            f"remove attribute {attribute_id} from group {group_id}",
            SYSTEM_OBJECTS,
            "unassignAttributeFromGroup",
            {"objectType": object_type, "groupId": group_id, "attributeId": attribute_id},
        )

    async def set_preference_value(
        self,
        site_id: str,
        group_id: str,
        preference_id: str,
        value: Any,
        instance_type: str | None = None,
    ) -> dict[str, Any]:
        """Set the value of one site preference for a site."""
        return await self._write(
            f"set preference {preference_id} for site {site_id}",
            "sitePreferences",
            "updatePreferenceValues",
            {
                "siteId": site_id,
                "groupId": group_id,
                "instanceType": instance_type or self.settings.site_preference_instance_type,
                "body": {f"c_{preference_id}": value},
            },
        )
