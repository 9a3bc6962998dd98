"""
Export Serializer Service.

Generates SFCC metadata import/export XML (system-objecttype-extensions)
for attribute definitions and attribute groups.
"""

import logging

from lxml import etree

from sfcc_metadata.exceptions import SerializationError
from sfcc_metadata.schemas.documents import (
    ObjectAttributeDefinition,
    ObjectAttributeGroup,
    localized_default,
)
from sfcc_metadata.schemas.tree import NodeVariant, TreeNode
from sfcc_metadata.utils.tree_helpers import format_value

logger = logging.getLogger(__name__)

METADATA_NAMESPACE = "http://www.demandware.com/xml/impex/metadata/2006-10-31"
XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"
DEFAULT_LANG = "x-default"


def _tag(name: str) -> str:
    return f"{{{METADATA_NAMESPACE}}}{name}"


def _element(parent: etree._Element, name: str, text=None, **attributes) -> etree._Element:
    element = etree.SubElement(parent, _tag(name), attributes)
    if text is not None:
        element.text = format_value(text)
    return element


def _localized_element(parent: etree._Element, name: str, text: str) -> etree._Element:
    element = _element(parent, name, text)
    element.set(XML_LANG, DEFAULT_LANG)
    return element


class ExportSerializer:
    """
    Service for exporting tree nodes as metadata XML.

    Output branches on:
    - the attribute value type (string, enum, other)
    - the owning object type (Product, SitePreferences, other)
    """

    def serialize(self, node: TreeNode) -> str:
        """
        Serialize an attribute definition or attribute group node.

        Args:
            node: Tree node carrying an attribute definition or group

        Returns:
            Pretty-printed XML document

        Raises:
            SerializationError: If the node cannot be exported
        """
        object_type = node.path_segments[-1] if node.parent_path else ""
        if not object_type:
            raise SerializationError(f"Cannot derive the object type of node {node.key}")

        if node.variant == NodeVariant.OBJECT_ATTRIBUTE_DEFINITION:
            return self.serialize_type_extension(object_type, attributes=[node.payload])
        if node.variant == NodeVariant.OBJECT_ATTRIBUTE_GROUP:
            return self.serialize_type_extension(object_type, groups=[node.payload])

        raise SerializationError(f"Nodes of type {node.variant.value} cannot be exported")

    def serialize_type_extension(
        self,
        object_type: str,
        attributes: list[ObjectAttributeDefinition] | None = None,
        groups: list[ObjectAttributeGroup] | None = None,
    ) -> str:
        """
        Build a type-extension document for one object type.

        Custom attribute definitions are written before group definitions,
        as the import schema requires.
        """
        attributes = attributes or []
        groups = groups or []
        if not attributes and not groups:
            raise SerializationError(f"Nothing to export for {object_type}")

        root = etree.Element(_tag("metadata"), nsmap={None: METADATA_NAMESPACE})
        type_extension = _element(root, "type-extension", **{"type-id": object_type})

        if attributes:
            definitions = _element(type_extension, "custom-attribute-definitions")
            for attribute in attributes:
                self._attribute_definition(definitions, object_type, attribute)

        if groups:
            group_definitions = _element(type_extension, "group-definitions")
            for group in groups:
                self._attribute_group(group_definitions, group)

        logger.info(
            f"Exported {len(attributes)} attribute(s) and {len(groups)} group(s) of {object_type}"
        )
        return etree.tostring(
            root, pretty_print=True, xml_declaration=True, encoding="UTF-8"
        ).decode("utf-8")

    def _attribute_definition(
        self,
        parent: etree._Element,
        object_type: str,
        attribute: ObjectAttributeDefinition,
    ) -> None:
        if not isinstance(attribute, ObjectAttributeDefinition):
            raise SerializationError("Node does not carry an attribute definition")
        if not attribute.id:
            raise SerializationError("Attribute definition has no id")
        if not attribute.value_type:
            raise SerializationError(f"Attribute definition {attribute.id} has no value type")

        value_type = attribute.value_type.lower()
        definition = _element(parent, "attribute-definition", **{"attribute-id": attribute.id})

        _localized_element(definition, "display-name", localized_default(attribute.display_name))
        _localized_element(definition, "description", localized_default(attribute.description))
        _element(definition, "type", attribute.value_type)
        _element(definition, "mandatory-flag", attribute.mandatory)
        _element(definition, "externally-managed-flag", attribute.externally_managed)

        if value_type == "string":
            _element(definition, "min-length", attribute.min_length or 0)
        elif "enum" in value_type and attribute.value_definitions:
            value_definitions = _element(definition, "value-definitions")
            for value_definition in attribute.value_definitions:
                display = localized_default(value_definition.display_value)
                if not display or value_definition.value in (None, ""):
                    continue
                entry = _element(value_definitions, "value-definition")
                _localized_element(entry, "display", display)
                _element(entry, "value", value_definition.value)

        if object_type == "Product":
            _element(definition, "localizable-flag", attribute.localizable)
            _element(definition, "site-specific-flag", attribute.site_specific)
            _element(definition, "visible-flag", attribute.visible)
            _element(definition, "order-required-flag", attribute.order_required)
            _element(definition, "externally-defined-flag", attribute.externally_defined)
            self._default_value(definition, attribute)
        elif object_type == "SitePreferences":
            self._default_value(definition, attribute)

    @staticmethod
    def _default_value(parent: etree._Element, attribute: ObjectAttributeDefinition) -> None:
        default_value = attribute.default_value
        if default_value is not None and default_value.value is not None:
            _element(parent, "default-value", default_value.value)

    @staticmethod
    def _attribute_group(parent: etree._Element, group: ObjectAttributeGroup) -> None:
        if not isinstance(group, ObjectAttributeGroup):
            raise SerializationError("Node does not carry an attribute group")
        if not group.id:
            raise SerializationError("Attribute group has no id")

        group_element = _element(parent, "attribute-group", **{"group-id": group.id})
        _localized_element(group_element, "display-name", localized_default(group.display_name))
        for attribute_id in group.attribute_ids:
            _element(group_element, "attribute", **{"attribute-id": attribute_id})
