"""
Tests for the Export Serializer service.
"""

import pytest
from lxml import etree

from sfcc_metadata.exceptions import SerializationError
from sfcc_metadata.schemas.documents import ObjectAttributeDefinition, ObjectAttributeGroup
from sfcc_metadata.schemas.tree import NodeVariant, TreeNode
from sfcc_metadata.services.serializer import METADATA_NAMESPACE, ExportSerializer

NS = {"m": METADATA_NAMESPACE}


def attribute_node(object_type: str, raw: dict) -> TreeNode:
    return TreeNode(
        key=raw.get("id", "attr"),
        label=raw.get("id", "attr"),
        variant=NodeVariant.OBJECT_ATTRIBUTE_DEFINITION,
        expandable=True,
        parent_path=f"root.systemObjectDefinitions.{object_type}",
        payload=raw,
    )


def parse(xml: str) -> etree._Element:
    return etree.fromstring(xml.encode("utf-8"))


@pytest.fixture
def serializer() -> ExportSerializer:
    return ExportSerializer()


class TestAttributeExport:
    """Tests for attribute definition XML."""

    def test_product_string_attribute(self, serializer):
        xml = serializer.serialize(
            attribute_node(
                "Product",
                {
                    "id": "myAttr",
                    "display_name": {"default": "My Attribute"},
                    "value_type": "string",
                    "mandatory": True,
                },
            )
        )

        assert xml.startswith("<?xml")
        assert f'xmlns="{METADATA_NAMESPACE}"' in xml
        assert '<type-extension type-id="Product">' in xml
        assert '<attribute-definition attribute-id="myAttr">' in xml
        assert '<display-name xml:lang="x-default">My Attribute</display-name>' in xml
        assert "<type>string</type>" in xml
        assert "<mandatory-flag>true</mandatory-flag>" in xml
        assert "<externally-managed-flag>false</externally-managed-flag>" in xml
        assert "<min-length>0</min-length>" in xml
        assert "<localizable-flag>false</localizable-flag>" in xml
        assert "<value-definitions>" not in xml

    def test_generic_enum_attribute(self, serializer):
        xml = serializer.serialize(
            attribute_node(
                "Order",
                {
                    "id": "c_channel",
                    "value_type": "enum_of_string",
                    "value_definitions": [
                        {"value": "web", "display_value": {"default": "Web"}},
                        {"value": "store"},
                        {"display_value": {"default": "Phone"}},
                    ],
                },
            )
        )
        root = parse(xml)

        entries = root.findall(".//m:value-definition", NS)
        assert len(entries) == 1
        assert entries[0].findtext("m:value", namespaces=NS) == "web"
        assert entries[0].findtext("m:display", namespaces=NS) == "Web"
        assert "<min-length>" not in xml
        assert "<localizable-flag>" not in xml
        assert "<default-value>" not in xml

    def test_site_preferences_default_value(self, serializer):
        xml = serializer.serialize(
            attribute_node(
                "SitePreferences",
                {"id": "limit", "value_type": "int", "default_value": {"value": 10}},
            )
        )

        assert "<default-value>10</default-value>" in xml
        assert "<localizable-flag>" not in xml

    def test_product_flags(self, serializer):
        xml = serializer.serialize(
            attribute_node(
                "Product",
                {
                    "id": "color",
                    "value_type": "enum_of_string",
                    "localizable": True,
                    "site_specific": True,
                    "visible": True,
                    "default_value": {"value": "red"},
                    "value_definitions": [{"value": "red", "display_value": {"default": "Red"}}],
                },
            )
        )

        assert "<localizable-flag>true</localizable-flag>" in xml
        assert "<site-specific-flag>true</site-specific-flag>" in xml
        assert "<visible-flag>true</visible-flag>" in xml
        assert "<order-required-flag>false</order-required-flag>" in xml
        assert "<externally-defined-flag>false</externally-defined-flag>" in xml
        assert "<default-value>red</default-value>" in xml
        assert "<value-definitions>" in xml

    def test_missing_value_type(self, serializer):
        with pytest.raises(SerializationError):
            serializer.serialize(attribute_node("Product", {"id": "broken"}))


class TestGroupExport:
    """Tests for attribute group XML."""

    def test_group(self, serializer):
        node = TreeNode(
            key="storefront",
            label="storefront",
            variant=NodeVariant.OBJECT_ATTRIBUTE_GROUP,
            expandable=True,
            parent_path="root.systemObjectDefinitions.Product",
            payload={
                "id": "storefront",
                "display_name": {"default": "Storefront"},
                "attribute_definitions": [{"id": "brand"}, {"id": "color"}],
            },
        )

        root = parse(serializer.serialize(node))

        group = root.find(".//m:group-definitions/m:attribute-group", NS)
        assert group.get("group-id") == "storefront"
        assert group.findtext("m:display-name", namespaces=NS) == "Storefront"
        assert [a.get("attribute-id") for a in group.findall("m:attribute", NS)] == [
            "brand",
            "color",
        ]

    def test_non_exportable_node(self, serializer):
        node = TreeNode(key="id", label="id: brand", variant=NodeVariant.LEAF)

        with pytest.raises(SerializationError):
            serializer.serialize(node)


class TestTypeExtension:
    """Tests for whole object type exports."""

    def test_attributes_before_groups(self, serializer):
        xml = serializer.serialize_type_extension(
            "Product",
            attributes=[ObjectAttributeDefinition(id="brand", value_type="string")],
            groups=[ObjectAttributeGroup(id="storefront")],
        )

        assert xml.index("<custom-attribute-definitions>") < xml.index("<group-definitions>")

    def test_nothing_to_export(self, serializer):
        with pytest.raises(SerializationError):
            serializer.serialize_type_extension("Product")
