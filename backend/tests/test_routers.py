"""
Tests for the HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from sfcc_metadata.dependencies import get_materializer, get_writer
from sfcc_metadata.main import app


@pytest.fixture
def client(materializer, writer):
    app.dependency_overrides[get_materializer] = lambda: materializer
    app.dependency_overrides[get_writer] = lambda: writer
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestTreeRouter:
    """Tests for the tree endpoints."""

    def test_roots(self, client):
        response = client.get("/api/tree/roots")

        assert response.status_code == 200
        assert [node["key"] for node in response.json()] == [
            "systemObjectDefinitions",
            "customObjectDefinitions",
            "sitePreferences",
        ]

    def test_expand_posted_node(self, client, executor):
        executor.responses["getAttributeGroups"] = {
            "data": [{"id": "storefront", "display_name": {"default": "Storefront"}}]
        }

        response = client.post(
            "/api/tree/expand",
            json={
                "key": "attributeGroups",
                "label": "Attribute Groups",
                "variant": "parentContainer",
                "expandable": True,
                "parent_path": "root.systemObjectDefinitions.Product",
            },
        )

        assert response.status_code == 200
        (group,) = response.json()
        assert group["key"] == "storefront"
        assert group["variant"] == "objectAttributeGroup"
        assert group["payload"]["id"] == "storefront"

    def test_expand_non_expandable(self, client, executor):
        response = client.post(
            "/api/tree/expand",
            json={"key": "message", "label": "No sites defined", "variant": "leaf"},
        )

        assert response.status_code == 400
        assert executor.calls == []

    def test_refresh(self, client):
        assert client.post("/api/tree/refresh").json() == {"generation": 1}
        assert client.post("/api/tree/refresh").json() == {"generation": 2}


class TestExportRouter:
    """Tests for the export endpoints."""

    def test_export_attribute(self, client):
        response = client.post(
            "/api/export/xml",
            json={
                "key": "myAttr",
                "label": "myAttr",
                "variant": "objectAttributeDefinition",
                "parent_path": "root.systemObjectDefinitions.Product",
                "payload": {"id": "myAttr", "value_type": "string", "mandatory": True},
            },
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert '<attribute-definition attribute-id="myAttr">' in response.text

    def test_export_leaf_fails(self, client):
        response = client.post(
            "/api/export/xml",
            json={"key": "id", "label": "id: myAttr", "variant": "leaf"},
        )

        assert response.status_code == 422

    def test_export_object_type(self, client, executor):
        executor.responses["getAttributes"] = {"data": [{"id": "c_brand", "value_type": "string"}]}
        executor.responses["getAttributeGroups"] = {
            "data": [{"id": "storefront", "attribute_definitions": [{"id": "c_brand"}]}]
        }

        response = client.get("/api/export/object-types/Product")

        assert response.status_code == 200
        assert "Product-extensions.xml" in response.headers["content-disposition"]
        assert '<attribute-group group-id="storefront">' in response.text

    def test_export_object_type_fault(self, client, executor):
        executor.responses["getAttributes"] = {"error": True, "fault": {"message": "Forbidden"}}

        response = client.get("/api/export/object-types/Product")

        assert response.status_code == 502


class TestMetadataRouter:
    """Tests for the write endpoints."""

    def test_create_attribute(self, client, executor):
        executor.responses["createAttribute"] = {"id": "c_brand", "value_type": "string"}

        response = client.put(
            "/api/metadata/Product/attributes/c_brand",
            json={"value_type": "string", "display_name": {"default": "Brand"}},
        )

        assert response.status_code == 200
        assert response.json()["id"] == "c_brand"
        assert executor.calls[0].body["id"] == "c_brand"

    def test_delete_attribute_fault(self, client, executor):
        executor.responses["deleteAttribute"] = {
            "error": True,
            "fault": {"type": "AttributeDefinitionNotFoundException", "message": "Not found"},
        }

        response = client.delete("/api/metadata/Product/attributes/c_missing")

        assert response.status_code == 502
        detail = response.json()["detail"]
        assert "Not found" in detail["message"]
        assert detail["fault"]["type"] == "AttributeDefinitionNotFoundException"

    def test_set_attribute_default_value(self, client, executor):
        executor.responses["updateAttribute"] = {
            "id": "c_limit",
            "value_type": "int",
            "default_value": {"value": 25},
        }

        response = client.patch(
            "/api/metadata/SitePreferences/attributes/c_limit/default-value",
            json={"value": 25},
        )

        assert response.status_code == 200
        assert response.json()["default_value"]["value"] == 25
        assert executor.calls[0].method == "PATCH"
        assert executor.calls[0].body == {"default_value": {"value": 25}}

    def test_set_attribute_default_value_fault(self, client, executor):
        executor.responses["updateAttribute"] = {
            "error": True,
            "fault": {"type": "InvalidDefaultValueException", "message": "Bad value"},
        }

        response = client.patch(
            "/api/metadata/Product/attributes/c_brand/default-value",
            json={"value": "acme"},
        )

        assert response.status_code == 502
        assert response.json()["detail"]["fault"]["type"] == "InvalidDefaultValueException"

    def test_assign_attribute(self, client, executor):
        response = client.put("/api/metadata/Product/groups/storefront/attributes/c_brand")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert executor.calls[0].call_name == "assignAttributeToGroup"

    def test_set_preference_value(self, client, executor):
        response = client.patch(
            "/api/metadata/sites/RefArch/preferences/checkout/enableFoo",
            json={"value": False},
        )

        assert response.status_code == 200
        assert executor.calls[0].body == {"c_enableFoo": False}


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
