"""
Tests for the OCAPI endpoint catalog.
"""

import pytest

from sfcc_metadata.schemas.calls import ParamLocation
from sfcc_metadata.utils.endpoint_catalog import (
    CATALOG,
    WRITE_HEADERS,
    get_call_config,
    path_placeholders,
)

ALL_CALLS = [
    (resource_name, call_name, call_config)
    for resource_name, calls in CATALOG.items()
    for call_name, call_config in calls.items()
]


class TestEndpointCatalog:
    """Tests for the static call table."""

    @pytest.mark.parametrize(
        "resource_name,call_name,call_config",
        ALL_CALLS,
        ids=[f"{r}.{c}" for r, c, _ in ALL_CALLS],
    )
    def test_placeholders_match_path_params(self, resource_name, call_name, call_config):
        """Every placeholder has a PATH parameter and every PATH parameter a placeholder."""
        path_params = {
            param.id for param in call_config.params if param.location == ParamLocation.PATH
        }
        assert path_placeholders(call_config.path) == path_params

    def test_expected_resources(self):
        assert set(CATALOG) == {
            "systemObjectDefinitions",
            "customObjectDefinitions",
            "sitePreferences",
            "sites",
        }

    def test_custom_objects_have_no_group_calls(self):
        custom_calls = CATALOG["customObjectDefinitions"]
        assert "getAttributes" in custom_calls
        assert not any("Group" in call_name for call_name in custom_calls)

    def test_get_all_requires_select(self):
        call_config = get_call_config("systemObjectDefinitions", "getAll")
        params = {param.id: param for param in call_config.params}

        assert call_config.method == "GET"
        assert call_config.path == "system_object_definitions"
        assert params["select"].required is True
        assert params["count"].required is False
        assert params["count"].type == "number"

    def test_write_calls_validate_existing(self):
        for call_name in (
            "createAttribute",
            "updateAttribute",
            "deleteAttribute",
            "createAttributeGroup",
        ):
            call_config = get_call_config("systemObjectDefinitions", call_name)
            assert call_config.method in {"PUT", "PATCH", "DELETE"}
            assert call_config.headers == WRITE_HEADERS

    def test_unknown_call(self):
        assert get_call_config("systemObjectDefinitions", "nope") is None
        assert get_call_config("nope", "getAll") is None

    def test_path_placeholders(self):
        assert path_placeholders("a/{objectType}/b/{id}") == {"objectType", "id"}
        assert path_placeholders("sites") == set()
