"""
OCAPI endpoint catalog.

Maps ``(resource, call)`` pairs to the HTTP method, path template, declared
parameters and default headers of the OCAPI Data API calls used by the
explorer. Pure data; consumed by the call resolver.
"""

import re

from sfcc_metadata.schemas.calls import CallConfig, ParamConfig, ParamLocation

PATH = ParamLocation.PATH
QUERY = ParamLocation.QUERY

PLACEHOLDER_PATTERN = re.compile(r"\{([^{}]+)\}")

JSON_HEADERS: dict[str, str] = {"Content-Type": "application/json"}

# Headers for calls that modify metadata on the instance
WRITE_HEADERS: dict[str, str] = {
    "Content-Type": "application/json",
    "x-dw-validate-existing": "true",
    "Accept": "application/json",
}


def _param(
    param_id: str,
    location: ParamLocation,
    type_: str = "string",
    required: bool = True,
) -> ParamConfig:
    return ParamConfig(id=param_id, type=type_, location=location, required=required)


def _object_definition_calls(base_path: str, with_groups: bool) -> dict[str, CallConfig]:
    """Build the call table shared by system and custom object definitions."""
    attributes_path = f"{base_path}/{{objectType}}/attribute_definitions"
    groups_path = f"{base_path}/{{objectType}}/attribute_groups"

    calls: dict[str, CallConfig] = {
        # Single object type definition
        "get": CallConfig(
            path=f"{base_path}/{{objectType}}",
            headers=JSON_HEADERS,
            params=(
                _param("objectType", PATH),
                _param("select", QUERY, required=False),
            ),
        ),
        # All object type definitions
        "getAll": CallConfig(
            path=base_path,
            headers=JSON_HEADERS,
            params=(
                _param("select", QUERY),
                _param("count", QUERY, "number", required=False),
            ),
        ),
        # Attribute definitions of an object type
        "getAttributes": CallConfig(
            path=attributes_path,
            headers=JSON_HEADERS,
            params=(
                _param("objectType", PATH),
                _param("select", QUERY),
                _param("count", QUERY, "number", required=False),
            ),
        ),
        # A single attribute definition, including its value definitions
        "getAttribute": CallConfig(
            path=f"{attributes_path}/{{id}}",
            headers=JSON_HEADERS,
            params=(
                _param("objectType", PATH),
                _param("id", PATH),
                _param("select", QUERY, required=False),
            ),
        ),
        "createAttribute": CallConfig(
            path=f"{attributes_path}/{{id}}",
            method="PUT",
            headers=WRITE_HEADERS,
            params=(
                _param("objectType", PATH),
                _param("id", PATH),
            ),
        ),
        # Partial update; only the fields in the body are changed
        "updateAttribute": CallConfig(
            path=f"{attributes_path}/{{id}}",
            method="PATCH",
            headers=WRITE_HEADERS,
            params=(
                _param("objectType", PATH),
                _param("id", PATH),
            ),
        ),
        "deleteAttribute": CallConfig(
            path=f"{attributes_path}/{{id}}",
            method="DELETE",
            headers=WRITE_HEADERS,
            params=(
                _param("objectType", PATH),
                _param("id", PATH),
            ),
        ),
    }

    if with_groups:
        calls.update(
            {
                "getAttributeGroups": CallConfig(
                    path=groups_path,
                    headers=JSON_HEADERS,
                    params=(
                        _param("objectType", PATH),
                        _param("select", QUERY),
                        _param("count", QUERY, "number", required=False),
                        _param("expand", QUERY, required=False),
                    ),
                ),
                "createAttributeGroup": CallConfig(
                    path=f"{groups_path}/{{id}}",
                    method="PUT",
                    headers=WRITE_HEADERS,
                    params=(
                        _param("objectType", PATH),
                        _param("id", PATH),
                    ),
                ),
                "deleteAttributeGroup": CallConfig(
                    path=f"{groups_path}/{{id}}",
                    method="DELETE",
                    headers=WRITE_HEADERS,
                    params=(
                        _param("objectType", PATH),
                        _param("id", PATH),
                    ),
                ),
                "assignAttributeToGroup": CallConfig(
                    path=f"{groups_path}/{{groupId}}/attribute_definitions/{{attributeId}}",
                    method="PUT",
                    headers=JSON_HEADERS,
                    params=(
                        _param("objectType", PATH),
                        _param("groupId", PATH),
                        _param("attributeId", PATH),
                    ),
                ),
                "unassignAttributeFromGroup": CallConfig(
                    path=f"{groups_path}/{{groupId}}/attribute_definitions/{{attributeId}}",
                    method="DELETE",
                    headers=JSON_HEADERS,
                    params=(
                        _param("objectType", PATH),
                        _param("groupId", PATH),
                        _param("attributeId", PATH),
                    ),
                ),
            }
        )

    return calls


_PREFERENCE_VALUES_PATH = (
    "sites/{siteId}/site_preferences/preference_groups/{groupId}/{instanceType}"
)

CATALOG: dict[str, dict[str, CallConfig]] = {
    "systemObjectDefinitions": _object_definition_calls(
        "system_object_definitions", with_groups=True
    ),
    # Attribute groups are not available for custom object types
    "customObjectDefinitions": _object_definition_calls(
        "custom_object_definitions", with_groups=False
    ),
    "sitePreferences": {
        "getPreferenceValues": CallConfig(
            path=_PREFERENCE_VALUES_PATH,
            headers=JSON_HEADERS,
            params=(
                _param("siteId", PATH),
                _param("groupId", PATH),
                _param("instanceType", PATH),
                _param("select", QUERY, required=False),
            ),
        ),
        "updatePreferenceValues": CallConfig(
            path=_PREFERENCE_VALUES_PATH,
            method="PATCH",
            headers=WRITE_HEADERS,
            params=(
                _param("siteId", PATH),
                _param("groupId", PATH),
                _param("instanceType", PATH),
            ),
        ),
    },
    "sites": {
        "getAll": CallConfig(
            path="sites",
            headers=JSON_HEADERS,
            params=(
                _param("select", QUERY, required=False),
                _param("count", QUERY, "number", required=False),
            ),
        ),
    },
}


def get_call_config(resource_name: str, call_name: str) -> CallConfig | None:
    """Look up a catalog entry, returning None for unknown names."""
    return CATALOG.get(resource_name, {}).get(call_name)


def path_placeholders(path: str) -> set[str]:
    """Return the names of all ``{placeholder}`` tokens in a path template."""
    return set(PLACEHOLDER_PATTERN.findall(path))
