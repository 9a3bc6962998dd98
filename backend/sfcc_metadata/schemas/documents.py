"""
Pydantic models for OCAPI metadata documents.

Each model parses the raw JSON document returned by the Data API into typed
fields and projects those fields back into the wire document, optionally
restricted to a subset of fields (useful when updating only some
properties of a definition).
"""

from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from sfcc_metadata.exceptions import SchemaMismatchError

CUSTOM_OBJECT_TYPE = "CustomObject"

LocalizedString = dict[str, str]


def empty_localized() -> LocalizedString:
    return {"default": ""}


def localized_default(value: LocalizedString | None) -> str:
    """Get the default-locale text of a localized string."""
    if not value:
        return ""
    return value.get("default", "")


class APIDocument(BaseModel):
    """
    Base class for OCAPI documents.

    OCAPI meta fields (``_type``, ``_resource_state``) are kept under
    python-friendly names and restored on projection.
    """

    doc_type: str | None = Field(default=None, alias="_type")
    resource_state: str | None = Field(default=None, alias="_resource_state")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }

    @classmethod
    def from_wire(cls, raw: dict[str, Any] | None) -> "APIDocument":
        """
        Parse a raw wire document.

        Raises:
            SchemaMismatchError: If the document does not have the expected shape
        """
        try:
            return cls.model_validate(raw or {})
        except ValidationError as e:
            raise SchemaMismatchError(
                f"Unexpected {cls.__name__} document: {e.error_count()} invalid field(s)"
            ) from e

    def to_wire(self, include_fields: list[str] | set[str] | None = None) -> dict[str, Any]:
        """
        Project the document back into its wire form.

        Args:
            include_fields: Internal field names to keep. All fields are
                projected when empty.

        Returns:
            Dictionary keyed by wire field names, without unset optional values.
        """
        include = set(include_fields) if include_fields else None
        return self.model_dump(by_alias=True, exclude_none=True, include=include)

    @field_validator("*", mode="before")
    @classmethod
    def default_localized(cls, v, info):
        """Localized strings are never null."""
        field = cls.model_fields.get(info.field_name)
        if v is None and field is not None and field.annotation == LocalizedString:
            return empty_localized()
        return v


class ObjectAttributeValueDefinition(APIDocument):
    """One allowed value of an enumerated attribute."""

    value: str | int | float | None = None
    display_value: LocalizedString = Field(default_factory=empty_localized)
    description: LocalizedString = Field(default_factory=empty_localized)
    image: str | None = None
    position: float | None = None

    @property
    def label(self) -> str:
        display = localized_default(self.display_value)
        if display:
            return display
        return "" if self.value is None else str(self.value)


class ObjectAttributeDefinition(APIDocument):
    """
    An attribute definition of a system or custom object type.

    Numeric constraints that the instance did not return stay None.
    """

    id: str = ""
    display_name: LocalizedString = Field(default_factory=empty_localized)
    description: LocalizedString = Field(default_factory=empty_localized)
    value_type: str = ""
    default_value: ObjectAttributeValueDefinition | None = None
    effective_id: str | None = None
    externally_defined: bool = False
    externally_managed: bool = False
    field_height: int | None = None
    field_width: int | None = None
    key: bool = False
    link: str | None = None
    localizable: bool = False
    mandatory: bool = False
    max_value: float | None = None
    min_length: int | None = None
    min_value: float | None = None
    multi_value_type: bool = False
    order_required: bool = False
    queryable: bool = False
    read_only: bool = False
    regular_expression: str | None = None
    requires_encoding: bool = False
    scale: int | None = None
    searchable: bool = False
    set_value_type: bool = False
    site_specific: bool = False
    system: bool = False
    unit: LocalizedString = Field(default_factory=empty_localized)
    value_definitions: list[ObjectAttributeValueDefinition] = Field(default_factory=list)
    visible: bool = False

    @property
    def is_enum(self) -> bool:
        return "enum" in self.value_type.lower()


class ObjectAttributeGroup(APIDocument):
    """A named, ordered group of attribute definition references."""

    id: str = ""
    display_name: LocalizedString = Field(default_factory=empty_localized)
    description: str | None = None
    internal: bool = False
    position: float | None = None
    link: str | None = None
    attribute_definitions: list[ObjectAttributeDefinition] = Field(default_factory=list)
    attribute_definitions_count: int = 0

    @property
    def attribute_ids(self) -> list[str]:
        return [a.id for a in self.attribute_definitions if a.id]

    @property
    def member_count(self) -> int:
        return self.attribute_definitions_count or len(self.attribute_definitions)


class ObjectTypeDefinition(APIDocument):
    """A system or custom object type definition."""

    object_type: str = ""
    display_name: LocalizedString = Field(default_factory=empty_localized)
    description: LocalizedString = Field(default_factory=empty_localized)
    attribute_definition_count: int = 0
    attribute_group_count: int = 0
    key_attribute_definition: ObjectAttributeDefinition | None = None
    link: str | None = None
    queryable: bool = False
    read_only: bool = False
    system: bool = False

    @property
    def is_custom(self) -> bool:
        """Custom object types are listed as CustomObject with a display name."""
        return self.object_type == CUSTOM_OBJECT_TYPE and bool(
            localized_default(self.display_name)
        )

    @property
    def type_id(self) -> str:
        """Identifier used in API paths for this object type."""
        if self.is_custom:
            return localized_default(self.display_name)
        return self.object_type


class Site(APIDocument):
    """A storefront site; only the fields shown in the tree."""

    id: str = ""
    display_name: LocalizedString = Field(default_factory=empty_localized)
