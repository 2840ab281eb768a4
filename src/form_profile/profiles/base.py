"""Typed view of a profile document and the options accepted by ``add``.

A profile document is a plain mapping of section name to section content.
Only a fixed set of sections is understood here:

- list sections: ``required``, ``optional``
- mapping sections: ``default``, ``field_filters``, ``constraints``,
  ``constraint_methods``

Everything else (``dependencies``, ``msgs``, ``filters``, ...) is carried
along untouched.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from form_profile.errors import ShapeMismatchError


LIST_SECTIONS: tuple[str, ...] = ("required", "optional")
MAPPING_SECTIONS: tuple[str, ...] = (
    "default",
    "field_filters",
    "constraints",
    "constraint_methods",
)
RECOGNIZED_SECTIONS: tuple[str, ...] = LIST_SECTIONS + MAPPING_SECTIONS


def as_sequence(value: Any) -> list[Any]:
    """Read a section value as a list.

    ``None`` becomes an empty list, lists and tuples are copied, and any other
    lone value is wrapped into a one-element list.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def read_list_section(document: Mapping[str, Any], section: str) -> list[Any]:
    """Read a list section, rejecting mappings stored where a list belongs."""
    value = document.get(section)
    if isinstance(value, Mapping):
        raise ShapeMismatchError(section, "list", value)
    return as_sequence(value)


def read_mapping_section(document: Mapping[str, Any], section: str) -> Mapping[str, Any]:
    """Read a mapping section, rejecting anything that is not a mapping."""
    value = document.get(section)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ShapeMismatchError(section, "mapping", value)
    return value


def declared_fields(document: Mapping[str, Any]) -> list[str]:
    """All field names declared as required or optional, in document order."""
    fields: list[str] = []
    for section in LIST_SECTIONS:
        for name in read_list_section(document, section):
            if name not in fields:
                fields.append(name)
    return fields


class ProfileDocument(BaseModel):
    """Typed view over a profile document.

    Recognized sections are explicit attributes; any other section is kept as
    an extra and written back unchanged by :meth:`to_document`.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    required: list[str] | None = Field(default=None, description="Required field names")
    optional: list[str] | None = Field(default=None, description="Optional field names")
    defaults: dict[str, Any] | None = Field(
        default=None,
        alias="default",
        description="Default values for absent fields",
    )
    field_filters: dict[str, Any] | None = Field(
        default=None,
        description="Per-field input filters",
    )
    constraints: dict[str, Any] | None = Field(
        default=None,
        description="Per-field constraints",
    )
    constraint_methods: dict[str, Any] | None = Field(
        default=None,
        description="Per-field constraint methods",
    )

    @field_validator("required", "optional", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> list[Any] | None:
        if value is None or isinstance(value, Mapping):
            return value
        return as_sequence(value)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ProfileDocument":
        """Build a typed view, raising ShapeMismatchError on bad sections."""
        for section in LIST_SECTIONS:
            read_list_section(data, section)
        for section in MAPPING_SECTIONS:
            read_mapping_section(data, section)
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            error = e.errors()[0]
            loc = error["loc"]
            section = str(loc[0]) if loc else "profile"
            actual: Any = data
            for key in loc:
                try:
                    actual = actual[key]
                except (KeyError, IndexError, TypeError):
                    break
            expected = "list of field names" if section in LIST_SECTIONS else "mapping"
            raise ShapeMismatchError(section, expected, actual) from e

    @property
    def extra_sections(self) -> dict[str, Any]:
        """Sections that projection leaves untouched."""
        return dict(self.model_extra or {})

    def field_names(self) -> list[str]:
        """Required then optional field names."""
        return declared_fields(self.to_document())

    def to_document(self) -> dict[str, Any]:
        """Convert back to a plain mapping, omitting absent sections."""
        extras = self.model_extra or {}
        return {
            name: value
            for name, value in self.model_dump(by_alias=True).items()
            if value is not None or name in extras
        }


class FieldOptions(BaseModel):
    """Options accepted when adding a field to a profile.

    Only options passed explicitly are applied; use ``model_fields_set`` to
    tell them apart from the defaults.
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    required: bool = Field(default=False, description="Declare the field as required")
    default: Any = Field(default=None, description="Default value for the field")
    dependencies: Any = Field(default=None, description="Fields required alongside this one")
    filters: Any = Field(default=None, description="Filters applied to the field")
    constraints: Any = Field(default=None, description="Constraint methods for the field")
    msgs: dict[str, Any] | None = Field(
        default=None,
        description="Messages merged into msgs.constraints",
    )

    @field_validator("required", mode="before")
    @classmethod
    def _truthy(cls, value: Any) -> bool:
        return bool(value)

    def given(self, name: str) -> bool:
        return name in self.model_fields_set
