"""Data model for a schema read from an introspection response.

These dataclasses mirror the shape of ``__schema.types`` one to one. They are
built once by the parser and only ever read afterwards. Nested references
(``of_type``, ``interfaces``, ``possible_types`` and field types) are kept as
the shallow values found in the document; the full definition of a named type
is always looked up through ``SchemaModel.get_type``.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from graphql import TypeKind

WRAPPER_KINDS = frozenset({TypeKind.LIST, TypeKind.NON_NULL})


@dataclass(frozen=True)
class SchemaEnumValue:
    """A single value of an ENUM type."""
    name: str
    description: str | None = None
    is_deprecated: bool = False
    deprecation_reason: str | None = None


@dataclass(frozen=True)
class SchemaField:
    """A field of an OBJECT or INTERFACE type."""
    name: str
    type: "SchemaType"
    description: str | None = None
    is_deprecated: bool = False
    deprecation_reason: str | None = None


@dataclass(frozen=True)
class SchemaType:
    """One type entry, or a LIST/NON_NULL wrapper around another one."""
    kind: TypeKind
    name: str | None = None
    description: str | None = None
    fields: tuple[SchemaField, ...] = ()
    interfaces: tuple["SchemaType", ...] = ()
    possible_types: tuple["SchemaType", ...] = ()
    enum_values: tuple[SchemaEnumValue, ...] = ()
    of_type: "SchemaType | None" = None

    @property
    def is_wrapper(self) -> bool:
        return self.kind in WRAPPER_KINDS

    def get_field(self, name: str) -> SchemaField | None:
        """Return the first field called ``name``, if any."""
        for schema_field in self.fields:
            if schema_field.name == name:
                return schema_field
        return None

    def has_field(self, name: str) -> bool:
        return self.get_field(name) is not None


@dataclass(frozen=True)
class SchemaModel:
    """The whole type table of an introspected schema."""
    types: tuple[SchemaType, ...]
    _by_name: Mapping[str, SchemaType] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self):
        by_name: dict[str, SchemaType] = {}
        for schema_type in self.types:
            if schema_type.name is not None:
                by_name.setdefault(schema_type.name, schema_type)
        object.__setattr__(self, "_by_name", MappingProxyType(by_name))

    @property
    def type_table(self) -> Mapping[str, SchemaType]:
        """Read-only ``name -> SchemaType`` lookup."""
        return self._by_name

    def get_type(self, name: str | None) -> SchemaType | None:
        """Look up the full definition of a named type."""
        if name is None:
            return None
        return self._by_name.get(name)

    def has_type(self, name: str | None) -> bool:
        return name is not None and name in self._by_name

    def types_of_kind(self, kind: TypeKind) -> list[SchemaType]:
        return [t for t in self.types if t.kind == kind]
