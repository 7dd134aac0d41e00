"""Generator configuration."""

import json
import os
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping

from .errors import ConfigurationError


def _frozen(mapping: Mapping | None) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class GeneratorOptions:
    """Options consumed by the naming policy and the emitter.

    Attributes:
        namespace: Name recorded in the generated module's header.
        scalar_name_to_type_name: GraphQL scalar name -> Python type name.
            Dotted names (``decimal.Decimal``) are imported automatically.
        type_field_to_type_name_override: ``(type name, field name)`` ->
            Python type name, for scalar and enum fields.
        enum_members_as_string: Type enum fields as ``str`` instead of the
            enum class. Enum classes are still generated.
        include_introspection_types: Also emit ``__Schema``, ``__Type``...
        runtime_object_types: Object types supplied by ``gql_typegen.runtime``
            and therefore not generated.
    """

    namespace: str = "generated"
    scalar_name_to_type_name: Mapping[str, str] = field(default_factory=dict)
    type_field_to_type_name_override: Mapping[tuple[str, str], str] = field(
        default_factory=dict
    )
    enum_members_as_string: bool = False
    include_introspection_types: bool = False
    runtime_object_types: frozenset[str] = frozenset({"PageInfo"})

    def __post_init__(self):
        object.__setattr__(
            self, "scalar_name_to_type_name", _frozen(self.scalar_name_to_type_name)
        )
        object.__setattr__(
            self,
            "type_field_to_type_name_override",
            _frozen(self.type_field_to_type_name_override),
        )
        object.__setattr__(
            self, "runtime_object_types", frozenset(self.runtime_object_types)
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GeneratorOptions":
        """Build options from a JSON-style config mapping.

        Example:
            {
                "namespace": "shop",
                "scalars": {"DateTime": "datetime", "Money": "decimal.Decimal"},
                "overrides": {"Dispute.evidenceDueBy": "datetime"},
                "enumMembersAsString": true
            }
        """
        unknown = set(data) - {
            "namespace",
            "scalars",
            "overrides",
            "enumMembersAsString",
            "includeIntrospectionTypes",
        }
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return cls(
            namespace=data.get("namespace", "generated"),
            scalar_name_to_type_name=dict(data.get("scalars") or {}),
            type_field_to_type_name_override=parse_overrides(data.get("overrides") or {}),
            enum_members_as_string=bool(data.get("enumMembersAsString", False)),
            include_introspection_types=bool(data.get("includeIntrospectionTypes", False)),
        )

    @classmethod
    def from_file(cls, path: str | os.PathLike) -> "GeneratorOptions":
        """Load options from a JSON config file."""
        with open(path, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Config file {path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object")
        return cls.from_mapping(data)

    def merged(self, **changes) -> "GeneratorOptions":
        """Return a copy with mapping options merged and scalars replaced."""
        scalars = {**self.scalar_name_to_type_name, **changes.pop("scalar_name_to_type_name", {})}
        overrides = {
            **self.type_field_to_type_name_override,
            **changes.pop("type_field_to_type_name_override", {}),
        }
        return replace(
            self,
            scalar_name_to_type_name=scalars,
            type_field_to_type_name_override=overrides,
            **changes,
        )


def parse_overrides(raw: Mapping[str, str]) -> dict[tuple[str, str], str]:
    """Convert ``{"Type.field": "python_type"}`` into tuple-keyed overrides."""
    overrides = {}
    for key, type_name in raw.items():
        type_part, sep, field_part = key.partition(".")
        if not sep or not type_part or not field_part:
            raise ConfigurationError(
                f"Override key '{key}' must look like 'TypeName.fieldName'"
            )
        overrides[(type_part, field_part)] = type_name
    return overrides
