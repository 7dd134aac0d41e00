"""Introspection response parser.

Reads the JSON answer to the introspection query and produces a SchemaModel.
"""

import json
import logging
import os
import warnings
from typing import Any

from graphql import TypeKind

from .errors import (
    InvalidIntrospectionError,
    MalformedSchemaWarning,
    UnsupportedTypeKindError,
)
from .schema import SchemaEnumValue, SchemaField, SchemaModel, SchemaType

logger = logging.getLogger(__name__)

# Strings starting with one of these are JSON text rather than a path
_JSON_STARTS = ("{", "[", '"')


class IntrospectionParser:
    """Parses an introspection document into the schema model.

    The document may be a decoded dict, raw JSON text, or a path to a JSON
    file. Both ``{"data": {"__schema": ...}}`` and ``{"__schema": ...}`` are
    accepted.
    """

    def __init__(self, document: dict[str, Any] | str | os.PathLike):
        self.document = document

    def parse(self) -> SchemaModel:
        """Parse the document and return the complete model."""
        schema = self._locate_schema(self._load(self.document))
        raw_types = schema.get("types")
        if not isinstance(raw_types, list):
            raise InvalidIntrospectionError("Introspection JSON missing __schema.types[]")

        types: list[SchemaType] = []
        seen: set[str] = set()
        for raw in raw_types:
            schema_type = self._process_type(raw)
            if schema_type.name in seen:
                warnings.warn(
                    f"Type '{schema_type.name}' is listed more than once; "
                    "keeping the first definition",
                    MalformedSchemaWarning,
                    stacklevel=2,
                )
                continue
            if schema_type.name is not None:
                seen.add(schema_type.name)
            types.append(schema_type)

        logger.debug("Parsed %d types from introspection document", len(types))
        return SchemaModel(types=tuple(types))

    @staticmethod
    def _load(document) -> Any:
        if isinstance(document, dict):
            return document
        try:
            if isinstance(document, os.PathLike) or (
                isinstance(document, str) and not document.lstrip().startswith(_JSON_STARTS)
            ):
                with open(document, encoding="utf-8") as f:
                    return json.load(f)
            return json.loads(document)
        except OSError as e:
            raise InvalidIntrospectionError(f"Cannot read introspection document: {e}") from e
        except json.JSONDecodeError as e:
            raise InvalidIntrospectionError(f"Introspection document is not valid JSON: {e}") from e

    @staticmethod
    def _locate_schema(root: Any) -> dict[str, Any]:
        """Find ``__schema`` under the ``data`` envelope or at the top level."""
        if not isinstance(root, dict):
            raise InvalidIntrospectionError("Introspection document must be a JSON object")
        data = root.get("data") if isinstance(root.get("data"), dict) else root
        schema = data.get("__schema")
        if not isinstance(schema, dict):
            raise InvalidIntrospectionError("Introspection JSON missing data.__schema")
        return schema

    def _process_type(self, raw: dict[str, Any]) -> SchemaType:
        kind = self._parse_kind(raw.get("kind"), raw.get("name"))
        return SchemaType(
            kind=kind,
            name=raw.get("name"),
            description=raw.get("description"),
            fields=tuple(self._process_field(f) for f in raw.get("fields") or ()),
            interfaces=tuple(self._process_type(i) for i in raw.get("interfaces") or ()),
            possible_types=tuple(
                self._process_type(p) for p in raw.get("possibleTypes") or ()
            ),
            enum_values=tuple(
                self._process_enum_value(v) for v in raw.get("enumValues") or ()
            ),
            of_type=self._process_type(raw["ofType"]) if raw.get("ofType") else None,
        )

    def _process_field(self, raw: dict[str, Any]) -> SchemaField:
        type_ref = raw.get("type")
        if not isinstance(type_ref, dict):
            raise InvalidIntrospectionError(f"Field '{raw.get('name')}' has no type")
        return SchemaField(
            name=raw["name"],
            type=self._process_type(type_ref),
            description=raw.get("description"),
            is_deprecated=bool(raw.get("isDeprecated")),
            deprecation_reason=raw.get("deprecationReason"),
        )

    @staticmethod
    def _process_enum_value(raw: dict[str, Any]) -> SchemaEnumValue:
        return SchemaEnumValue(
            name=raw["name"],
            description=raw.get("description"),
            is_deprecated=bool(raw.get("isDeprecated")),
            deprecation_reason=raw.get("deprecationReason"),
        )

    @staticmethod
    def _parse_kind(kind: Any, type_name: str | None) -> TypeKind:
        try:
            return TypeKind[kind]
        except (KeyError, TypeError):
            raise UnsupportedTypeKindError(kind, type_name) from None
