"""Maps schema types and fields to Python type names."""

from graphql import TypeKind

from .errors import UnknownScalarError, UnsupportedTypeKindError
from .options import GeneratorOptions
from .schema import SchemaType

BUILTIN_SCALARS = {
    "String": "str",
    "Int": "int",
    "Float": "float",
    "Boolean": "bool",
    "ID": "str",
}

STRING_TYPE_NAME = "str"

# Interfaces and unions share a flat namespace with the classes implementing them
CONTRACT_PREFIX = "I"


class NamingPolicy:
    """Resolves the target type name of a named schema type.

    Precedence, highest first:
      1. ``(containing type, field)`` override, for scalar and enum fields
      2. enums rendered as ``str`` when ``enum_members_as_string`` is set
      3. the enum's own name
      4. scalars: configured mapping, then the built-in table, else
         UnknownScalarError
      5. objects: their own name
      6. interfaces and unions: their name with the contract prefix
    """

    def __init__(self, options: GeneratorOptions):
        self.options = options

    def type_name(
        self,
        schema_type: SchemaType,
        containing_type: str | None = None,
        field_name: str | None = None,
    ) -> str:
        kind = schema_type.kind
        if kind == TypeKind.ENUM:
            override = self._override(containing_type, field_name)
            if override is not None:
                return override
            if self.options.enum_members_as_string:
                return STRING_TYPE_NAME
            return schema_type.name
        if kind == TypeKind.SCALAR:
            return self.scalar_type_name(schema_type.name, containing_type, field_name)
        if kind in (TypeKind.OBJECT, TypeKind.INPUT_OBJECT):
            return schema_type.name
        if kind in (TypeKind.INTERFACE, TypeKind.UNION):
            return self.contract_name(schema_type.name)
        raise UnsupportedTypeKindError(kind, schema_type.name)

    def scalar_type_name(
        self,
        scalar_name: str,
        containing_type: str | None = None,
        field_name: str | None = None,
    ) -> str:
        override = self._override(containing_type, field_name)
        if override is not None:
            return override
        configured = self.options.scalar_name_to_type_name.get(scalar_name)
        if configured is not None:
            return configured
        builtin = BUILTIN_SCALARS.get(scalar_name)
        if builtin is not None:
            return builtin
        raise UnknownScalarError(scalar_name, containing_type, field_name)

    @staticmethod
    def contract_name(schema_name: str) -> str:
        return f"{CONTRACT_PREFIX}{schema_name}"

    def _override(self, containing_type: str | None, field_name: str | None) -> str | None:
        if containing_type is None or field_name is None:
            return None
        return self.options.type_field_to_type_name_override.get((containing_type, field_name))
