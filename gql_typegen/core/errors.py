"""Exceptions and warnings raised while compiling a schema into models."""


class GenerationError(Exception):
    """Base class for errors that abort generation."""


class InvalidIntrospectionError(GenerationError):
    """The document is not shaped like an introspection response."""


class UnsupportedTypeKindError(GenerationError):
    """A type kind outside the known GraphQL set was encountered."""

    def __init__(self, kind, type_name: str | None = None):
        self.kind = kind
        self.type_name = type_name
        where = f" on type '{type_name}'" if type_name else ""
        super().__init__(f"Unexpected type kind '{kind}'{where}")


class UnknownScalarError(GenerationError):
    """A scalar has no override, configured mapping or built-in mapping."""

    def __init__(
        self,
        scalar_name: str,
        type_name: str | None = None,
        field_name: str | None = None,
    ):
        self.scalar_name = scalar_name
        self.type_name = type_name
        self.field_name = field_name
        location = ""
        if type_name and field_name:
            location = f" (used by {type_name}.{field_name})"
        super().__init__(
            f"Unknown scalar type '{scalar_name}'{location}. "
            "Please provide a target type for this type."
        )


class IncompleteTypeReferenceError(GenerationError):
    """A LIST/NON_NULL chain ended before reaching a named type.

    Usually means the schema nests wrappers deeper than the introspection
    query fetched.
    """


class ConfigurationError(GenerationError):
    """Generator options could not be understood."""


class MalformedSchemaWarning(UserWarning):
    """Dangling or duplicate references that were dropped during generation."""
