"""Typed pydantic models from GraphQL introspection."""

from .core import (
    GenerationError,
    GeneratorOptions,
    IntrospectionFetcher,
    UnknownScalarError,
    generate_types,
    generate_types_async,
)

__version__ = "0.1.0"

__all__ = [
    "GenerationError",
    "GeneratorOptions",
    "IntrospectionFetcher",
    "UnknownScalarError",
    "generate_types",
    "generate_types_async",
]
