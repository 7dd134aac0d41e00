"""Core modules for compiling GraphQL introspection into Python models."""

import os
from typing import Any, Optional

from .emitter import TypeEmitter
from .errors import (
    ConfigurationError,
    GenerationError,
    IncompleteTypeReferenceError,
    InvalidIntrospectionError,
    MalformedSchemaWarning,
    UnknownScalarError,
    UnsupportedTypeKindError,
)
from .fetcher import (
    INTROSPECTION_QUERY,
    GraphQLError,
    IntrospectionFetcher,
    SendQuery,
)
from .generator import CodeGenerator
from .hooks import (
    AddHeaderHook,
    FilterTypesHook,
    HookRunner,
    PostGenerateHook,
    PreGenerateHook,
)
from .ir import (
    CapabilityKind,
    IRCapability,
    IRClass,
    IREnum,
    IREnumValue,
    IRField,
    IRInterface,
    IRModule,
    IRUnion,
    TypeDescriptor,
)
from .naming import NamingPolicy
from .options import GeneratorOptions
from .parser import IntrospectionParser
from .resolver import TypeResolver, terminal_named_type
from .scalars import ScalarRegistry
from .schema import SchemaEnumValue, SchemaField, SchemaModel, SchemaType


def generate_types(
    options: GeneratorOptions,
    document: dict[str, Any] | str | os.PathLike,
    template_dir: Optional[str] = None,
    hooks: Optional[HookRunner] = None,
) -> str:
    """Compile an introspection document into the source of a models module.

    Raises UnknownScalarError (or another GenerationError) before anything is
    rendered, so a failed run never produces partial output.
    """
    model = IntrospectionParser(document).parse()
    module = TypeEmitter(options).emit(model)
    return CodeGenerator(module, template_dir=template_dir, hooks=hooks).render(
        f"{options.namespace}.py"
    )


async def generate_types_async(
    options: GeneratorOptions,
    send_query: SendQuery,
    template_dir: Optional[str] = None,
    hooks: Optional[HookRunner] = None,
) -> str:
    """Run the introspection query through ``send_query``, then compile it.

    Example:
        async with IntrospectionFetcher(url) as fetcher:
            source = await generate_types_async(options, fetcher.send_query)
    """
    document = await send_query(INTROSPECTION_QUERY)
    return generate_types(options, document, template_dir=template_dir, hooks=hooks)


__all__ = [
    # Entry points
    "generate_types",
    "generate_types_async",
    # Options
    "GeneratorOptions",
    # Errors
    "GenerationError",
    "ConfigurationError",
    "IncompleteTypeReferenceError",
    "InvalidIntrospectionError",
    "MalformedSchemaWarning",
    "UnknownScalarError",
    "UnsupportedTypeKindError",
    # Schema model
    "SchemaEnumValue",
    "SchemaField",
    "SchemaModel",
    "SchemaType",
    # Parser
    "IntrospectionParser",
    # Naming and resolution
    "NamingPolicy",
    "TypeResolver",
    "terminal_named_type",
    # IR types
    "CapabilityKind",
    "IRCapability",
    "IRClass",
    "IREnum",
    "IREnumValue",
    "IRField",
    "IRInterface",
    "IRModule",
    "IRUnion",
    "TypeDescriptor",
    # Emitter / generator
    "TypeEmitter",
    "CodeGenerator",
    "ScalarRegistry",
    # Hooks
    "PreGenerateHook",
    "PostGenerateHook",
    "AddHeaderHook",
    "FilterTypesHook",
    "HookRunner",
    # Fetcher
    "INTROSPECTION_QUERY",
    "GraphQLError",
    "IntrospectionFetcher",
    "SendQuery",
]
