"""Builds the ordered list of type definitions for a schema."""

import logging
from dataclasses import dataclass
from typing import Mapping

from graphql import TypeKind

from .errors import UnsupportedTypeKindError
from .ir import (
    IRClass,
    IRDefinition,
    IREnum,
    IREnumValue,
    IRField,
    IRInterface,
    IRModule,
    IRUnion,
)
from .naming import NamingPolicy
from .options import GeneratorOptions
from .patterns import (
    build_union_membership,
    common_fields,
    detect_pagination,
    interfaces_of,
    own_interface_fields,
    possible_types_of,
)
from .resolver import TypeResolver
from .schema import SchemaField, SchemaModel, SchemaType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _RunContext:
    """Lookups built once per run and handed to every detector."""
    model: SchemaModel
    union_membership: Mapping[str, tuple[SchemaType, ...]]


class TypeEmitter:
    """Compiles a SchemaModel into an IRModule.

    One definition per schema type, in schema order. Scalars and input
    objects produce nothing; neither do object types the runtime package
    already provides. Emitting is a pure function of the model and the
    options: nothing is cached between calls to ``emit``.

    Example:
        model = IntrospectionParser(document).parse()
        module = TypeEmitter(GeneratorOptions(namespace="shop")).emit(model)
    """

    def __init__(self, options: GeneratorOptions):
        self.options = options
        self.naming = NamingPolicy(options)
        self.resolver = TypeResolver(self.naming)

    def emit(self, model: SchemaModel) -> IRModule:
        context = _RunContext(model=model, union_membership=build_union_membership(model))
        module = IRModule(
            namespace=self.options.namespace,
            enum_members_as_string=self.options.enum_members_as_string,
        )
        for schema_type in model.types:
            definition = self._emit_type(schema_type, context)
            if definition is not None:
                logger.debug("Emitted %s %s", type(definition).__name__, definition.name)
                module.definitions.append(definition)

        logger.info(
            "Generated %d enums, %d interfaces, %d unions, %d classes",
            len(module.enums),
            len(module.interfaces),
            len(module.unions),
            len(module.classes),
        )
        return module

    def _emit_type(self, schema_type: SchemaType, context: _RunContext) -> IRDefinition | None:
        kind = schema_type.kind
        if kind in (TypeKind.SCALAR, TypeKind.INPUT_OBJECT):
            return None
        if self._is_skipped(schema_type.name):
            return None
        if kind == TypeKind.ENUM:
            return self._emit_enum(schema_type)
        if kind == TypeKind.OBJECT:
            return self._emit_class(schema_type, context)
        if kind == TypeKind.INTERFACE:
            return self._emit_interface(schema_type, context)
        if kind == TypeKind.UNION:
            return self._emit_union(schema_type, context)
        raise UnsupportedTypeKindError(kind, schema_type.name)

    def _is_skipped(self, name: str | None) -> bool:
        if name in self.options.runtime_object_types:
            return True
        return (
            name is not None
            and name.startswith("__")
            and not self.options.include_introspection_types
        )

    def _emit_enum(self, schema_type: SchemaType) -> IREnum:
        return IREnum(
            name=schema_type.name,
            description=schema_type.description,
            values=[
                IREnumValue(
                    name=v.name,
                    description=v.description,
                    is_deprecated=v.is_deprecated,
                    deprecation_reason=_clean_reason(v.deprecation_reason),
                )
                for v in schema_type.enum_values
            ],
            string_constants=self.options.enum_members_as_string,
        )

    def _emit_union(self, schema_type: SchemaType, context: _RunContext) -> IRUnion:
        implementers = possible_types_of(schema_type, context.model)
        shared = common_fields(implementers, self.resolver)
        return IRUnion(
            name=self.naming.type_name(schema_type),
            schema_name=schema_type.name,
            description=schema_type.description,
            fields=[self._emit_field(schema_type, f) for f in shared],
            possible_types=self._discriminator_map(implementers),
            narrowing_accessors=[self.naming.type_name(t) for t in implementers],
        )

    def _emit_interface(self, schema_type: SchemaType, context: _RunContext) -> IRInterface:
        parents = interfaces_of(schema_type, context.model)
        implementers = possible_types_of(schema_type, context.model)
        # A parent contract already narrows to every implementer
        accessors = [] if parents else [self.naming.type_name(t) for t in implementers]
        return IRInterface(
            name=self.naming.type_name(schema_type),
            schema_name=schema_type.name,
            description=schema_type.description,
            fields=[
                self._emit_field(schema_type, f, read_only=True)
                for f in own_interface_fields(schema_type, parents)
            ],
            parents=[self.naming.type_name(p) for p in parents],
            possible_types=self._discriminator_map(implementers),
            narrowing_accessors=accessors,
        )

    def _emit_class(self, schema_type: SchemaType, context: _RunContext) -> IRClass:
        contracts = [self.naming.type_name(i) for i in interfaces_of(schema_type, context.model)]
        for union in context.union_membership.get(schema_type.name, ()):
            contract = self.naming.type_name(union)
            if contract not in contracts:
                contracts.append(contract)
        return IRClass(
            name=self.naming.type_name(schema_type),
            schema_name=schema_type.name,
            description=schema_type.description,
            fields=[self._emit_field(schema_type, f) for f in schema_type.fields],
            contracts=contracts,
            capabilities=detect_pagination(schema_type, context.model, self.naming),
        )

    def _emit_field(
        self,
        containing_type: SchemaType,
        schema_field: SchemaField,
        read_only: bool = False,
    ) -> IRField:
        return IRField(
            name=schema_field.name,
            type=self.resolver.resolve(schema_field.type, containing_type.name, schema_field.name),
            description=schema_field.description,
            is_deprecated=schema_field.is_deprecated,
            deprecation_reason=_clean_reason(schema_field.deprecation_reason),
            read_only=read_only,
        )

    def _discriminator_map(self, implementers: list[SchemaType]) -> dict[str, str]:
        return {t.name: self.naming.type_name(t) for t in implementers}


def _clean_reason(reason: str | None) -> str | None:
    if reason is None:
        return None
    return reason.rstrip()
