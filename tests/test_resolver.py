"""Tests for recursive type resolution."""

import pytest
from graphql import TypeKind

from gql_typegen.core.errors import IncompleteTypeReferenceError
from gql_typegen.core.ir import TypeDescriptor
from gql_typegen.core.naming import NamingPolicy
from gql_typegen.core.options import GeneratorOptions
from gql_typegen.core.resolver import TypeResolver, terminal_named_type
from gql_typegen.core.schema import SchemaType


def named(kind, name):
    return SchemaType(kind=kind, name=name)


def non_null(inner):
    return SchemaType(kind=TypeKind.NON_NULL, of_type=inner)


def list_of(inner):
    return SchemaType(kind=TypeKind.LIST, of_type=inner)


STRING = named(TypeKind.SCALAR, "String")


@pytest.fixture
def resolver():
    return TypeResolver(NamingPolicy(GeneratorOptions()))


class TestResolve:
    """Wrapper handling."""

    def test_named_scalar(self, resolver):
        descriptor = resolver.resolve(STRING)
        assert descriptor == TypeDescriptor.named("str", TypeKind.SCALAR)
        assert descriptor.nullable

    def test_non_null_is_dropped(self, resolver):
        assert resolver.resolve(non_null(STRING)) == resolver.resolve(STRING)

    def test_list(self, resolver):
        descriptor = resolver.resolve(list_of(STRING))
        assert descriptor.is_list
        assert descriptor.list_depth == 1
        assert descriptor.of_type.name == "str"

    def test_list_of_list_of_non_null(self, resolver):
        # [[String!]!]!
        descriptor = resolver.resolve(non_null(list_of(non_null(list_of(non_null(STRING))))))
        assert descriptor.list_depth == 2
        assert descriptor.display_name == "List[List[str]]"
        assert descriptor.terminal.name == "str"
        # every level stays nullable
        assert descriptor.nullable and descriptor.of_type.nullable and descriptor.terminal.nullable

    def test_no_depth_limit(self, resolver):
        ref = STRING
        for _ in range(20):
            ref = non_null(list_of(ref))
        assert resolver.resolve(ref).list_depth == 20

    def test_field_context_reaches_naming(self):
        options = GeneratorOptions(type_field_to_type_name_override={("Order", "tags"): "bytes"})
        resolver = TypeResolver(NamingPolicy(options))
        descriptor = resolver.resolve(list_of(non_null(STRING)), "Order", "tags")
        assert descriptor.display_name == "List[bytes]"

    def test_truncated_chain(self, resolver):
        with pytest.raises(IncompleteTypeReferenceError):
            resolver.resolve(non_null(list_of(SchemaType(kind=TypeKind.NON_NULL))))

    def test_kind_kept_on_named_descriptor(self, resolver):
        descriptor = resolver.resolve(list_of(named(TypeKind.UNION, "SearchResult")))
        assert descriptor.terminal == TypeDescriptor.named("ISearchResult", TypeKind.UNION)

    def test_type_name_ignores_field_context(self, resolver):
        assert resolver.type_name(non_null(list_of(STRING))) == "List[str]"


class TestTerminalNamedType:
    """Stripping wrappers down to the schema type itself."""

    def test_returns_schema_type(self):
        order = named(TypeKind.OBJECT, "Order")
        assert terminal_named_type(non_null(list_of(non_null(order)))) is order

    def test_named_type_is_returned_as_is(self):
        assert terminal_named_type(STRING) is STRING

    def test_truncated_chain(self):
        with pytest.raises(IncompleteTypeReferenceError):
            terminal_named_type(list_of(non_null(SchemaType(kind=TypeKind.LIST))))
