"""Tests for the union, interface and pagination detectors."""

import warnings

import pytest

from gql_typegen.core.errors import MalformedSchemaWarning
from gql_typegen.core.ir import CapabilityKind, IRCapability
from gql_typegen.core.naming import NamingPolicy
from gql_typegen.core.options import GeneratorOptions
from gql_typegen.core.parser import IntrospectionParser
from gql_typegen.core.patterns import (
    build_union_membership,
    common_fields,
    detect_pagination,
    interfaces_of,
    own_interface_fields,
    possible_types_of,
)
from gql_typegen.core.resolver import TypeResolver
from introspection_builders import (
    document,
    field,
    interface_ref,
    interface_type,
    list_of,
    non_null,
    object_ref,
    object_type,
    scalar_ref,
    union_type,
)


def parse(*types):
    return IntrospectionParser(document(*types)).parse()


@pytest.fixture
def naming():
    return NamingPolicy(GeneratorOptions())


@pytest.fixture
def resolver(naming):
    return TypeResolver(naming)


class TestUnionFlattening:
    """Implementers of a union and their shared fields."""

    def test_intersection_by_name_and_type(self, resolver):
        model = parse(
            object_type("A", [field("x", scalar_ref("Int")), field("y", scalar_ref("String"))]),
            object_type("B", [field("x", scalar_ref("Int")), field("z", scalar_ref("Boolean"))]),
            union_type("U", ["A", "B"]),
        )
        implementers = possible_types_of(model.get_type("U"), model)
        shared = common_fields(implementers, resolver)
        assert [f.name for f in shared] == ["x"]

    def test_same_name_different_type_is_not_shared(self, resolver):
        model = parse(
            object_type("A", [field("x", scalar_ref("Int"))]),
            object_type("B", [field("x", scalar_ref("String"))]),
            union_type("U", ["A", "B"]),
        )
        implementers = possible_types_of(model.get_type("U"), model)
        assert common_fields(implementers, resolver) == []

    def test_nullability_does_not_matter(self, resolver):
        model = parse(
            object_type("A", [field("x", non_null(scalar_ref("Int")))]),
            object_type("B", [field("x", scalar_ref("Int"))]),
            union_type("U", ["A", "B"]),
        )
        implementers = possible_types_of(model.get_type("U"), model)
        assert [f.name for f in common_fields(implementers, resolver)] == ["x"]

    def test_first_implementer_order(self, resolver):
        model = parse(
            object_type("A", [field("b", scalar_ref("Int")), field("a", scalar_ref("Int"))]),
            object_type("B", [field("a", scalar_ref("Int")), field("b", scalar_ref("Int"))]),
            union_type("U", ["A", "B"]),
        )
        implementers = possible_types_of(model.get_type("U"), model)
        assert [f.name for f in common_fields(implementers, resolver)] == ["b", "a"]

    def test_no_implementers(self, resolver):
        assert common_fields([], resolver) == []

    def test_duplicate_and_dangling_members(self):
        model = parse(
            object_type("A", []),
            union_type("U", ["A", "A", "Ghost"]),
        )
        with pytest.warns(MalformedSchemaWarning) as record:
            implementers = possible_types_of(model.get_type("U"), model)
        assert [t.name for t in implementers] == ["A"]
        messages = [str(w.message) for w in record]
        assert any("more than once" in m for m in messages)
        assert any("Ghost" in m for m in messages)

    def test_references_resolve_to_full_types(self):
        model = parse(
            object_type("A", [field("x", scalar_ref("Int"))]),
            union_type("U", ["A"]),
        )
        (implementer,) = possible_types_of(model.get_type("U"), model)
        assert implementer is model.get_type("A")
        assert implementer.has_field("x")

    def test_union_membership_index(self):
        model = parse(
            object_type("A", []),
            object_type("B", []),
            union_type("U", ["A", "B", "A"]),
            union_type("V", ["A"]),
        )
        membership = build_union_membership(model)
        assert [u.name for u in membership["A"]] == ["U", "V"]
        assert [u.name for u in membership["B"]] == ["U"]
        with pytest.raises(TypeError):
            membership["C"] = ()


class TestInterfaceFlattening:
    """Parent interfaces and inherited fields."""

    @pytest.fixture
    def model(self):
        return parse(
            interface_type("Node", [field("id", scalar_ref("ID"))], possible_types=["Order"]),
            interface_type(
                "Entity",
                [field("id", scalar_ref("ID")), field("createdAt", scalar_ref("String"))],
                possible_types=["Order"],
                interfaces=["Node"],
            ),
            object_type("Order", [field("id", scalar_ref("ID"))], interfaces=["Entity", "Node"]),
        )

    def test_parents(self, model):
        assert [p.name for p in interfaces_of(model.get_type("Entity"), model)] == ["Node"]

    def test_own_fields_exclude_inherited(self, model):
        entity = model.get_type("Entity")
        own = own_interface_fields(entity, interfaces_of(entity, model))
        assert [f.name for f in own] == ["createdAt"]

    def test_root_interface_keeps_all_fields(self, model):
        node = model.get_type("Node")
        assert [f.name for f in own_interface_fields(node, [])] == ["id"]

    def test_dangling_interface(self):
        model = parse(object_type("Order", [], interfaces=["Missing"]))
        with pytest.warns(MalformedSchemaWarning, match="Missing"):
            assert interfaces_of(model.get_type("Order"), model) == []


def connection_schema(edges=True, nodes=True, edge_fields=None):
    connection_fields = []
    if edges:
        connection_fields.append(field("edges", list_of(non_null(object_ref("OrderEdge")))))
    if nodes:
        connection_fields.append(field("nodes", non_null(list_of(non_null(object_ref("Order"))))))
    connection_fields.append(field("pageInfo", non_null(object_ref("PageInfo"))))
    if edge_fields is None:
        edge_fields = [
            field("cursor", non_null(scalar_ref("String"))),
            field("node", non_null(object_ref("Order"))),
        ]
    return parse(
        object_type("Order", [field("id", scalar_ref("ID"))]),
        object_type("OrderEdge", edge_fields),
        object_type("OrdersConnection", connection_fields),
        object_type("PageInfo", []),
    )


class TestPagination:
    """Connection/Edge/Node detection."""

    def test_edges_and_nodes(self, naming):
        model = connection_schema()
        capabilities = detect_pagination(model.get_type("OrdersConnection"), model, naming)
        assert capabilities == [
            IRCapability(CapabilityKind.NODES_AND_EDGES, node_type="Order", edge_type="OrderEdge")
        ]

    def test_edges_only(self, naming):
        model = connection_schema(nodes=False)
        capabilities = detect_pagination(model.get_type("OrdersConnection"), model, naming)
        assert capabilities == [
            IRCapability(CapabilityKind.EDGES, node_type="Order", edge_type="OrderEdge")
        ]

    def test_nodes_only(self, naming):
        model = connection_schema(edges=False)
        capabilities = detect_pagination(model.get_type("OrdersConnection"), model, naming)
        assert capabilities == [IRCapability(CapabilityKind.NODES, node_type="Order")]

    def test_neither(self, naming):
        model = connection_schema(edges=False, nodes=False)
        assert detect_pagination(model.get_type("OrdersConnection"), model, naming) == []

    def test_edge_without_node_falls_back_to_nodes(self, naming):
        model = connection_schema(edge_fields=[field("cursor", scalar_ref("String"))])
        with pytest.warns(MalformedSchemaWarning, match="OrderEdge"):
            capabilities = detect_pagination(model.get_type("OrdersConnection"), model, naming)
        assert capabilities == [IRCapability(CapabilityKind.NODES, node_type="Order")]

    def test_edge_without_node_and_no_nodes(self, naming):
        model = connection_schema(nodes=False, edge_fields=[field("cursor", scalar_ref("String"))])
        with pytest.warns(MalformedSchemaWarning):
            assert detect_pagination(model.get_type("OrdersConnection"), model, naming) == []

    def test_edge_type(self, naming):
        model = connection_schema()
        capabilities = detect_pagination(model.get_type("OrderEdge"), model, naming)
        assert capabilities == [IRCapability(CapabilityKind.EDGE, node_type="Order")]

    def test_edge_suffix_without_node(self, naming):
        model = parse(object_type("KnifeEdge", [field("sharpness", scalar_ref("Int"))]))
        assert detect_pagination(model.get_type("KnifeEdge"), model, naming) == []

    def test_other_names_ignored(self, naming):
        model = connection_schema()
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert detect_pagination(model.get_type("Order"), model, naming) == []

    def test_interface_node_uses_contract_name(self, naming):
        model = parse(
            interface_type("Node", [field("id", scalar_ref("ID"))], possible_types=[]),
            object_type("NodeConnection", [field("nodes", list_of(interface_ref("Node")))]),
        )
        capabilities = detect_pagination(model.get_type("NodeConnection"), model, naming)
        assert capabilities == [IRCapability(CapabilityKind.NODES, node_type="INode")]
