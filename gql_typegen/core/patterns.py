"""Structural analyses over the schema graph.

Three independent detectors live here:

* union flattening: implementers of a union and the fields they all share,
* interface flattening: parent interfaces and the fields they already declare,
* Relay pagination: the Connection/Edge/Node shape, recognised by the
  ``...Connection`` / ``...Edge`` naming convention.

All lookups go through the model's name table and the union membership index,
both passed in explicitly so concurrent runs never share mutable state.
"""

import logging
import warnings
from types import MappingProxyType
from typing import Iterable, Mapping

from graphql import TypeKind

from .errors import MalformedSchemaWarning
from .ir import CapabilityKind, IRCapability
from .naming import NamingPolicy
from .resolver import TypeResolver, terminal_named_type
from .schema import SchemaField, SchemaModel, SchemaType

logger = logging.getLogger(__name__)

CONNECTION_SUFFIX = "Connection"
EDGE_SUFFIX = "Edge"


def resolve_references(
    owner: SchemaType,
    references: Iterable[SchemaType],
    model: SchemaModel,
    relation: str,
) -> list[SchemaType]:
    """Dedupe references by name and swap each for its full definition.

    References to names missing from the type table are dropped; both kinds
    of defect are reported as MalformedSchemaWarning.
    """
    resolved: list[SchemaType] = []
    seen: set[str] = set()
    for reference in references:
        if reference.name in seen:
            warnings.warn(
                f"{owner.name}: {relation} lists '{reference.name}' more than once",
                MalformedSchemaWarning,
                stacklevel=2,
            )
            continue
        full = model.get_type(reference.name)
        if full is None:
            warnings.warn(
                f"{owner.name}: {relation} references unknown type '{reference.name}'",
                MalformedSchemaWarning,
                stacklevel=2,
            )
            continue
        seen.add(reference.name)
        resolved.append(full)
    return resolved


def possible_types_of(schema_type: SchemaType, model: SchemaModel) -> list[SchemaType]:
    return resolve_references(schema_type, schema_type.possible_types, model, "possibleTypes")


def interfaces_of(schema_type: SchemaType, model: SchemaModel) -> list[SchemaType]:
    return resolve_references(schema_type, schema_type.interfaces, model, "interfaces")


def build_union_membership(model: SchemaModel) -> Mapping[str, tuple[SchemaType, ...]]:
    """Reverse index: object type name -> unions it is a member of, in schema order."""
    membership: dict[str, list[SchemaType]] = {}
    for union in model.types_of_kind(TypeKind.UNION):
        seen: set[str] = set()
        for member in union.possible_types:
            if member.name is None or member.name in seen:
                continue
            seen.add(member.name)
            membership.setdefault(member.name, []).append(union)
    return MappingProxyType({name: tuple(unions) for name, unions in membership.items()})


# -- union flattening --------------------------------------------------------


def common_fields(implementers: list[SchemaType], resolver: TypeResolver) -> list[SchemaField]:
    """Fields declared by every implementer with the same name and resolved type.

    Starts from the first implementer's fields (keeping their order) and
    intersects on ``(resolved type name, field name)`` with each of the rest.
    """
    if not implementers:
        return []

    def key(schema_field: SchemaField) -> tuple[str, str]:
        return resolver.type_name(schema_field.type), schema_field.name

    shared: list[SchemaField] = []
    seen: set[tuple[str, str]] = set()
    for schema_field in implementers[0].fields:
        field_key = key(schema_field)
        if field_key not in seen:
            seen.add(field_key)
            shared.append(schema_field)

    for implementer in implementers[1:]:
        keys = {key(f) for f in implementer.fields}
        shared = [f for f in shared if key(f) in keys]
    return shared


# -- interface flattening ----------------------------------------------------


def inherited_field_names(parents: list[SchemaType]) -> set[str]:
    """Names of all fields declared on the given parent interfaces."""
    return {f.name for parent in parents for f in parent.fields}


def own_interface_fields(interface: SchemaType, parents: list[SchemaType]) -> list[SchemaField]:
    """The interface's fields minus those its parents already declare."""
    inherited = inherited_field_names(parents)
    return [f for f in interface.fields if f.name not in inherited]


# -- Relay pagination --------------------------------------------------------


def detect_pagination(
    schema_type: SchemaType,
    model: SchemaModel,
    naming: NamingPolicy,
) -> list[IRCapability]:
    """Capabilities implied by the Connection/Edge naming convention.

    Not every type with a matching suffix follows the convention, so an
    empty list is a normal result.
    """
    capabilities = []
    name = schema_type.name or ""
    if name.endswith(CONNECTION_SUFFIX):
        connection = _connection_capability(schema_type, model, naming)
        if connection is not None:
            capabilities.append(connection)
    if name.endswith(EDGE_SUFFIX):
        node_field = schema_type.get_field("node")
        if node_field is not None:
            node_type = naming.type_name(terminal_named_type(node_field.type))
            capabilities.append(IRCapability(CapabilityKind.EDGE, node_type=node_type))
    return capabilities


def _connection_capability(
    connection: SchemaType,
    model: SchemaModel,
    naming: NamingPolicy,
) -> IRCapability | None:
    has_nodes = connection.has_field("nodes")
    edges_field = connection.get_field("edges")

    if edges_field is not None:
        edge_ref = terminal_named_type(edges_field.type)
        edge_type = model.get_type(edge_ref.name)
        node_field = edge_type.get_field("node") if edge_type is not None else None
        if node_field is not None:
            node_type = naming.type_name(terminal_named_type(node_field.type))
            edge_type_name = naming.type_name(edge_type)
            kind = CapabilityKind.NODES_AND_EDGES if has_nodes else CapabilityKind.EDGES
            return IRCapability(kind, node_type=node_type, edge_type=edge_type_name)
        warnings.warn(
            f"{connection.name}: edge type '{edge_ref.name}' has no 'node' field; "
            "ignoring its edges for pagination",
            MalformedSchemaWarning,
            stacklevel=3,
        )

    if has_nodes:
        node_ref = terminal_named_type(connection.get_field("nodes").type)
        return IRCapability(CapabilityKind.NODES, node_type=naming.type_name(node_ref))

    logger.debug("%s has neither edges nor nodes; no pagination capability", connection.name)
    return None
