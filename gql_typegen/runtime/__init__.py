"""Runtime support imported by generated model modules."""

from .base import (
    TYPENAME_ALIAS,
    TYPENAME_FIELD,
    GraphQLObject,
    deserialize,
    polymorphic_type,
    resolve_generated_type,
    serialize,
)
from .connection import (
    Connection,
    ConnectionWithEdges,
    ConnectionWithNodes,
    ConnectionWithNodesAndEdges,
    Edge,
    EdgesOnly,
    NodesAndEdges,
    NodeSource,
    NodesOnly,
    PageInfo,
    get_nodes,
)

__all__ = [
    # Models
    "GraphQLObject",
    "PageInfo",
    # Serialization
    "serialize",
    "deserialize",
    "polymorphic_type",
    "resolve_generated_type",
    "TYPENAME_ALIAS",
    "TYPENAME_FIELD",
    # Pagination
    "Connection",
    "ConnectionWithEdges",
    "ConnectionWithNodes",
    "ConnectionWithNodesAndEdges",
    "Edge",
    "EdgesOnly",
    "NodesAndEdges",
    "NodeSource",
    "NodesOnly",
    "get_nodes",
]
