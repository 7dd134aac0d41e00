"""Relay pagination helpers: PageInfo, node sources and capability mixins.

A connection exposes its nodes through a ``nodes`` list, an ``edges`` list
(each edge wrapping one node), or both. Rather than a hierarchy of
interfaces, each shape is a small value object and ``get_nodes`` holds the
one preference rule: the node list when present, else the edges' nodes.

Generated connection and edge classes mix in one of the capability classes
below and set ``node_type_name`` (and ``edge_type_name``) to the generated
type names.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Literal, Optional, Sequence, Union

from pydantic import Field

from .base import GraphQLObject, resolve_generated_type


class PageInfo(GraphQLObject):
    """Information about pagination in a connection (Relay PageInfo)."""

    typename__: Literal["PageInfo"] = Field(default="PageInfo", alias="__typename")
    # The cursor corresponding to the last node in edges.
    endCursor: Optional[str] = None
    # Whether there are more pages to fetch following the current page.
    hasNextPage: Optional[bool] = None
    # Whether there are any pages prior to the current page.
    hasPreviousPage: Optional[bool] = None
    # The cursor corresponding to the first node in edges.
    startCursor: Optional[str] = None


@dataclass(frozen=True)
class NodesOnly:
    nodes: Optional[Sequence[Any]]


@dataclass(frozen=True)
class EdgesOnly:
    edges: Optional[Sequence[Any]]


@dataclass(frozen=True)
class NodesAndEdges:
    nodes: Optional[Sequence[Any]]
    edges: Optional[Sequence[Any]]


NodeSource = Union[NodesOnly, EdgesOnly, NodesAndEdges]


def get_nodes(source: NodeSource) -> Optional[list]:
    """Return the nodes of a connection, preferring ``nodes`` over ``edges``."""
    if isinstance(source, NodesOnly):
        return _as_list(source.nodes)
    if isinstance(source, EdgesOnly):
        return _edge_nodes(source.edges)
    if isinstance(source, NodesAndEdges):
        if source.nodes is not None:
            return list(source.nodes)
        return _edge_nodes(source.edges)
    raise TypeError(f"Not a node source: {source!r}")


def _as_list(items: Optional[Sequence[Any]]) -> Optional[list]:
    return None if items is None else list(items)


def _edge_nodes(edges: Optional[Sequence[Any]]) -> Optional[list]:
    if edges is None:
        return None
    return [edge.node if edge is not None else None for edge in edges]


class Connection:
    """Root pagination capability."""

    node_type_name: ClassVar[str] = ""

    def get_page_info(self) -> Optional[PageInfo]:
        return getattr(self, "pageInfo", None)

    @classmethod
    def get_node_type(cls) -> type:
        return resolve_generated_type(cls, cls.node_type_name)

    def node_source(self) -> NodeSource:
        raise NotImplementedError

    def get_nodes(self) -> Optional[list]:
        return get_nodes(self.node_source())


class ConnectionWithNodes(Connection):
    """Connection exposing a ``nodes`` list."""

    def node_source(self) -> NodeSource:
        return NodesOnly(getattr(self, "nodes", None))


class ConnectionWithEdges(Connection):
    """Connection exposing an ``edges`` list."""

    edge_type_name: ClassVar[str] = ""

    @classmethod
    def get_edge_type(cls) -> type:
        return resolve_generated_type(cls, cls.edge_type_name)

    def node_source(self) -> NodeSource:
        return EdgesOnly(getattr(self, "edges", None))


class ConnectionWithNodesAndEdges(ConnectionWithEdges):
    """Connection exposing both ``nodes`` and ``edges``."""

    def node_source(self) -> NodeSource:
        return NodesAndEdges(getattr(self, "nodes", None), getattr(self, "edges", None))


class Edge:
    """An edge: one node plus the cursor pointing at it."""

    node_type_name: ClassVar[str] = ""

    def get_cursor(self) -> Optional[str]:
        return getattr(self, "cursor", None)

    def get_node(self) -> Any:
        return getattr(self, "node", None)

    @classmethod
    def get_node_type(cls) -> type:
        return resolve_generated_type(cls, cls.node_type_name)
