"""Intermediate Representation (IR) of the generated type definitions.

The emitter turns a SchemaModel into an ordered list of these definitions;
the code generator renders them as Python source. Type names in the IR are
already resolved through the naming policy.
"""

import enum
from dataclasses import dataclass, field

from graphql import TypeKind


@dataclass(frozen=True)
class TypeDescriptor:
    """A resolved field type: a named type or a list of another descriptor.

    Every level is nullable, whatever the schema's NON_NULL markers say.
    """
    name: str | None = None
    kind: TypeKind | None = None
    of_type: "TypeDescriptor | None" = None
    nullable: bool = True

    @classmethod
    def named(cls, name: str, kind: TypeKind) -> "TypeDescriptor":
        return cls(name=name, kind=kind)

    @classmethod
    def list_of(cls, of_type: "TypeDescriptor") -> "TypeDescriptor":
        return cls(of_type=of_type)

    @property
    def is_list(self) -> bool:
        return self.of_type is not None

    @property
    def list_depth(self) -> int:
        return self.of_type.list_depth + 1 if self.of_type else 0

    @property
    def terminal(self) -> "TypeDescriptor":
        """The named descriptor at the bottom of any list nesting."""
        return self.of_type.terminal if self.of_type else self

    @property
    def display_name(self) -> str:
        """Rendered name, e.g. ``List[List[str]]``; used to compare field types."""
        if self.of_type is not None:
            return f"List[{self.of_type.display_name}]"
        return self.name

    def __str__(self):
        return self.display_name


@dataclass
class IRField:
    """A property slot of a generated class or contract."""
    name: str
    type: TypeDescriptor
    description: str | None = None
    is_deprecated: bool = False
    deprecation_reason: str | None = None
    # Interface-declared fields can't be reassigned from outside
    read_only: bool = False


@dataclass
class IREnumValue:
    name: str
    description: str | None = None
    is_deprecated: bool = False
    deprecation_reason: str | None = None


@dataclass
class IREnum:
    """A GraphQL enum type."""
    name: str
    values: list[IREnumValue]
    description: str | None = None
    # Also emit a companion class of string constants
    string_constants: bool = False


@dataclass
class IRInterface:
    """Polymorphic contract for a GraphQL interface.

    ``possible_types`` is the discriminator map, schema type name -> target
    type name, already deduplicated and filtered to types that exist.
    """
    name: str
    schema_name: str
    fields: list[IRField]
    parents: list[str] = field(default_factory=list)
    possible_types: dict[str, str] = field(default_factory=dict)
    narrowing_accessors: list[str] = field(default_factory=list)
    description: str | None = None


@dataclass
class IRUnion:
    """Polymorphic contract for a GraphQL union; fields are the common ones."""
    name: str
    schema_name: str
    fields: list[IRField]
    possible_types: dict[str, str] = field(default_factory=dict)
    narrowing_accessors: list[str] = field(default_factory=list)
    description: str | None = None


class CapabilityKind(enum.Enum):
    NODES = "nodes"
    EDGES = "edges"
    NODES_AND_EDGES = "nodes_and_edges"
    EDGE = "edge"


@dataclass(frozen=True)
class IRCapability:
    """A pagination capability attached by the Connection/Edge naming convention."""
    kind: CapabilityKind
    node_type: str
    edge_type: str | None = None


@dataclass
class IRClass:
    """A concrete GraphQL object type."""
    name: str
    schema_name: str
    fields: list[IRField]
    # Interface contracts first, then the union contracts it belongs to
    contracts: list[str] = field(default_factory=list)
    capabilities: list[IRCapability] = field(default_factory=list)
    description: str | None = None


IRDefinition = IREnum | IRInterface | IRUnion | IRClass


@dataclass
class IRModule:
    """Ordered output of one generation run."""
    namespace: str
    definitions: list[IRDefinition] = field(default_factory=list)
    enum_members_as_string: bool = False

    @property
    def enums(self) -> list[IREnum]:
        return [d for d in self.definitions if isinstance(d, IREnum)]

    @property
    def interfaces(self) -> list[IRInterface]:
        return [d for d in self.definitions if isinstance(d, IRInterface)]

    @property
    def unions(self) -> list[IRUnion]:
        return [d for d in self.definitions if isinstance(d, IRUnion)]

    @property
    def classes(self) -> list[IRClass]:
        return [d for d in self.definitions if isinstance(d, IRClass)]

    def get(self, name: str) -> IRDefinition | None:
        """Look up a definition by its target name."""
        for definition in self.definitions:
            if definition.name == name:
                return definition
        return None
