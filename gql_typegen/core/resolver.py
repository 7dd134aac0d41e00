"""Recursive resolution of (possibly wrapped) type references."""

from graphql import TypeKind

from .errors import IncompleteTypeReferenceError
from .ir import TypeDescriptor
from .naming import NamingPolicy
from .schema import SchemaType


class TypeResolver:
    """Turns a schema type reference into a TypeDescriptor.

    NON_NULL is unwrapped and otherwise ignored: every generated field stays
    nullable, since servers may null out a non-null field when part of a
    response fails. LIST wraps the resolved inner type in a list descriptor.
    There is no depth limit; recursion stops at the first named type.
    """

    def __init__(self, naming: NamingPolicy):
        self.naming = naming

    def resolve(
        self,
        type_ref: SchemaType,
        containing_type: str | None = None,
        field_name: str | None = None,
    ) -> TypeDescriptor:
        if type_ref.kind == TypeKind.NON_NULL:
            return self.resolve(self._unwrap(type_ref), containing_type, field_name)
        if type_ref.kind == TypeKind.LIST:
            return TypeDescriptor.list_of(
                self.resolve(self._unwrap(type_ref), containing_type, field_name)
            )
        return TypeDescriptor.named(
            self.naming.type_name(type_ref, containing_type, field_name),
            type_ref.kind,
        )

    def type_name(self, type_ref: SchemaType) -> str:
        """Rendered name of a reference without any field context."""
        return self.resolve(type_ref).display_name

    @staticmethod
    def _unwrap(type_ref: SchemaType) -> SchemaType:
        if type_ref.of_type is None:
            raise IncompleteTypeReferenceError(
                f"{type_ref.kind.name} wrapper has no ofType; the schema nests "
                "wrappers deeper than the introspection query fetched"
            )
        return type_ref.of_type


def terminal_named_type(type_ref: SchemaType) -> SchemaType:
    """Strip LIST/NON_NULL wrappers and return the first named type reached."""
    current = type_ref
    while current.name is None:
        if not current.is_wrapper or current.of_type is None:
            raise IncompleteTypeReferenceError(
                f"Type reference of kind {current.kind.name} never reaches a named type"
            )
        current = current.of_type
    return current
