"""Base model and wire-format helpers shared by every generated module.

Wire rules:
    - fields are written under their GraphQL names (aliases)
    - None values are left out entirely
    - numbers may arrive as JSON numbers or numeric strings
    - enums are written as their literal GraphQL value
    - interface/union values are told apart by ``__typename``
"""

import builtins
import functools
import sys
from typing import Any, Annotated, ClassVar, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

TYPENAME_FIELD = "typename__"
TYPENAME_ALIAS = "__typename"

T = TypeVar("T")


class GraphQLObject(BaseModel):
    """Base class of every generated model and contract."""

    model_config = ConfigDict(populate_by_name=True)

    # Set on interface/union contracts: schema names of the concrete types
    graphql_implementers: ClassVar[tuple[str, ...]] = ()

    def to_json(self) -> str:
        return serialize(self)

    @classmethod
    def from_json(cls, data: str | bytes):
        """Decode JSON into this type, or into the matching implementer for contracts."""
        return deserialize(data, cls)


def resolve_generated_type(owner: type, name: str) -> type:
    """Find a type by name in the module that defines ``owner``.

    Builtin scalar types (``str``, ``int``...) are never module attributes,
    so they are looked up in ``builtins`` after the module.
    """
    module = sys.modules.get(owner.__module__)
    found = getattr(module, name, None) if module is not None else None
    if found is None:
        found = getattr(builtins, name, None)
    if found is None:
        raise LookupError(f"{name!r} is not defined in module {owner.__module__!r}")
    return found


def polymorphic_type(contract: type) -> Any:
    """Type that decodes a contract to its concrete implementer by ``__typename``."""
    # Own attribute only: concrete classes inherit it from their contracts
    names = vars(contract).get("graphql_implementers", ())
    if not names:
        return contract
    members = tuple(resolve_generated_type(contract, name) for name in names)
    if len(members) == 1:
        return members[0]
    return Annotated[Union[members], Field(discriminator=TYPENAME_FIELD)]


def _wire_type(tp: Any) -> Any:
    if isinstance(tp, type) and issubclass(tp, GraphQLObject):
        return polymorphic_type(tp)
    origin = get_origin(tp)
    if origin in (list, tuple) and get_args(tp):
        return origin[tuple(_wire_type(arg) for arg in get_args(tp))]
    return tp


@functools.lru_cache(maxsize=None)
def _type_adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(_wire_type(tp))


def serialize(value: Any) -> str:
    """Encode a model, or a list of models, as compact JSON."""
    if isinstance(value, BaseModel):
        return value.model_dump_json(by_alias=True, exclude_none=True)
    return _type_adapter(Any).dump_json(value, by_alias=True, exclude_none=True).decode()


def deserialize(data: str | bytes, tp: type[T]) -> T:
    """Decode JSON into ``tp``; ``tp`` may be a model class or ``list[Model]``."""
    return _type_adapter(tp).validate_json(data)
