"""Pre- and post-generation hooks.

A pre hook sees the ordered IR definitions before they are rendered; a post
hook sees the rendered module text before it is returned or written.

Example usage:
    from gql_typegen.core.hooks import HookRunner, FilterTypesHook, AddHeaderHook

    hooks = HookRunner()
    hooks.add_pre_hook(FilterTypesHook(exclude_prefix="Legacy"))
    hooks.add_post_hook(AddHeaderHook("# Copyright 2024 My Company"))
    CodeGenerator(module, hooks=hooks).generate("shop/models.py")
"""

import dataclasses
import logging
from typing import Protocol, runtime_checkable

from .ir import IRClass, IRDefinition, IRInterface, IRUnion

logger = logging.getLogger(__name__)


@runtime_checkable
class PreGenerateHook(Protocol):
    """Receives the definitions in schema order and returns the ones to render."""

    def pre_generate(self, definitions: list[IRDefinition]) -> list[IRDefinition]:
        ...


@runtime_checkable
class PostGenerateHook(Protocol):
    """Transforms the rendered module.

    The result is still checked with ``ast.parse``, so a post hook may
    reformat the code but must leave it valid Python.

    Example:
        class FormatWithBlack:
            def post_generate(self, filename: str, content: str) -> str:
                import black
                return black.format_str(content, mode=black.FileMode())
    """

    def post_generate(self, filename: str, content: str) -> str:
        ...


class AddHeaderHook:
    """Prepends a header (license, "do not edit" banner) to the module."""

    def __init__(self, header: str):
        self.header = header

    def post_generate(self, _filename: str, content: str) -> str:
        return self.header.rstrip("\n") + "\n\n" + content


def graphql_name(definition: IRDefinition) -> str:
    """The schema name of a definition; enums keep theirs unchanged."""
    return getattr(definition, "schema_name", definition.name)


class FilterTypesHook:
    """Drops definitions by GraphQL type name prefix/suffix.

    Classes that are dropped are also removed from the discriminator maps
    and narrowing accessors of the contracts they implemented, so the
    remaining unions stay consistent. Fields that still refer to a dropped
    type are not rewritten; filter types nothing else references.

    Example:
        hook = FilterTypesHook(exclude_suffix="Payload")
    """

    def __init__(
        self,
        exclude_prefix: str | None = None,
        exclude_suffix: str | None = None,
        include_prefix: str | None = None,
        include_suffix: str | None = None,
    ):
        self.exclude_prefix = exclude_prefix
        self.exclude_suffix = exclude_suffix
        self.include_prefix = include_prefix
        self.include_suffix = include_suffix

    def _should_include(self, name: str) -> bool:
        if self.exclude_prefix and name.startswith(self.exclude_prefix):
            return False
        if self.exclude_suffix and name.endswith(self.exclude_suffix):
            return False
        if self.include_prefix and not name.startswith(self.include_prefix):
            return False
        if self.include_suffix and not name.endswith(self.include_suffix):
            return False
        return True

    def pre_generate(self, definitions: list[IRDefinition]) -> list[IRDefinition]:
        kept = [d for d in definitions if self._should_include(graphql_name(d))]
        dropped = {d.name for d in definitions if isinstance(d, IRClass)} - {
            d.name for d in kept
        }
        if len(kept) != len(definitions):
            logger.debug("Filtered out %d definitions", len(definitions) - len(kept))
        if not dropped:
            return kept
        return [self._prune(d, dropped) for d in kept]

    @staticmethod
    def _prune(definition: IRDefinition, dropped: set[str]) -> IRDefinition:
        if not isinstance(definition, (IRInterface, IRUnion)):
            return definition
        return dataclasses.replace(
            definition,
            possible_types={
                schema_name: target
                for schema_name, target in definition.possible_types.items()
                if target not in dropped
            },
            narrowing_accessors=[
                target for target in definition.narrowing_accessors if target not in dropped
            ],
        )


class HookRunner:
    """Runs pre hooks, then post hooks, each in the order added."""

    def __init__(self):
        self.pre_hooks: list[PreGenerateHook] = []
        self.post_hooks: list[PostGenerateHook] = []

    def add_pre_hook(self, hook: PreGenerateHook):
        self.pre_hooks.append(hook)

    def add_post_hook(self, hook: PostGenerateHook):
        self.post_hooks.append(hook)

    def run_pre_hooks(self, definitions: list[IRDefinition]) -> list[IRDefinition]:
        for hook in self.pre_hooks:
            definitions = hook.pre_generate(definitions)
        return definitions

    def run_post_hooks(self, filename: str, content: str) -> str:
        for hook in self.post_hooks:
            content = hook.post_generate(filename, content)
        return content
