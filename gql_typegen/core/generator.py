"""Code generator for the emitted type definitions.

Renders Jinja2 templates to produce a Python module of pydantic models from
an IRModule.

Supports custom templates via the template_dir parameter:
    generator = CodeGenerator(module, template_dir="./my_templates")

Template lookup order:
1. User's template directory (if provided)
2. Package default templates
"""

import ast
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

from graphql import TypeKind
from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from ..runtime import (
    ConnectionWithEdges,
    ConnectionWithNodes,
    ConnectionWithNodesAndEdges,
    Edge,
    GraphQLObject,
    TYPENAME_ALIAS,
    TYPENAME_FIELD,
)
from .hooks import HookRunner
from .ir import (
    CapabilityKind,
    IRCapability,
    IRClass,
    IREnum,
    IRField,
    IRInterface,
    IRModule,
    IRUnion,
    TypeDescriptor,
)
from .scalars import ScalarRegistry

logger = logging.getLogger(__name__)


def snake_case(name: str) -> str:
    """Convert PascalCase or camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def safe_docstring(text: str) -> str:
    """Escape text for use in docstrings."""
    if not text:
        return ""
    text = text.rstrip("\n").replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if text.endswith('"'):
        text += " "
    return text


def safe_comment(text: str) -> str:
    """Make text safe for a single-line Python comment.

    Removes newlines, replaces markdown formatting, and ensures
    the text doesn't cause syntax errors when used as # comment.
    """
    if not text:
        return ""
    text = text.replace("\n", " ").replace("\r", "")
    text = text.replace("**", "").replace("*", "")
    text = re.sub(r"\s+", " ", text)
    if len(text) > 120:
        text = text[:117] + "..."
    return text.strip()


# Python reserved keywords that cannot be used as identifiers
PYTHON_KEYWORDS = {
    'False', 'None', 'True', 'and', 'as', 'assert', 'async', 'await',
    'break', 'class', 'continue', 'def', 'del', 'elif', 'else', 'except',
    'finally', 'for', 'from', 'global', 'if', 'import', 'in', 'is',
    'lambda', 'nonlocal', 'not', 'or', 'pass', 'raise', 'return', 'try',
    'while', 'with', 'yield'
}


def _public_names(*classes: type) -> set[str]:
    return {name for cls in classes for name in dir(cls) if not name.startswith("_")}


# Names that can't be used verbatim, per kind of generated identifier
RESERVED_NAMES = {
    "field": PYTHON_KEYWORDS
    | _public_names(
        GraphQLObject,
        ConnectionWithNodes,
        ConnectionWithNodesAndEdges,
        Edge,
    )
    | {TYPENAME_FIELD},
    "enum_member": PYTHON_KEYWORDS | _public_names(str) | {"mro", "name", "value"},
    "constant": PYTHON_KEYWORDS,
}


def safe_identifier(name: str, context: str = "field") -> str:
    """Make a GraphQL name usable as a Python identifier in the given context.

    Reserved names get a trailing underscore. Field names with a leading
    underscore would be private attributes to pydantic, so they get a
    ``field`` prefix instead.
    """
    if context == "field" and name.startswith("_"):
        return f"field{name}"
    if name in RESERVED_NAMES[context]:
        return f"{name}_"
    # _sunder_ names are reserved by Enum
    if context == "enum_member" and len(name) > 2 and name[0] == "_" and name[-1] == "_":
        return f"{name}_"
    return name


_CAPABILITY_BASES = {
    CapabilityKind.NODES: ConnectionWithNodes.__name__,
    CapabilityKind.EDGES: ConnectionWithEdges.__name__,
    CapabilityKind.NODES_AND_EDGES: ConnectionWithNodesAndEdges.__name__,
    CapabilityKind.EDGE: Edge.__name__,
}

POLYMORPHIC_SUFFIX = "Value"
BASE_MODEL = f"_runtime.{GraphQLObject.__name__}"


class CodeGenerator:
    """Generates a Python module of pydantic models from an IRModule.

    Supports custom templates via the template_dir parameter.
    Templates in template_dir take precedence over built-in templates.

    Available templates to override:
        - models.py.j2: the whole generated module

    Example:
        generator = CodeGenerator(module, template_dir="./my_templates")
        generator.generate("./shop/models.py")
    """

    TEMPLATE_NAME = "models.py.j2"

    def __init__(
        self,
        module: IRModule,
        template_dir: Optional[str] = None,
        scalar_registry: Optional[ScalarRegistry] = None,
        hooks: Optional[HookRunner] = None,
    ):
        """Initialize the code generator.

        Args:
            module: The emitted type definitions
            template_dir: Optional directory with custom Jinja2 templates.
                          Templates here override the built-in templates.
            scalar_registry: Imports for the Python types scalars map to
            hooks: Pre/post generation hooks
        """
        self.module = module
        self.template_dir = template_dir
        self.scalars = scalar_registry or ScalarRegistry()
        self.hooks = hooks or HookRunner()

        # Build template loader - custom templates take precedence
        loaders = []
        if template_dir:
            template_path = Path(template_dir)
            if template_path.is_dir():
                loaders.append(FileSystemLoader(str(template_path)))
        loaders.append(PackageLoader("gql_typegen", "templates"))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters["snake_case"] = snake_case
        self.env.filters["repr"] = repr
        self.env.filters["safe_docstring"] = safe_docstring
        self.env.filters["safe_comment"] = safe_comment
        self.env.filters["safe_identifier"] = safe_identifier

    def generate(self, output_path: str | os.PathLike) -> Path:
        """Render the module and write it to ``output_path``."""
        path = Path(output_path)
        content = self.render(path.name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.info("Wrote %s", path)
        return path

    def render(self, filename: str = "models.py") -> str:
        """Render the module source, run post hooks, and check its syntax."""
        definitions = self.hooks.run_pre_hooks(list(self.module.definitions))
        context = _RenderContext(self.module, definitions, self.scalars).build()
        template = self.env.get_template(self.TEMPLATE_NAME)
        content = self.hooks.run_post_hooks(filename, template.render(context))
        try:
            ast.parse(content)
        except SyntaxError as e:
            raise ValueError(
                f"Generated invalid Python for {filename}: {e}\n"
                f"Template: {self.TEMPLATE_NAME}"
            ) from e
        return content


class _RenderContext:
    """Turns IR definitions into plain values for the template."""

    def __init__(self, module: IRModule, definitions: list, scalars: ScalarRegistry):
        self.module = module
        self.definitions = definitions
        self.scalars = scalars
        self.imports: set[str] = set()
        self.enum_names = {d.name for d in definitions if isinstance(d, IREnum)}

    def build(self) -> Dict[str, Any]:
        enums = [d for d in self.definitions if isinstance(d, IREnum)]
        contracts = self._ordered_contracts(
            [d for d in self.definitions if isinstance(d, (IRInterface, IRUnion))]
        )
        classes = [d for d in self.definitions if isinstance(d, IRClass)]
        ancestors = self._contract_ancestors(contracts)

        contract_views = [self._contract_view(c, ancestors) for c in contracts]
        class_views = [self._class_view(c, ancestors) for c in classes]
        models = [c["name"] for c in contract_views] + [c["name"] for c in class_views]
        aliases = [self._polymorphic_alias(c) for c in contracts]

        exported = [e.name for e in enums]
        exported += [f"{e.name}StringValues" for e in enums if e.string_constants]
        exported += models + [a["name"] for a in aliases]

        return {
            "namespace": self.module.namespace,
            "imports": sorted(self.imports),
            "enums": [self._enum_view(e) for e in enums],
            "contracts": contract_views,
            "classes": class_views,
            "aliases": aliases,
            "models": models,
            "exported": exported,
        }

    # -- ordering ------------------------------------------------------------

    @staticmethod
    def _ordered_contracts(contracts: list) -> list:
        """Schema order, except that parent interfaces come before children."""
        by_name = {c.name: c for c in contracts}
        ordered, visited = [], set()

        def visit(contract):
            if contract.name in visited:
                return
            visited.add(contract.name)
            for parent in getattr(contract, "parents", ()):
                if parent in by_name:
                    visit(by_name[parent])
            ordered.append(contract)

        for contract in contracts:
            visit(contract)
        return ordered

    @staticmethod
    def _contract_ancestors(contracts: list) -> dict[str, set[str]]:
        ancestors: dict[str, set[str]] = {}
        # contracts are ordered parents-first, so parents are already known
        for contract in contracts:
            found = set()
            for parent in getattr(contract, "parents", ()):
                found.add(parent)
                found |= ancestors.get(parent, set())
            ancestors[contract.name] = found
        return ancestors

    @staticmethod
    def _linearize(bases: list[str], ancestors: dict[str, set[str]]) -> list[str]:
        """Drop bases already implied by another base so the MRO is consistent."""
        return [
            base
            for base in bases
            if not any(base in ancestors.get(other, ()) for other in bases if other != base)
        ]

    # -- types ---------------------------------------------------------------

    def annotation(self, descriptor: TypeDescriptor) -> str:
        return f"_Optional[{self._type_expression(descriptor)}]"

    def _type_expression(self, descriptor: TypeDescriptor) -> str:
        if descriptor.is_list:
            return f"_List[{self.annotation(descriptor.of_type)}]"
        if descriptor.kind in (TypeKind.INTERFACE, TypeKind.UNION):
            return f"{descriptor.name}{POLYMORPHIC_SUFFIX}"
        if descriptor.kind == TypeKind.SCALAR or (
            descriptor.kind == TypeKind.ENUM and descriptor.name not in self.enum_names
        ):
            rendered, statement = self.scalars.resolve(descriptor.name)
            if statement:
                self.imports.add(statement)
            return rendered
        return descriptor.name

    # -- views ---------------------------------------------------------------

    def _field_view(self, ir_field: IRField) -> Dict[str, Any]:
        python_name = safe_identifier(ir_field.name)
        options = []
        if python_name != ir_field.name:
            options.append(f"alias={ir_field.name!r}")
        if ir_field.is_deprecated:
            options.append(f"deprecated={ir_field.deprecation_reason or True!r}")
        if ir_field.read_only:
            options.append("frozen=True")
        default = f"_Field(default=None, {', '.join(options)})" if options else "None"
        return {
            "name": python_name,
            "annotation": self.annotation(ir_field.type),
            "default": default,
            "description": ir_field.description,
        }

    def _enum_view(self, enum: IREnum) -> Dict[str, Any]:
        return {
            "name": enum.name,
            "description": enum.description,
            "string_constants": enum.string_constants,
            "members": [
                {
                    "name": safe_identifier(v.name, "enum_member"),
                    "constant": safe_identifier(v.name, "constant"),
                    "value": v.name,
                    "description": v.description,
                    "deprecation": (v.deprecation_reason or "deprecated") if v.is_deprecated else None,
                }
                for v in enum.values
            ],
        }

    def _contract_view(self, contract, ancestors: dict[str, set[str]]) -> Dict[str, Any]:
        parents = self._linearize(getattr(contract, "parents", []), ancestors)
        return {
            "name": contract.name,
            "kind": "interface" if isinstance(contract, IRInterface) else "union",
            "schema_name": contract.schema_name,
            "description": contract.description,
            "bases": ", ".join(parents) if parents else BASE_MODEL,
            "implementers": list(contract.possible_types.values()),
            "accessors": [
                {"method": f"as_{snake_case(target)}", "type": target}
                for target in contract.narrowing_accessors
            ],
            "fields": [self._field_view(f) for f in contract.fields],
        }

    def _class_view(self, ir_class: IRClass, ancestors: dict[str, set[str]]) -> Dict[str, Any]:
        bases = self._linearize(ir_class.contracts, ancestors)
        bases += [f"_runtime.{_CAPABILITY_BASES[c.kind]}" for c in ir_class.capabilities]
        if not ir_class.contracts:
            bases.append(BASE_MODEL)
        return {
            "name": ir_class.name,
            "schema_name": ir_class.schema_name,
            "description": ir_class.description,
            "bases": ", ".join(bases),
            "class_vars": self._capability_class_vars(ir_class.capabilities),
            "fields": [self._field_view(f) for f in ir_class.fields],
            "typename_field": TYPENAME_FIELD,
            "typename_alias": TYPENAME_ALIAS,
        }

    def _capability_class_vars(self, capabilities: list[IRCapability]) -> list[Dict[str, str]]:
        class_vars = []
        for capability in capabilities:
            class_vars.append(
                {"name": "node_type_name", "value": self._type_reference(capability.node_type)}
            )
            if capability.edge_type is not None:
                class_vars.append({"name": "edge_type_name", "value": capability.edge_type})
        return class_vars

    def _type_reference(self, type_name: str) -> str:
        """Name a node type is bound to in the module (``decimal.Decimal`` -> ``Decimal``)."""
        if any(d.name == type_name for d in self.definitions):
            return type_name
        rendered, statement = self.scalars.resolve(type_name)
        if statement:
            self.imports.add(statement)
        return rendered

    @staticmethod
    def _polymorphic_alias(contract) -> Dict[str, str]:
        members = list(contract.possible_types.values())
        if not members:
            value = contract.name
        elif len(members) == 1:
            value = members[0]
        else:
            value = (
                f"_Annotated[_Union[{', '.join(members)}], "
                f"_Field(discriminator={TYPENAME_FIELD!r})]"
            )
        return {"name": f"{contract.name}{POLYMORPHIC_SUFFIX}", "value": value}
