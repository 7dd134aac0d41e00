"""Imports for the Python types that scalars are mapped to.

Scalar mappings name a Python type (``"datetime"``, ``"Decimal"``) or a
dotted path (``"decimal.Decimal"``). The registry tells the code generator
which import each rendered type name needs.

Example usage:
    from gql_typegen.core.scalars import ScalarRegistry

    registry = ScalarRegistry()
    registry.register("Money", "from shop.money import Money")

    registry.resolve("decimal.Decimal")
    # -> ("Decimal", "from decimal import Decimal")
"""

import builtins

DEFAULT_IMPORTS = {
    "datetime": "from datetime import datetime",
    "date": "from datetime import date",
    "time": "from datetime import time",
    "timedelta": "from datetime import timedelta",
    "Decimal": "from decimal import Decimal",
    "UUID": "from uuid import UUID",
    "Any": "from typing import Any",
}


class ScalarRegistry:
    """Registry of Python type names and the import each one needs.

    Builtins (``str``, ``int``...) need no import. Names that are neither
    builtin nor registered are rendered as given and left to the user.
    """

    def __init__(self):
        self._imports: dict[str, str] = {}
        self._register_defaults()

    def _register_defaults(self):
        for python_type, statement in DEFAULT_IMPORTS.items():
            self.register(python_type, statement)

    def register(self, python_type: str, import_statement: str):
        """Register the import statement for a Python type name."""
        self._imports[python_type] = import_statement

    def get(self, python_type: str) -> str | None:
        """Return the import statement for a type name, or None."""
        return self._imports.get(python_type)

    def has(self, python_type: str) -> bool:
        return python_type in self._imports

    def resolve(self, type_name: str) -> tuple[str, str | None]:
        """Split a mapped type name into (name to render, import statement)."""
        module, sep, attribute = type_name.rpartition(".")
        if sep:
            return attribute, f"from {module} import {attribute}"
        if hasattr(builtins, type_name):
            return type_name, None
        return type_name, self.get(type_name)

    def get_all_imports(self) -> set:
        """Get all import statements known to the registry."""
        return set(self._imports.values())
