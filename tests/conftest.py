"""Shared fixtures."""

import itertools
import sys
import types

import pytest

from gql_typegen.core import GeneratorOptions, generate_types
from introspection_builders import SHOP_SCALARS, shop_document

_counter = itertools.count()


@pytest.fixture
def shop_options():
    return GeneratorOptions(namespace="shop", scalar_name_to_type_name=SHOP_SCALARS)


@pytest.fixture
def load_generated():
    """Execute generated source as a real module registered in sys.modules."""
    loaded = []

    def load(source: str):
        name = f"generated_models_{next(_counter)}"
        module = types.ModuleType(name)
        sys.modules[name] = module
        loaded.append(name)
        exec(compile(source, f"<{name}>", "exec"), module.__dict__)
        return module

    yield load
    for name in loaded:
        sys.modules.pop(name, None)


@pytest.fixture
def shop_models(shop_options, load_generated):
    return load_generated(generate_types(shop_options, shop_document()))
