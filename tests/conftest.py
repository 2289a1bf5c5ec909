"""
Pytest configuration and shared fixtures for the exprnorm tests.

Fixtures build a small descriptor table (TypeRegistry) the way a front-end
would: properties and indexers generate their special-name accessors, and a
few hand-written methods look like accessors without being ones.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from exprnorm.ir.nodes import ParameterIR
from exprnorm.shared.metadata import TypeRegistry
from exprnorm.shared.types import I32, F64, STR, VOID


@pytest.fixture
def registry():
    """
    Person: Name (str), Age (i32), Friend (Person), non-public Secret (str),
            static Count (i32), get-only Id (i32), plus ordinary and
            accessor-lookalike methods.
    Table:  Item[i32] -> str, Item[i32, i32] -> f64, Item[str] -> i32,
            Cell[i32] -> str (named indexer).
    """
    registry = TypeRegistry()

    person = registry.define_type("Person")
    person.property("Name", STR)
    person.property("Age", I32)
    person.property("Friend", person.type)
    person.property("Secret", STR, public=False)
    person.property("Count", I32, static=True)
    person.property("Id", I32, setter=False)
    person.method("Greet", [STR], STR)
    person.method("get_Fake", [], I32, special_name=True)
    person.method("set_Fake", [I32], VOID, special_name=True)
    person.method("get_Id", [I32], I32, special_name=True)
    person.method("get_Nickname", [], STR)
    person.method("op_Addition", [person.type, person.type], person.type, special_name=True, static=True)

    table = registry.define_type("Table")
    table.indexer([I32], STR)
    table.indexer([I32, I32], F64)
    table.indexer([STR], I32)
    table.indexer([I32], STR, name="Cell")
    table.property("Owner", person.type)

    return registry


@pytest.fixture
def person_type(registry):
    return registry.define_type("Person").type


@pytest.fixture
def table_type(registry):
    return registry.define_type("Table").type


@pytest.fixture
def x(person_type):
    """Parameter `x: Person`"""
    return ParameterIR("x", person_type)


@pytest.fixture
def t(table_type):
    """Parameter `t: Table`"""
    return ParameterIR("t", table_type)
