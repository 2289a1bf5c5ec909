"""
Test utilities for the exprnorm test suite.

Helpers to build accessor calls the way an expression front-end would emit
them, and to look up the descriptors they should normalize to.
"""

from typing import Optional

from exprnorm.ir.nodes import CallIR, ConstantIR, ExpressionIR
from exprnorm.shared.metadata import MethodDescriptor, PropertyDescriptor, TypeRegistry
from exprnorm.shared.types import Type


def method(registry: TypeRegistry, declaring_type: Type, name: str, *parameter_types: Type) -> MethodDescriptor:
    """Find a method; parameter types only needed to pick among overloads."""
    found = registry.method(declaring_type, name, parameter_types if parameter_types else None)
    assert found is not None, f"no method {name} on {declaring_type}"
    return found


def prop(registry: TypeRegistry, declaring_type: Type, name: str) -> PropertyDescriptor:
    found = registry.lookup_instance_property(declaring_type, name)
    assert found is not None, f"no property {name} on {declaring_type}"
    return found


def indexer(registry: TypeRegistry, declaring_type: Type, name: str, value_type: Type,
            *index_types: Type) -> PropertyDescriptor:
    found = registry.lookup_indexer(declaring_type, name, value_type, index_types)
    assert found is not None, f"no indexer {name} on {declaring_type}"
    return found


def get_call(instance: Optional[ExpressionIR], p: PropertyDescriptor, *arguments: ExpressionIR) -> CallIR:
    """instance.get_X(arguments...) through the property's own getter."""
    return CallIR(instance, p.get_accessor(), arguments)


def set_call(instance: Optional[ExpressionIR], p: PropertyDescriptor, *arguments: ExpressionIR) -> CallIR:
    """instance.set_X(arguments..., value) through the property's own setter."""
    return CallIR(instance, p.set_accessor(), arguments)


def const(value) -> ConstantIR:
    return ConstantIR(value)
