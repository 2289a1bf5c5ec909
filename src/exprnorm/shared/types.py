"""
Type System

Static types carried by expression nodes and by method/property descriptors.

Convention: a Type is identified by kind and name only. Declaring types are
CLASS types; their members live in the metadata layer (see metadata.py), not here.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class TypeKind(Enum):
    """Type kind"""
    PRIMITIVE = "primitive"  # i32, str, bool, etc.
    CLASS = "class"          # Declaring types (own properties, indexers, methods)
    VOID = "void"            # Return type of setters


@dataclass(frozen=True)
class Type:
    """
    Static type of an expression or a descriptor slot.

    Immutable (frozen) for hashability; two Types with the same kind and name
    are the same type.
    """
    kind: TypeKind
    name: str

    def __str__(self) -> str:
        return self.name


def class_type(name: str) -> Type:
    """Build a declaring (class) type by name."""
    return Type(TypeKind.CLASS, name)


I32 = Type(TypeKind.PRIMITIVE, "i32")
I64 = Type(TypeKind.PRIMITIVE, "i64")
F64 = Type(TypeKind.PRIMITIVE, "f64")
BOOL = Type(TypeKind.PRIMITIVE, "bool")
STR = Type(TypeKind.PRIMITIVE, "str")
OBJECT = Type(TypeKind.CLASS, "object")
VOID = Type(TypeKind.VOID, "void")


def type_of_value(value: Any) -> Type:
    """Infer the static type of a constant value."""
    # bool before int: bool subclasses int
    if isinstance(value, bool):
        return BOOL
    if isinstance(value, int):
        return I32
    if isinstance(value, float):
        return F64
    if isinstance(value, str):
        return STR
    return OBJECT


class BinaryOp(Enum):
    """Binary operators (pass-through node kind)"""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    AND = "&&"
    OR = "||"


class UnaryOp(Enum):
    """Unary operators (pass-through node kind)"""
    NEG = "-"
    NOT = "!"
    CONVERT = "convert"  # Static type conversion, target type on the node
