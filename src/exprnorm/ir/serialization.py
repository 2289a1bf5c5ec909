"""
IR Serialization to S-Expressions
====================================

Converts expression trees to a canonical S-expression format for testing,
debugging and error messages. Descriptors print by name; node identity is not
represented (two structurally equal trees serialize the same).

Uses structured sexpr (nested lists + sexpdata.Symbol),
then pretty-prints for readable output.
"""

from typing import Any

import sexpdata

from ..shared.metadata import MethodDescriptor, PropertyDescriptor
from ..shared.types import Type
from ..utils.config import SEXPR_MAX_LINE, SEXPR_INDENT


def _pretty_dumps(sexpr: Any, indent: int = 0, indent_str: str = SEXPR_INDENT,
                  max_line: int = SEXPR_MAX_LINE) -> str:
    """
    Pretty-print structured sexpr. Keeps short forms on one line; breaks only when needed.
    """
    if sexpr is None:
        return "()"
    if isinstance(sexpr, bool):
        return "true" if sexpr else "false"
    if isinstance(sexpr, (int, float)):
        return str(sexpr)
    # Check Symbol before str (sexpdata.Symbol subclasses str)
    if isinstance(sexpr, sexpdata.Symbol):
        return str(sexpr)
    if isinstance(sexpr, str):
        escaped = sexpr.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(sexpr, list):
        if not sexpr:
            return "()"
        parts = [_pretty_dumps(e, indent + 1, indent_str, max_line) for e in sexpr]
        one_line = "(" + " ".join(parts) + ")"
        if len(one_line) <= max_line and "\n" not in one_line:
            return one_line
        prefix = indent_str * indent
        next_prefix = indent_str * (indent + 1)
        # First element on same line as ( to avoid orphan (; no space after (
        rest = "\n".join(next_prefix + p for p in parts[1:])
        inner = parts[0] + ("\n" + rest if rest else "")
        return f"({inner}\n{prefix})"
    return str(sexpr)


def serialize_ir(node: Any, include_type_info: bool = False, pretty: bool = True) -> str:
    """
    Serialize an expression node to an S-expression string.

    Args:
        node: Node to serialize
        include_type_info: Append `:type <t>` to every expression
        pretty: Use pretty-printed format (default True). Set False for compact single-line.
    """
    serializer = IRSerializer(include_type_info=include_type_info)
    sexpr = serializer.serialize_to_sexpr(node)
    if pretty:
        return _pretty_dumps(sexpr)
    return sexpdata.dumps(sexpr)


class IRSerializer:
    """
    Expression tree to structured S-expression serializer.

    Dispatches on node class name to _serialize_<ClassName>.
    Use sexpdata.Symbol for keywords to avoid quotes.
    """

    def __init__(self, include_type_info: bool = False):
        self.include_type_info = include_type_info

    def _sym(self, s: str) -> sexpdata.Symbol:
        return sexpdata.Symbol(s)

    def serialize_to_sexpr(self, node: Any) -> Any:
        """Serialize any node to structured sexpr (list/Symbol/str)."""
        if node is None:
            return self._sym("nil")

        method = getattr(self, f"_serialize_{type(node).__name__}", None)
        if method is not None:
            return method(node)
        return self._serialize_generic(node)

    def _serialize_generic(self, node: Any) -> list:
        """Generic serialization for unknown nodes"""
        return [self._sym(type(node).__name__), self._sym("...")]

    def _with_type(self, node: Any, core: list) -> list:
        if self.include_type_info:
            return core + [self._sym(":type"), self._serialize_type(node.type)]
        return core

    def _serialize_type(self, type_obj: Type) -> Any:
        return self._sym(type_obj.name)

    def _serialize_value(self, value: Any) -> Any:
        # Store bool/None as symbols to avoid sexpdata's True->() conversion
        if isinstance(value, bool):
            return self._sym("true" if value else "false")
        if value is None:
            return self._sym("null")
        if isinstance(value, (int, float, str)):
            return value
        return repr(value)

    def _serialize_member(self, member: Any) -> Any:
        if isinstance(member, (MethodDescriptor, PropertyDescriptor)):
            return member.name
        return self.serialize_to_sexpr(member)

    def _serialize_args(self, arguments) -> list:
        return [self.serialize_to_sexpr(a) for a in arguments]

    # === Leaves ===

    def _serialize_ConstantIR(self, node) -> list:
        """(constant value type)"""
        return [self._sym("constant"), self._serialize_value(node.value), self._serialize_type(node.type)]

    def _serialize_ParameterIR(self, node) -> list:
        """(parameter "name")"""
        return self._with_type(node, [self._sym("parameter"), node.name])

    # === Canonical access forms ===

    def _serialize_MemberAccessIR(self, node) -> list:
        """(member instance "Name")"""
        core = [self._sym("member"), self.serialize_to_sexpr(node.instance), self._serialize_member(node.member)]
        return self._with_type(node, core)

    def _serialize_IndexIR(self, node) -> list:
        """(index instance "Item" (args...))"""
        core = [
            self._sym("index"),
            self.serialize_to_sexpr(node.instance),
            self._serialize_member(node.indexer),
            self._serialize_args(node.arguments),
        ]
        return self._with_type(node, core)

    def _serialize_AssignIR(self, node) -> list:
        """(assign target value)"""
        core = [self._sym("assign"), self.serialize_to_sexpr(node.target), self.serialize_to_sexpr(node.value)]
        return self._with_type(node, core)

    def _serialize_CallIR(self, node) -> list:
        """(call instance "method" (args...))"""
        core = [
            self._sym("call"),
            self.serialize_to_sexpr(node.instance),
            self._serialize_member(node.method),
            self._serialize_args(node.arguments),
        ]
        return self._with_type(node, core)

    # === Pass-through kinds ===

    def _serialize_UnaryOpIR(self, node) -> list:
        core = [self._sym("unary-op"), self._sym(node.operator.value), self.serialize_to_sexpr(node.operand)]
        return self._with_type(node, core)

    def _serialize_BinaryOpIR(self, node) -> list:
        core = [
            self._sym("binary-op"),
            self._sym(node.operator.value),
            self.serialize_to_sexpr(node.left),
            self.serialize_to_sexpr(node.right),
        ]
        return self._with_type(node, core)

    def _serialize_ConditionalIR(self, node) -> list:
        core = [
            self._sym("if"),
            self.serialize_to_sexpr(node.test),
            self.serialize_to_sexpr(node.if_true),
            self.serialize_to_sexpr(node.if_false),
        ]
        return self._with_type(node, core)

    def _serialize_LambdaIR(self, node) -> list:
        params = [p.name for p in node.parameters]
        core = [self._sym("lambda"), params, self.serialize_to_sexpr(node.body)]
        return self._with_type(node, core)
