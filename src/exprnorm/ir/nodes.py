"""
IR Nodes

Immutable, acyclic expression tree. Children are stored as nodes or tuples of
nodes; nothing in exprnorm assigns to a node after construction.

Node identity matters: rewriters return the same object for an unchanged
subtree, and update() only allocates when a child differs by reference.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, Sequence, TypeVar

from ..shared.errors import ExprNormImplementationError
from ..shared.metadata import MethodDescriptor, PropertyDescriptor
from ..shared.types import Type, BinaryOp, UnaryOp, VOID, type_of_value

T = TypeVar('T')


def _same(old: Sequence[Any], new: Sequence[Any]) -> bool:
    """True if both sequences hold the same objects (by reference) in order."""
    if old is new:
        return True
    if len(old) != len(new):
        return False
    return all(a is b for a, b in zip(old, new))


class ExpressionIR:
    """
    Base class for all expression nodes.

    Design: Regular class with __slots__ (not dataclass) to avoid inheritance
    issues with defaults. Equality is structural over all slots; descriptors
    inside compare by identity.
    """
    __slots__ = ()

    @property
    def type(self) -> Type:
        """Static type of the expression."""
        raise ExprNormImplementationError(f"type not implemented for {self.__class__.__name__}")

    def accept(self, visitor: 'IRVisitor[T]') -> 'T':
        raise ExprNormImplementationError(f"accept() not implemented for {self.__class__.__name__}")

    def _get_all_attributes(self):
        """Get all attribute values for equality/hashing (works with __slots__)."""
        attrs = {}
        for cls in self.__class__.__mro__:
            slots = cls.__dict__.get('__slots__', ())
            if isinstance(slots, str):
                slots = (slots,)
            for slot in slots:
                if slot not in attrs:
                    attrs[slot] = getattr(self, slot, None)
        return attrs

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, self.__class__) or not isinstance(self, other.__class__):
            return False
        return self._get_all_attributes() == other._get_all_attributes()

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        hashable_attrs = []
        for key, value in sorted(self._get_all_attributes().items()):
            try:
                hash(value)
            except TypeError:
                # Unhashable constant payloads (lists, dicts) don't take part in the hash
                continue
            hashable_attrs.append((key, value))
        return hash((self.__class__.__name__, tuple(hashable_attrs)))

    def __repr__(self) -> str:
        from .serialization import serialize_ir
        return serialize_ir(self, pretty=False)


class ConstantIR(ExpressionIR):
    """Constant value. type defaults to the value's inferred type."""
    __slots__ = ('value', '_type')

    def __init__(self, value: Any, type: Optional[Type] = None):
        self.value = value
        self._type = type if type is not None else type_of_value(value)

    @property
    def type(self) -> Type:
        return self._type

    def accept(self, visitor: 'IRVisitor[T]') -> 'T':
        return visitor.visit_constant(self)


class ParameterIR(ExpressionIR):
    """Named parameter (lambda parameter or free variable)."""
    __slots__ = ('name', '_type')

    def __init__(self, name: str, type: Type):
        self.name = name
        self._type = type

    @property
    def type(self) -> Type:
        return self._type

    def accept(self, visitor: 'IRVisitor[T]') -> 'T':
        return visitor.visit_parameter(self)


class MemberAccessIR(ExpressionIR):
    """Property access: instance.member (instance None for static members)"""
    __slots__ = ('instance', 'member')

    def __init__(self, instance: Optional[ExpressionIR], member: PropertyDescriptor):
        self.instance = instance
        self.member = member

    @property
    def type(self) -> Type:
        return self.member.property_type

    def update(self, instance: Optional[ExpressionIR]) -> 'MemberAccessIR':
        if instance is self.instance:
            return self
        return MemberAccessIR(instance, self.member)

    def accept(self, visitor: 'IRVisitor[T]') -> 'T':
        return visitor.visit_member_access(self)


class IndexIR(ExpressionIR):
    """Indexer access: instance[arguments...]"""
    __slots__ = ('instance', 'indexer', 'arguments')

    def __init__(self, instance: Optional[ExpressionIR], indexer: PropertyDescriptor,
                 arguments: Sequence[ExpressionIR]):
        self.instance = instance
        self.indexer = indexer
        self.arguments = tuple(arguments)

    @property
    def type(self) -> Type:
        return self.indexer.property_type

    def update(self, instance: Optional[ExpressionIR], arguments: Sequence[ExpressionIR]) -> 'IndexIR':
        if instance is self.instance and _same(self.arguments, arguments):
            return self
        return IndexIR(instance, self.indexer, arguments)

    def accept(self, visitor: 'IRVisitor[T]') -> 'T':
        return visitor.visit_index(self)


class AssignIR(ExpressionIR):
    """Assignment: target = value. Target is a member access, index or parameter."""
    __slots__ = ('target', 'value')

    def __init__(self, target: ExpressionIR, value: ExpressionIR):
        self.target = target
        self.value = value

    @property
    def type(self) -> Type:
        return self.target.type

    def update(self, target: ExpressionIR, value: ExpressionIR) -> 'AssignIR':
        if target is self.target and value is self.value:
            return self
        return AssignIR(target, value)

    def accept(self, visitor: 'IRVisitor[T]') -> 'T':
        return visitor.visit_assign(self)


class CallIR(ExpressionIR):
    """
    Method call. instance is None for static calls.

    Accessor calls (get_X()/set_X(v)/get_Item(i)/set_Item(i, v)) are the
    non-canonical form the accessor normalization pass rewrites.
    """
    __slots__ = ('instance', 'method', 'arguments')

    def __init__(self, instance: Optional[ExpressionIR], method: MethodDescriptor,
                 arguments: Sequence[ExpressionIR] = ()):
        self.instance = instance
        self.method = method
        self.arguments = tuple(arguments)

    @property
    def type(self) -> Type:
        return self.method.return_type

    def update(self, instance: Optional[ExpressionIR], arguments: Sequence[ExpressionIR]) -> 'CallIR':
        if instance is self.instance and _same(self.arguments, arguments):
            return self
        return CallIR(instance, self.method, arguments)

    def accept(self, visitor: 'IRVisitor[T]') -> 'T':
        return visitor.visit_call(self)


class UnaryOpIR(ExpressionIR):
    """Unary operation"""
    __slots__ = ('operator', 'operand', '_type')

    def __init__(self, operator: UnaryOp, operand: ExpressionIR, type: Optional[Type] = None):
        self.operator = operator
        self.operand = operand
        self._type = type if type is not None else operand.type

    @property
    def type(self) -> Type:
        return self._type

    def update(self, operand: ExpressionIR) -> 'UnaryOpIR':
        if operand is self.operand:
            return self
        return UnaryOpIR(self.operator, operand, self._type)

    def accept(self, visitor: 'IRVisitor[T]') -> 'T':
        return visitor.visit_unary_op(self)


class BinaryOpIR(ExpressionIR):
    """Binary operation"""
    __slots__ = ('operator', 'left', 'right', '_type')

    def __init__(self, operator: BinaryOp, left: ExpressionIR, right: ExpressionIR,
                 type: Optional[Type] = None):
        self.operator = operator
        self.left = left
        self.right = right
        self._type = type if type is not None else left.type

    @property
    def type(self) -> Type:
        return self._type

    def update(self, left: ExpressionIR, right: ExpressionIR) -> 'BinaryOpIR':
        if left is self.left and right is self.right:
            return self
        return BinaryOpIR(self.operator, left, right, self._type)

    def accept(self, visitor: 'IRVisitor[T]') -> 'T':
        return visitor.visit_binary_op(self)


class ConditionalIR(ExpressionIR):
    """Conditional: test ? if_true : if_false"""
    __slots__ = ('test', 'if_true', 'if_false')

    def __init__(self, test: ExpressionIR, if_true: ExpressionIR, if_false: ExpressionIR):
        self.test = test
        self.if_true = if_true
        self.if_false = if_false

    @property
    def type(self) -> Type:
        return self.if_true.type

    def update(self, test: ExpressionIR, if_true: ExpressionIR, if_false: ExpressionIR) -> 'ConditionalIR':
        if test is self.test and if_true is self.if_true and if_false is self.if_false:
            return self
        return ConditionalIR(test, if_true, if_false)

    def accept(self, visitor: 'IRVisitor[T]') -> 'T':
        return visitor.visit_conditional(self)


class LambdaIR(ExpressionIR):
    """Lambda: (parameters) => body. Recorded expectations are usually lambdas."""
    __slots__ = ('parameters', 'body')

    def __init__(self, parameters: Sequence[ParameterIR], body: ExpressionIR):
        self.parameters = tuple(parameters)
        self.body = body

    @property
    def type(self) -> Type:
        return self.body.type if self.body is not None else VOID

    def update(self, parameters: Sequence[ParameterIR], body: ExpressionIR) -> 'LambdaIR':
        if _same(self.parameters, parameters) and body is self.body:
            return self
        return LambdaIR(parameters, body)

    def accept(self, visitor: 'IRVisitor[T]') -> 'T':
        return visitor.visit_lambda(self)


class IRVisitor(ABC, Generic[T]):
    """
    Base visitor for expression nodes.

    One visit_* per node kind; accept() does the dispatch, no isinstance chains.
    """

    @abstractmethod
    def visit_constant(self, node: ConstantIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_parameter(self, node: ParameterIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_member_access(self, node: MemberAccessIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_index(self, node: IndexIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_assign(self, node: AssignIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_call(self, node: CallIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_unary_op(self, node: UnaryOpIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_binary_op(self, node: BinaryOpIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_conditional(self, node: ConditionalIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_lambda(self, node: LambdaIR) -> T:
        raise NotImplementedError
