"""
Structural-sharing IR rewriter.

IRRewriter visits every child and rebuilds a node only when one of its children
came back as a different object. Subclasses override the visit_* methods for
the node kinds they actually rewrite; everything else passes through, and an
untouched subtree is returned by reference, not copied.
"""

from typing import List, Optional, Sequence, Tuple

from .nodes import (
    IRVisitor, ExpressionIR,
    ConstantIR, ParameterIR, MemberAccessIR, IndexIR, AssignIR, CallIR,
    UnaryOpIR, BinaryOpIR, ConditionalIR, LambdaIR,
)


class IRRewriter(IRVisitor[ExpressionIR]):
    """Default rewriter: identity on every node, with children visited post-order."""

    def visit(self, node: Optional[ExpressionIR]) -> Optional[ExpressionIR]:
        """Visit an optional child; None (e.g. static call instance) stays None."""
        if node is None:
            return None
        return node.accept(self)

    def visit_sequence(self, nodes: Tuple[ExpressionIR, ...]) -> Tuple[ExpressionIR, ...]:
        """
        Visit nodes in order.

        Returns the original tuple when no element changed by reference, so
        callers can test `result is nodes`.
        """
        visited, changed = self.visit_each(nodes)
        return tuple(visited) if any(changed) else nodes

    def visit_each(self, nodes: Sequence[ExpressionIR]) -> Tuple[List[ExpressionIR], List[bool]]:
        """Visit nodes in order, reporting per position whether the result is a new object."""
        visited: List[ExpressionIR] = []
        changed: List[bool] = []
        for node in nodes:
            result = node.accept(self)
            visited.append(result)
            changed.append(result is not node)
        return visited, changed

    def visit_constant(self, node: ConstantIR) -> ExpressionIR:
        return node

    def visit_parameter(self, node: ParameterIR) -> ExpressionIR:
        return node

    def visit_member_access(self, node: MemberAccessIR) -> ExpressionIR:
        return node.update(self.visit(node.instance))

    def visit_index(self, node: IndexIR) -> ExpressionIR:
        return node.update(self.visit(node.instance), self.visit_sequence(node.arguments))

    def visit_assign(self, node: AssignIR) -> ExpressionIR:
        return node.update(node.target.accept(self), node.value.accept(self))

    def visit_call(self, node: CallIR) -> ExpressionIR:
        return node.update(self.visit(node.instance), self.visit_sequence(node.arguments))

    def visit_unary_op(self, node: UnaryOpIR) -> ExpressionIR:
        return node.update(node.operand.accept(self))

    def visit_binary_op(self, node: BinaryOpIR) -> ExpressionIR:
        return node.update(node.left.accept(self), node.right.accept(self))

    def visit_conditional(self, node: ConditionalIR) -> ExpressionIR:
        return node.update(node.test.accept(self), node.if_true.accept(self), node.if_false.accept(self))

    def visit_lambda(self, node: LambdaIR) -> ExpressionIR:
        # Parameters are declarations, not rewritable expressions
        return node.update(node.parameters, node.body.accept(self))
