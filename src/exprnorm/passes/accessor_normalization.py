"""
Accessor Normalization Pass

Rewrites calls to compiler-generated property and indexer accessors into their
canonical access forms:

- x.get_Name()          ->  (member x Name)
- x.set_Name(v)         ->  (assign (member x Name) v)
- x.get_Item(i, j)      ->  (index x Item (i j))
- x.set_Item(i, j, v)   ->  (assign (index x Item (i j)) v)

so that trees built from different front-ends compare equal downstream.
Rewriting is bottom-up; subtrees with nothing to rewrite are returned by
reference.

Any special-name get_/set_ call whose metadata does not round-trip to the very
same method is a PreconditionViolation. There is no fallback to treating it as
an ordinary call.
"""

import logging
from typing import Optional, Sequence

from .base import BasePass, PassContext
from ..ir.nodes import ExpressionIR, CallIR, MemberAccessIR, IndexIR, AssignIR
from ..ir.rewriter import IRRewriter
from ..shared.errors import PreconditionViolation
from ..shared.metadata import MetadataProvider, MethodDescriptor, PropertyDescriptor
from ..utils.config import GETTER_PREFIX, SETTER_PREFIX

logger = logging.getLogger("exprnorm.passes.accessor_normalization")


def normalize(root: ExpressionIR, metadata: MetadataProvider) -> ExpressionIR:
    """
    Normalize every accessor call in `root`.

    Pure: `root` is not modified; the result shares every subtree that needed
    no rewriting. Raises PreconditionViolation on a get_/set_ special-name
    method that is not a real accessor.
    """
    normalizer = AccessorNormalizer(metadata)
    result = root.accept(normalizer)
    logger.debug(f"Normalized {normalizer.rewrite_count} accessor call(s)")
    return result


class AccessorNormalizationPass(BasePass):
    """Accessor normalization as a pass; metadata comes from the pass context."""

    def run(self, root: ExpressionIR, ctx: PassContext) -> ExpressionIR:
        return normalize(root, ctx.metadata)


class AccessorNormalizer(IRRewriter):
    """
    Rewriter that only overrides calls; every other node kind uses the
    structural-sharing defaults from IRRewriter.

    Holds no state beyond a rewrite counter; create one per tree.
    """

    def __init__(self, metadata: MetadataProvider):
        self.metadata = metadata
        self.rewrite_count = 0

    def visit_call(self, node: CallIR) -> ExpressionIR:
        instance = self.visit(node.instance)
        visited, changed = self.visit_each(node.arguments)
        arguments = tuple(visited) if any(changed) else node.arguments

        method = node.method
        if method.is_special_name:
            if method.name.startswith(GETTER_PREFIX):
                name = method.name[len(GETTER_PREFIX):]
                if not arguments:
                    prop = self._resolve_property(node, name, method, setter=False)
                    return self._rewritten(node, MemberAccessIR(instance, prop))

                # A getter has no value parameter, so every argument is an index
                indexer = self._resolve_indexer(node, name, method, method.return_type,
                                                method.parameter_types, setter=False)
                return self._rewritten(node, IndexIR(instance, indexer, arguments))

            if method.name.startswith(SETTER_PREFIX) and arguments:
                name = method.name[len(SETTER_PREFIX):]
                value = arguments[-1]
                if len(arguments) == 1:
                    prop = self._resolve_property(node, name, method, setter=True)
                    return self._rewritten(node, AssignIR(MemberAccessIR(instance, prop), value))

                # Value is the single trailing parameter; the rest index, in order
                indexer = self._resolve_indexer(node, name, method, method.parameter_types[-1],
                                                method.parameter_types[:-1], setter=True)
                return self._rewritten(node, AssignIR(IndexIR(instance, indexer, arguments[:-1]), value))

        return node.update(instance, arguments)

    def _rewritten(self, node: CallIR, result: ExpressionIR) -> ExpressionIR:
        self.rewrite_count += 1
        logger.debug(f"Rewrote {node.method.name} call to {type(result).__name__}")
        return result

    def _resolve_property(self, node: CallIR, name: str, method: MethodDescriptor,
                          setter: bool) -> PropertyDescriptor:
        prop = self.metadata.lookup_instance_property(method.declaring_type, name)
        if prop is None:
            raise PreconditionViolation(
                f"expression not supported: `{method.name}` is not a property accessor",
                node=node,
                method=method,
                note=f"no instance property `{name}` on `{method.declaring_type}`",
            )
        self._check_accessor(node, prop, method, setter)
        return prop

    def _resolve_indexer(self, node: CallIR, name: str, method: MethodDescriptor, value_type,
                         index_types: Sequence, setter: bool) -> PropertyDescriptor:
        indexer = self.metadata.lookup_indexer(method.declaring_type, name, value_type, index_types)
        if indexer is None:
            signature = ", ".join(str(t) for t in index_types)
            raise PreconditionViolation(
                f"expression not supported: `{method.name}` is not an indexer accessor",
                node=node,
                method=method,
                note=f"no indexer `{name}[{signature}]: {value_type}` on `{method.declaring_type}`",
            )
        self._check_accessor(node, indexer, method, setter)
        return indexer

    def _check_accessor(self, node: CallIR, prop: PropertyDescriptor, method: MethodDescriptor,
                        setter: bool) -> None:
        accessor: Optional[MethodDescriptor] = prop.set_accessor() if setter else prop.get_accessor()
        if accessor is not method:
            kind = "set" if setter else "get"
            if accessor is None:
                note = f"`{prop.declaring_type}.{prop.name}` has no {kind} accessor"
            else:
                note = f"`{prop.declaring_type}.{prop.name}` is backed by {accessor!r}"
            raise PreconditionViolation(
                f"expression not supported: `{method.name}` is not the {kind} accessor of `{prop.name}`",
                node=node,
                method=method,
                note=note,
                help="hand-written methods named like accessors cannot be normalized",
            )
