"""
Unit tests for the pass system running accessor normalization
"""

import logging

import pytest

from exprnorm.ir.nodes import ConstantIR, MemberAccessIR, LambdaIR
from exprnorm.ir.rewriter import IRRewriter
from exprnorm.passes.accessor_normalization import AccessorNormalizationPass
from exprnorm.passes.base import BasePass, PassContext, PassManager
from tests.test_utils import prop, get_call


class _RecordingPass(BasePass):
    """Records the tree it saw, after normalization ran."""
    requires = [AccessorNormalizationPass]

    def run(self, root, ctx):
        ctx.set_analysis(_RecordingPass, root)
        return root


class _ZeroConstants(IRRewriter):
    def visit_constant(self, node):
        return ConstantIR(0, node.type)


class _ZeroConstantsPass(BasePass):
    def run(self, root, ctx):
        return root.accept(_ZeroConstants())


class _CycleA(BasePass):
    def run(self, root, ctx):
        return root


class _CycleB(BasePass):
    requires = [_CycleA]

    def run(self, root, ctx):
        return root


_CycleA.requires = [_CycleB]


class TestPassManager:
    def test_runs_normalization(self, registry, x, person_type):
        age = prop(registry, person_type, "Age")
        manager = PassManager()
        manager.register_pass(AccessorNormalizationPass)
        result = manager.run_all(LambdaIR([x], get_call(x, age)), PassContext(registry))
        assert result == LambdaIR([x], MemberAccessIR(x, age))

    def test_dependency_order(self, registry, x, person_type):
        age = prop(registry, person_type, "Age")
        manager = PassManager()
        manager.register_pass(_RecordingPass)
        manager.register_pass(AccessorNormalizationPass)
        ctx = PassContext(registry)
        manager.run_all(get_call(x, age), ctx)
        assert ctx.get_analysis(_RecordingPass) == MemberAccessIR(x, age)

    def test_independent_passes_chain(self, registry, x, person_type):
        age = prop(registry, person_type, "Age")
        manager = PassManager()
        manager.register_pass(AccessorNormalizationPass)
        manager.register_pass(_ZeroConstantsPass)
        tree = LambdaIR([x], get_call(x, age))
        result = manager.run_all(tree, PassContext(registry))
        assert result == LambdaIR([x], MemberAccessIR(x, age))

    def test_missing_dependency_is_reported(self, registry, x):
        manager = PassManager()
        manager.register_pass(_RecordingPass)
        with pytest.raises(RuntimeError, match="requires unregistered pass AccessorNormalizationPass"):
            manager.run_all(x, PassContext(registry))

    def test_repeat_registration_runs_once(self, registry, x, person_type):
        age = prop(registry, person_type, "Age")
        manager = PassManager()
        manager.register_pass(AccessorNormalizationPass)
        manager.register_pass(AccessorNormalizationPass)
        assert manager.passes == [AccessorNormalizationPass]
        assert manager.run_all(get_call(x, age), PassContext(registry)) == MemberAccessIR(x, age)

    def test_cycle_is_reported(self, registry, x):
        manager = PassManager()
        manager.register_pass(_CycleA)
        manager.register_pass(_CycleB)
        with pytest.raises(RuntimeError, match="Circular dependency"):
            manager.run_all(x, PassContext(registry))

    def test_missing_analysis(self, registry):
        with pytest.raises(RuntimeError, match="not available"):
            PassContext(registry).get_analysis(_RecordingPass)

    def test_dump_ir_logs_tree(self, registry, x, person_type, caplog):
        age = prop(registry, person_type, "Age")
        manager = PassManager()
        manager.register_pass(AccessorNormalizationPass)
        with caplog.at_level(logging.INFO, logger="exprnorm.passes.base"):
            manager.run_all(get_call(x, age), PassContext(registry), dump_ir=True)
        assert "After AccessorNormalizationPass:" in caplog.text
        assert '(member (parameter "x") "Age")' in caplog.text
