"""
Base Pass System

Passes take an expression tree and return a (possibly new) tree. They never
mutate their input; unchanged subtrees are shared with it.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Set, Type

from ..ir.nodes import ExpressionIR
from ..shared.metadata import MetadataProvider

logger = logging.getLogger("exprnorm.passes.base")


class PassContext:
    """
    Context shared by the passes of one run.

    Holds the metadata collaborator (read-only for passes) and analysis
    results published by passes for later ones.
    """

    def __init__(self, metadata: MetadataProvider):
        self.metadata = metadata
        self._analysis_results: Dict[Type['BasePass'], Any] = {}

    def get_analysis(self, pass_class: Type['BasePass']) -> Any:
        """Get analysis results from a pass"""
        if pass_class not in self._analysis_results:
            raise RuntimeError(f"Analysis {pass_class.__name__} not available")
        return self._analysis_results[pass_class]

    def set_analysis(self, pass_class: Type['BasePass'], results: Any) -> None:
        """Store analysis results"""
        self._analysis_results[pass_class] = results


class BasePass(ABC):
    """
    Base class for all passes.

    - Explicit dependencies via `requires`
    - Pass results stored in PassContext (not in pass)
    - Immutable IR (passes return new IR)
    """
    requires: List[Type['BasePass']] = []  # Dependencies (empty by default)

    @abstractmethod
    def run(self, root: ExpressionIR, ctx: PassContext) -> ExpressionIR:
        """
        Run pass on an expression tree.

        Returns: New tree (the input tree itself when nothing changed)
        """
        raise NotImplementedError


class PassManager:
    """
    Pass manager with dependency resolution.

    - Automatic dependency resolution (topological sort)
    - Passes run in dependency order
    - Single PassContext shared across all passes
    """

    def __init__(self):
        self.passes: List[Type[BasePass]] = []
        self._dependency_graph: Dict[Type[BasePass], Set[Type[BasePass]]] = {}

    def register_pass(self, pass_class: Type[BasePass]) -> None:
        """Register a pass. Registering the same pass again is a no-op."""
        if pass_class in self._dependency_graph:
            return
        self.passes.append(pass_class)
        self._dependency_graph[pass_class] = set(pass_class.requires)

    def run_all(self, root: ExpressionIR, ctx: PassContext, dump_ir: bool = False) -> ExpressionIR:
        """
        Run all passes in dependency order.

        Args:
            root: Input tree
            ctx: Pass context
            dump_ir: If True, log the tree's S-expression after each pass
        """
        for pass_class in self._topological_sort():
            pass_name = pass_class.__name__
            logger.debug(f"Running {pass_name}")
            root = pass_class().run(root, ctx)

            if dump_ir:
                from ..ir.serialization import serialize_ir
                logger.info(f"After {pass_name}:\n{serialize_ir(root)}")

        return root

    def _topological_sort(self) -> List[Type[BasePass]]:
        """Topological sort of passes by dependencies"""
        for pass_class in self.passes:
            for dependency in pass_class.requires:
                if dependency not in self._dependency_graph:
                    raise RuntimeError(
                        f"{pass_class.__name__} requires unregistered pass {dependency.__name__}"
                    )

        in_degree = {p: len(self._dependency_graph[p]) for p in self.passes}
        queue = [p for p, degree in in_degree.items() if degree == 0]
        result = []

        while queue:
            pass_class = queue.pop(0)
            result.append(pass_class)

            for other_pass in self.passes:
                if pass_class in self._dependency_graph[other_pass]:
                    in_degree[other_pass] -= 1
                    if in_degree[other_pass] == 0:
                        queue.append(other_pass)

        if len(result) != len(self.passes):
            raise RuntimeError("Circular dependency detected in passes")

        return result
