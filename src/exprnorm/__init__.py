"""
exprnorm: canonicalizes property/indexer accessor calls in expression trees.

    >>> result = normalize(tree, registry)

See passes/accessor_normalization.py for the rewrite rules.
"""

from .passes.accessor_normalization import normalize, AccessorNormalizer, AccessorNormalizationPass
from .passes.base import BasePass, PassContext, PassManager
from .shared.errors import PreconditionViolation, ExprNormError, MetadataError
from .shared.metadata import MetadataProvider, TypeRegistry

__version__ = "0.1.0"

__all__ = [
    "normalize", "AccessorNormalizer", "AccessorNormalizationPass",
    "BasePass", "PassContext", "PassManager",
    "PreconditionViolation", "ExprNormError", "MetadataError",
    "MetadataProvider", "TypeRegistry",
]
