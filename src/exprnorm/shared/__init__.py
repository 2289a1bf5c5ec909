"""
Shared components: static types, metadata descriptors, errors.
"""

from .types import (
    Type, TypeKind, BinaryOp, UnaryOp, class_type, type_of_value,
    I32, I64, F64, BOOL, STR, OBJECT, VOID,
)
from .metadata import (
    MethodDescriptor, PropertyDescriptor, MetadataProvider, TypeRegistry, TypeBuilder,
)
from .errors import ExprNormError, PreconditionViolation, MetadataError, ExprNormImplementationError
