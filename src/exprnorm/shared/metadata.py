"""
Metadata Layer

Method and property/indexer descriptors, the MetadataProvider interface the
normalizer consumes, and TypeRegistry: explicit descriptor tables built once by
whatever front-end constructs accessor calls.

Descriptors are identity-compared. Two MethodDescriptors with the same fields
are still different methods, the same way two reflection handles for distinct
members are; the normalizer's round-trip check relies on this.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import MetadataError
from .types import Type, VOID, class_type
from ..utils.config import GETTER_PREFIX, SETTER_PREFIX, DEFAULT_INDEXER_NAME

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class MethodDescriptor:
    """
    A method on a declaring type.

    is_special_name marks methods serving a non-ordinary-call role
    (property/indexer accessors, operators).
    """
    name: str
    declaring_type: Type
    parameter_types: Tuple[Type, ...]
    return_type: Type
    is_special_name: bool = False
    is_static: bool = False

    def __post_init__(self):
        object.__setattr__(self, "parameter_types", tuple(self.parameter_types))

    def __repr__(self) -> str:
        params = ", ".join(str(t) for t in self.parameter_types)
        return f"MethodDescriptor({self.declaring_type}.{self.name}({params}) -> {self.return_type})"


@dataclass(frozen=True, eq=False)
class PropertyDescriptor:
    """
    A property (no index parameters) or indexer (one or more index parameters).

    property_type is the value type; getter/setter are the backing accessors.
    """
    name: str
    declaring_type: Type
    property_type: Type
    index_parameter_types: Tuple[Type, ...] = ()
    getter: Optional[MethodDescriptor] = None
    setter: Optional[MethodDescriptor] = None
    is_public: bool = True
    is_static: bool = False

    def __post_init__(self):
        object.__setattr__(self, "index_parameter_types", tuple(self.index_parameter_types))

    @property
    def is_indexer(self) -> bool:
        return len(self.index_parameter_types) > 0

    def get_accessor(self) -> Optional[MethodDescriptor]:
        return self.getter

    def set_accessor(self) -> Optional[MethodDescriptor]:
        return self.setter

    def __repr__(self) -> str:
        if self.is_indexer:
            params = ", ".join(str(t) for t in self.index_parameter_types)
            return f"PropertyDescriptor({self.declaring_type}.{self.name}[{params}]: {self.property_type})"
        return f"PropertyDescriptor({self.declaring_type}.{self.name}: {self.property_type})"


class MetadataProvider(ABC):
    """
    Read-only metadata collaborator consumed by the normalizer.

    Implementations must be safe for concurrent reads.
    """

    @abstractmethod
    def lookup_instance_property(self, declaring_type: Type, name: str) -> Optional[PropertyDescriptor]:
        """Exact-name search over public and non-public instance properties."""
        raise NotImplementedError

    @abstractmethod
    def lookup_indexer(self, declaring_type: Type, name: str, value_type: Type,
                       index_parameter_types: Sequence[Type]) -> Optional[PropertyDescriptor]:
        """Overload resolution by name, value type and ordered index parameter types."""
        raise NotImplementedError


@dataclass
class TypeTable:
    """Members declared on one type."""
    type: Type
    properties: List[PropertyDescriptor] = field(default_factory=list)
    methods: List[MethodDescriptor] = field(default_factory=list)


class TypeBuilder:
    """
    Declares members on one type of a TypeRegistry.

    property()/indexer() generate the special-name get_/set_ accessors the way
    a compiler would; method() registers anything else, including hand-written
    methods that merely look like accessors.
    """

    def __init__(self, table: TypeTable):
        self._table = table

    @property
    def type(self) -> Type:
        return self._table.type

    def property(self, name: str, property_type: Type, getter: bool = True, setter: bool = True,
                 public: bool = True, static: bool = False) -> PropertyDescriptor:
        if any(p.name == name and not p.is_indexer for p in self._table.properties):
            raise MetadataError(f"property `{name}` is already defined on `{self.type}`")
        get_method = self._accessor(GETTER_PREFIX + name, (), property_type, static) if getter else None
        set_method = self._accessor(SETTER_PREFIX + name, (property_type,), VOID, static) if setter else None
        prop = PropertyDescriptor(
            name=name,
            declaring_type=self.type,
            property_type=property_type,
            getter=get_method,
            setter=set_method,
            is_public=public,
            is_static=static,
        )
        self._table.properties.append(prop)
        logger.debug(f"Defined property {self.type}.{name}: {property_type}")
        return prop

    def indexer(self, index_types: Sequence[Type], value_type: Type, name: str = DEFAULT_INDEXER_NAME,
                getter: bool = True, setter: bool = True, public: bool = True) -> PropertyDescriptor:
        index_types = tuple(index_types)
        if not index_types:
            raise MetadataError(f"indexer `{name}` on `{self.type}` needs at least one index parameter")
        for p in self._table.properties:
            if p.name == name and p.index_parameter_types == index_types:
                raise MetadataError(
                    f"indexer `{name}[{', '.join(str(t) for t in index_types)}]` is already defined on `{self.type}`"
                )
        get_method = self._accessor(GETTER_PREFIX + name, index_types, value_type, False) if getter else None
        set_method = self._accessor(SETTER_PREFIX + name, index_types + (value_type,), VOID, False) if setter else None
        prop = PropertyDescriptor(
            name=name,
            declaring_type=self.type,
            property_type=value_type,
            index_parameter_types=index_types,
            getter=get_method,
            setter=set_method,
            is_public=public,
        )
        self._table.properties.append(prop)
        logger.debug(f"Defined indexer {self.type}.{name}{list(map(str, index_types))}: {value_type}")
        return prop

    def method(self, name: str, parameter_types: Sequence[Type], return_type: Type,
               special_name: bool = False, static: bool = False) -> MethodDescriptor:
        return self._add_method(name, tuple(parameter_types), return_type, special_name, static)

    def _accessor(self, name: str, parameter_types: Tuple[Type, ...], return_type: Type,
                  static: bool) -> MethodDescriptor:
        return self._add_method(name, parameter_types, return_type, True, static)

    def _add_method(self, name: str, parameter_types: Tuple[Type, ...], return_type: Type,
                    special_name: bool, static: bool) -> MethodDescriptor:
        for m in self._table.methods:
            if m.name == name and m.parameter_types == parameter_types:
                raise MetadataError(f"method `{name}` with the same parameters is already defined on `{self.type}`")
        method = MethodDescriptor(
            name=name,
            declaring_type=self.type,
            parameter_types=parameter_types,
            return_type=return_type,
            is_special_name=special_name,
            is_static=static,
        )
        self._table.methods.append(method)
        return method


class TypeRegistry(MetadataProvider):
    """
    Explicit descriptor tables keyed by declaring type.

    Populate it up front (define_type + TypeBuilder), then hand it to the
    normalizer; lookups never mutate it.
    """

    def __init__(self):
        self._tables: Dict[Type, TypeTable] = {}

    def define_type(self, name: str) -> TypeBuilder:
        t = class_type(name)
        table = self._tables.get(t)
        if table is None:
            table = TypeTable(t)
            self._tables[t] = table
        return TypeBuilder(table)

    def properties(self, declaring_type: Type) -> List[PropertyDescriptor]:
        table = self._tables.get(declaring_type)
        return list(table.properties) if table else []

    def methods(self, declaring_type: Type) -> List[MethodDescriptor]:
        table = self._tables.get(declaring_type)
        return list(table.methods) if table else []

    def method(self, declaring_type: Type, name: str,
               parameter_types: Optional[Sequence[Type]] = None) -> Optional[MethodDescriptor]:
        """Find a method by name (and parameter types, when overloaded)."""
        wanted = tuple(parameter_types) if parameter_types is not None else None
        for m in self.methods(declaring_type):
            if m.name == name and (wanted is None or m.parameter_types == wanted):
                return m
        return None

    def lookup_instance_property(self, declaring_type: Type, name: str) -> Optional[PropertyDescriptor]:
        for p in self.properties(declaring_type):
            if p.name == name and not p.is_indexer and not p.is_static:
                return p
        return None

    def lookup_indexer(self, declaring_type: Type, name: str, value_type: Type,
                       index_parameter_types: Sequence[Type]) -> Optional[PropertyDescriptor]:
        wanted = tuple(index_parameter_types)
        for p in self.properties(declaring_type):
            if p.name == name and p.property_type == value_type and p.index_parameter_types == wanted:
                return p
        return None
