"""
gi_binding_gen - Haskell binding generation for introspected C libraries

Turns a metadata catalog of a GObject-style C library (constants, enums,
functions, object hierarchies, interfaces, signals) into one Haskell module
per namespace: foreign imports over C types, wrappers marshalling between
native and Haskell values, and capability classes for safe upcasts.
"""

from .ir import (
    Name, BasicType, Direction, Transfer, Scope, FunctionFlag,
    TBasicType, TArray, TGList, TGSList, TGHash, TError, TInterface, Type,
    Arg, Callable, Field, Constant, Function, EnumMember, Enumeration, Flags,
    Callback, Struct, Union_, Boxed, Signal, Object, Interface, API, Catalog,
)
from .errors import (
    GenerationError, UnresolvableReferenceError, ConversionError, NamingError,
    HierarchyError,
)
from .config import Config
from .codegen import CodeGen
from .types import TypeMapper, TypeRep
from .hierarchy import Hierarchy, HierarchyGenerator, derive_ancestry
from .func import FuncGenerator
from .callback import SignalGenerator
from .enum import EnumGenerator
from .struct import StructGenerator
from .generator import Generator

__all__ = [
    'Name', 'BasicType', 'Direction', 'Transfer', 'Scope', 'FunctionFlag',
    'TBasicType', 'TArray', 'TGList', 'TGSList', 'TGHash', 'TError', 'TInterface', 'Type',
    'Arg', 'Callable', 'Field', 'Constant', 'Function', 'EnumMember', 'Enumeration', 'Flags',
    'Callback', 'Struct', 'Union_', 'Boxed', 'Signal', 'Object', 'Interface', 'API', 'Catalog',
    'GenerationError', 'UnresolvableReferenceError', 'ConversionError', 'NamingError',
    'HierarchyError',
    'Config',
    'CodeGen',
    'TypeMapper', 'TypeRep',
    'Hierarchy', 'HierarchyGenerator', 'derive_ancestry',
    'FuncGenerator',
    'SignalGenerator',
    'EnumGenerator',
    'StructGenerator',
    'Generator',
]
